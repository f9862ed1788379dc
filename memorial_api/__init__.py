"""
Top-level package for the memorial website backend.

The package provides no public exports; the FastAPI application and
everything it uses live in submodules under ``app``
(``memorial_api.app.main:app``).
"""

__all__ = []
