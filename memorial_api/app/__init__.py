"""
Application package initializer.

``core`` holds configuration, logging, the write gate and shared
exceptions; ``stores`` the record and blob store backends; ``services``
the guestbook and student lookup logic; ``api`` the routes, with the
versioned JSON API under ``api/v1`` and the legacy single-URL routes in
``api/pages.py``.
"""

from .main import app  # noqa: F401
