"""
Pydantic schema definitions for API payloads.

Schemas are kept apart from the record store layout so the wire format
the website depends on does not change when a storage backend does.
"""
