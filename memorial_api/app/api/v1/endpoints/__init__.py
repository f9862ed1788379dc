"""
Endpoint subpackage for API v1.

Each module defines an APIRouter for one domain (guestbook, students);
the routers are aggregated in ``router.py``.
"""
