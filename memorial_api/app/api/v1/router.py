"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
When a new domain is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import guestbook, students

router = APIRouter()

router.include_router(guestbook.router, prefix="/guestbook", tags=["guestbook"])
router.include_router(students.router, prefix="/students", tags=["students"])
