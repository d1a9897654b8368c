"""
Top‑level API router.

Aggregates the domain routers under a unified prefix.  Exercise routes
are nested under a user's path, so both routers share the ``/users``
prefix.
"""

from fastapi import APIRouter

from .endpoints import exercises, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(exercises.router, prefix="/users", tags=["exercises"])
