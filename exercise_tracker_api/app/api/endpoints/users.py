"""
User endpoints.

Register users by username and list everyone registered so far.
Registration accepts a JSON or form body and is idempotent per
username.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from ...core.errors import PersistenceError, ServiceError
from ...schemas import parse_payload
from ...schemas.user import UserCreate, UserRead
from ...services.user_service import UserService
from ..deps import error_response, get_user_service, read_body, server_error


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=UserRead)
async def register_user(
    request: Request,
    service: UserService = Depends(get_user_service),
):
    """Register a username, or return the existing user with that name."""
    try:
        data = parse_payload(UserCreate, await read_body(request))
        return await service.register(data)
    except PersistenceError:
        logger.exception("Failed to register user")
        return server_error("Server error creating user")
    except ServiceError as e:
        return error_response(e)


@router.get("", response_model=List[UserRead])
async def list_users(service: UserService = Depends(get_user_service)):
    """List all users as ``{username, id}`` pairs."""
    try:
        return await service.list_users()
    except PersistenceError:
        logger.exception("Failed to list users")
        return server_error("Server error fetching users")
