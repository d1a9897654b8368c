"""
Shared dependencies and response helpers for the route handlers.
"""

import logging
from typing import Any, Dict

from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse

from ..core.db import DocumentStore, get_store
from ..core.errors import ServiceError
from ..services.exercise_service import ExerciseService
from ..services.user_service import UserService


logger = logging.getLogger(__name__)

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_user_service(store: DocumentStore = Depends(get_store)) -> UserService:
    return UserService(store)


def get_exercise_service(store: DocumentStore = Depends(get_store)) -> ExerciseService:
    return ExerciseService(store)


async def read_body(request: Request) -> Dict[str, Any]:
    """Return the request body as a dictionary.

    JSON objects and form posts are both accepted.  Anything else,
    including malformed JSON or a JSON value that is not an object,
    yields an empty dictionary so that the request structs report the
    missing fields.
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}
    body = await request.body()
    if not body:
        return {}
    try:
        data = await request.json()
    except ValueError:
        logger.debug("Ignoring malformed JSON body on %s", request.url.path)
        return {}
    return data if isinstance(data, dict) else {}


def error_response(exc: ServiceError) -> JSONResponse:
    """Report a validation or lookup failure as an ordinary ``{"error"}`` body."""
    return JSONResponse(status_code=status.HTTP_200_OK, content={"error": exc.message})


def server_error(message: str) -> JSONResponse:
    """Generic server error; the underlying cause is only logged."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": message}
    )
