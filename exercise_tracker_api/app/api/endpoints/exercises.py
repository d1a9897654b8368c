"""
Exercise endpoints.

Both routes hang off a user: ``POST /users/{user_id}/exercises`` adds
an entry to the user's log and ``GET /users/{user_id}/logs`` returns
the log, optionally narrowed by an inclusive ``from``/``to`` date range
and capped by ``limit``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ...core.errors import PersistenceError, ServiceError
from ...schemas import parse_payload
from ...schemas.exercise import ExerciseCreate, ExerciseLog, ExerciseRead, LogQuery
from ...services.exercise_service import ExerciseService
from ..deps import error_response, get_exercise_service, read_body, server_error


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{user_id}/exercises", response_model=ExerciseRead)
async def add_exercise(
    user_id: str,
    request: Request,
    service: ExerciseService = Depends(get_exercise_service),
):
    """Add an exercise for a user.

    The body carries ``description``, ``duration`` (minutes, numeric or
    numeric text) and an optional ``date``; today is used when the date
    is omitted.
    """
    try:
        data = parse_payload(ExerciseCreate, await read_body(request))
        return await service.add_exercise(user_id, data)
    except PersistenceError:
        logger.exception("Failed to add exercise for user %s", user_id)
        return server_error("Server error adding exercise")
    except ServiceError as e:
        return error_response(e)


@router.get("/{user_id}/logs", response_model=ExerciseLog)
async def get_log(
    user_id: str,
    from_: Optional[str] = Query(None, alias="from", description="Earliest date, inclusive"),
    to: Optional[str] = Query(None, description="Latest date, inclusive"),
    limit: Optional[str] = Query(None, description="Maximum number of entries"),
    service: ExerciseService = Depends(get_exercise_service),
):
    """Return a user's exercise log.

    Dates that cannot be parsed are reported as errors; a ``limit``
    that is missing, zero or not a number means no limit.
    """
    try:
        # The user lookup comes first so an unknown user is reported
        # before a malformed date range.
        user = await service.users.get_user(user_id)
        query = parse_payload(LogQuery, {"from": from_, "to": to, "limit": limit})
        return await service.get_log(user, query)
    except PersistenceError:
        logger.exception("Failed to fetch exercise log for user %s", user_id)
        return server_error("Server error fetching exercise log")
    except ServiceError as e:
        return error_response(e)
