"""
Business logic for exercises and exercise logs.

``ExerciseService`` records exercises against existing users and
builds a user's log: the exercises matching an optional date range,
capped by an optional limit, with dates rendered for display.
"""

import logging
from typing import Any, Dict

from ..core.dates import format_date, parse_number, utcnow
from ..core.db import DocumentStore
from ..schemas.exercise import ExerciseCreate, ExerciseLog, ExerciseRead, LogEntry, LogQuery
from ..schemas.user import UserRead
from .user_service import UserService


class ExerciseService:
    """Add exercises to users and query their logs."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.users = UserService(store)

    async def add_exercise(self, user_id: str, data: ExerciseCreate) -> ExerciseRead:
        """Store an exercise for ``user_id`` and return it merged with the user.

        ``data`` arrives with its description and duration validated.
        A missing user is reported as ``NotFoundError`` before the date
        is parsed; an unparseable date is a ``ValidationError``.
        Without a date the exercise is logged at the current time.
        """
        logger = logging.getLogger(__name__)
        user = await self.users.get_user(user_id)
        when = data.exercise_date() or utcnow()
        exercise = self.store.exercises.create(
            {
                "userId": user.id,
                "description": data.description,
                "duration": data.duration,
                "date": when,
            }
        )
        logger.info(
            "Added exercise %s for user %s (%s min)", exercise["id"], user.id, data.duration
        )
        return ExerciseRead(
            id=user.id,
            username=user.username,
            date=format_date(exercise["date"]),
            duration=data.duration,
            description=exercise["description"],
        )

    async def get_log(self, user: UserRead, query: LogQuery) -> ExerciseLog:
        """Return the log of ``user`` filtered by ``query``.

        The date bounds in ``query`` are already parsed, so the filter is
        only ever built from valid values.
        """
        filter: Dict[str, Any] = {"userId": user.id}
        bounds: Dict[str, Any] = {}
        if query.from_ is not None:
            bounds["$gte"] = query.from_
        if query.to is not None:
            bounds["$lte"] = query.to
        if bounds:
            filter["date"] = bounds

        exercises = self.store.exercises.find(filter, limit=query.limit)
        log = [
            LogEntry(
                description=doc["description"],
                duration=parse_number(doc["duration"]),
                date=format_date(doc["date"]),
            )
            for doc in exercises
        ]
        return ExerciseLog(id=user.id, username=user.username, count=len(log), log=log)
