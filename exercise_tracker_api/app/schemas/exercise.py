"""
Pydantic models for exercises and exercise logs.

``ExerciseCreate`` and ``LogQuery`` are request structs: they accept
the text values that arrive in form posts and query strings and
convert them to numbers and datetimes, failing with the messages the
API reports to clients.  The remaining models describe response
shapes, where dates are already rendered as display strings.
"""

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.dates import MAX_INTEGER, parse_date, parse_number
from ..core.errors import ValidationError
from . import is_blank


class ExerciseCreate(BaseModel):
    """Schema for adding an exercise to a user's log."""

    description: str = Field(..., example="run")
    duration: Union[int, float] = Field(..., example=30, description="Duration in minutes")
    # Kept as sent; ``exercise_date`` parses it once the user is known.
    date: Optional[Union[int, float, str]] = Field(None, example="2024-01-01")

    @model_validator(mode="before")
    @classmethod
    def require_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            data = {}
        if is_blank(data.get("description")) or is_blank(data.get("duration")):
            raise ValueError("Description and duration are required")
        return data

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: Any) -> str:
        return v if isinstance(v, str) else str(v)

    @field_validator("duration", mode="before")
    @classmethod
    def parse_duration(cls, v: Any) -> Union[int, float]:
        try:
            return parse_number(v)
        except ValueError:
            raise ValueError("Duration must be a number") from None

    @field_validator("date", mode="before")
    @classmethod
    def blank_date_is_none(cls, v: Any) -> Any:
        if is_blank(v) or isinstance(v, bool):
            return None
        if not isinstance(v, (int, float, str)):
            return str(v)
        return v

    def exercise_date(self) -> Optional[datetime]:
        """Parse ``date``; ``None`` when the client sent no date.

        Raises ``ValidationError`` when the date cannot be parsed.
        """
        if self.date is None:
            return None
        try:
            return parse_date(self.date)
        except ValueError:
            raise ValidationError("Invalid date format") from None


class ExerciseRead(BaseModel):
    """A user merged with the exercise that was just added."""

    id: str
    username: str
    date: str = Field(..., example="Mon Jan 01 2024")
    duration: Union[int, float]
    description: str


class LogQuery(BaseModel):
    """Query parameters of the exercise log endpoint.

    ``from`` and ``to`` are inclusive bounds; a ``to`` given as a bare
    calendar date covers that whole day.  ``limit`` of ``0`` means no
    limit, and anything that is not a positive number is read as ``0``.
    """

    from_: Optional[datetime] = Field(None, alias="from")
    to: Optional[datetime] = None
    limit: int = 0

    model_config = {
        "populate_by_name": True,
    }

    @field_validator("from_", mode="before")
    @classmethod
    def parse_from(cls, v: Any) -> Optional[datetime]:
        if is_blank(v):
            return None
        try:
            return parse_date(v)
        except ValueError:
            raise ValueError("Invalid 'from' date format") from None

    @field_validator("to", mode="before")
    @classmethod
    def parse_to(cls, v: Any) -> Optional[datetime]:
        if is_blank(v):
            return None
        try:
            return parse_date(v, end_of_day=True)
        except ValueError:
            raise ValueError("Invalid 'to' date format") from None

    @field_validator("limit", mode="before")
    @classmethod
    def parse_limit(cls, v: Any) -> int:
        if is_blank(v):
            return 0
        try:
            limit = int(parse_number(v))
        except ValueError:
            return 0
        return min(limit, MAX_INTEGER) if limit > 0 else 0


class LogEntry(BaseModel):
    description: str
    duration: Union[int, float]
    date: str


class ExerciseLog(BaseModel):
    """A user's filtered exercise log."""

    id: str
    username: str
    count: int
    log: List[LogEntry]
