"""
Pydantic schema definitions for API payloads.

Request structs turn loosely typed bodies and query strings (numbers
and dates sent as text, form fields) into validated values before they
reach the services.  ``parse_payload`` runs that validation and reports
the first failure as a ``ValidationError`` carrying a client‑facing
message.
"""

from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _first_message(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # Messages raised from our own validators are carried in ``ctx``
    # without pydantic's "Value error, " prefix.
    cause = (first.get("ctx") or {}).get("error")
    if cause is not None:
        return str(cause)
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def parse_payload(model: Type[ModelT], data: Any) -> ModelT:
    """Validate ``data`` against ``model`` or raise ``ValidationError``."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(_first_message(exc)) from exc


def is_blank(value: Any) -> bool:
    """True for values a client would consider "not supplied"."""
    return value is None or (isinstance(value, str) and not value.strip())
