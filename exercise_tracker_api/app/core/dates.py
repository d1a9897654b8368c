"""
Parsing and formatting helpers for exercise dates and durations.

All datetimes handled by the service are naive and expressed in UTC.
Timezone‑aware input is converted to UTC before the tzinfo is dropped.
"""

import math
from datetime import date, datetime, time, timezone
from typing import Any, Optional, Union

_DATE_ONLY_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%a %b %d %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)

Number = Union[int, float]

# SQLite INTEGER is a signed 64-bit value.
MAX_INTEGER = 2**63 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _parse_calendar_date(text: str) -> Optional[date]:
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _DATE_ONLY_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_date(value: Any, end_of_day: bool = False) -> datetime:
    """Parse user supplied date input into a naive UTC ``datetime``.

    Accepts ISO‑8601 dates and datetimes, a handful of common textual
    calendar formats and numeric epoch milliseconds.  When ``value``
    names a bare calendar date and ``end_of_day`` is true, the last
    instant of that day is returned instead of midnight, which makes an
    upper bound such as ``to=2024-01-31`` cover the whole day.

    Raises ``ValueError`` when the input cannot be parsed.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid date: {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError(f"Invalid date: {value!r}")
        try:
            return _naive_utc(datetime.fromtimestamp(value / 1000, tz=timezone.utc))
        except (OverflowError, OSError) as exc:
            raise ValueError(f"Invalid date: {value!r}") from exc
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.max if end_of_day else time.min)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid date: {value!r}")

    text = value.strip()
    day = _parse_calendar_date(text)
    if day is not None:
        return datetime.combine(day, time.max if end_of_day else time.min)

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _naive_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValueError(f"Invalid date: {value!r}") from None


def format_date(value: datetime) -> str:
    """Render a datetime in the weekday‑month‑day‑year form, e.g. ``Mon Jan 01 2024``."""
    # %Y is not zero-padded below year 1000 on every platform.
    return f"{value:%a %b %d} {value.year:04d}"


def parse_number(value: Any) -> Number:
    """Parse a numeric field that may arrive as text.

    Integral values are returned as ``int`` so that ``"30"`` and ``30.0``
    both come back as ``30``; integral values outside the 64-bit
    INTEGER range stay ``float`` so they can still be stored.  Raises
    ``ValueError`` for anything that is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, int):
        if abs(value) <= MAX_INTEGER:
            return value
        try:
            number = float(value)
        except OverflowError:
            raise ValueError(f"Not a number: {value!r}") from None
    elif isinstance(value, float):
        number = value
    elif isinstance(value, str):
        number = float(value.strip())
    else:
        raise ValueError(f"Not a number: {value!r}")
    if not math.isfinite(number):
        raise ValueError(f"Not a number: {value!r}")
    if number.is_integer() and abs(number) <= MAX_INTEGER:
        return int(number)
    return number
