"""Date and time helpers shared by the task model, parser and engine.

Only two input formats are understood:

- ``yyyy-MM-dd HHmm`` (for example ``2019-12-02 1800``)
- ``yyyy-MM-dd`` (for example ``2019-12-02``)

Both require exact digit counts; ``strptime`` alone would accept
``2019-1-2``, so every format is gated by a regular expression first.
"""

import re
from datetime import date, datetime, time
from typing import Optional, Union


DATETIME_FORMAT = "%Y-%m-%d %H%M"
DATE_FORMAT = "%Y-%m-%d"

DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{4}$")
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

Moment = Union[date, datetime]


def parse_datetime(text: str) -> Optional[datetime]:
    """Parse ``yyyy-MM-dd HHmm`` text.

    Args:
        text: Raw text, surrounding whitespace is ignored

    Returns:
        The parsed datetime, or None if the text is not in that format
    """
    text = text.strip()
    if not DATETIME_RE.match(text):
        return None
    try:
        return datetime.strptime(text, DATETIME_FORMAT)
    except ValueError:
        return None


def parse_date(text: str) -> Optional[date]:
    """Parse ``yyyy-MM-dd`` text.

    Args:
        text: Raw text, surrounding whitespace is ignored

    Returns:
        The parsed date, or None if the text is not a valid calendar date
    """
    text = text.strip()
    if not DATE_RE.match(text):
        return None
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None


def parse_moment(text: str) -> Optional[Moment]:
    """Parse text as a date-time first, then as a date.

    Returns:
        A datetime, a date, or None if neither format matches
    """
    parsed = parse_datetime(text)
    if parsed is not None:
        return parsed
    return parse_date(text)


def calendar_date(value: Moment) -> date:
    """Return the calendar date component of a moment."""
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of(value: Moment) -> datetime:
    """Return the earliest instant a moment covers (midnight for dates)."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def end_of(value: Moment) -> datetime:
    """Return the latest instant a moment covers (end of day for dates)."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.max)


def format_date(value: date) -> str:
    """Format a date as ``Dec 2 2019``."""
    return f"{value:%b} {value.day} {value.year}"


def format_moment(value: Moment) -> str:
    """Format a moment as ``Dec 2 2019`` or ``Dec 2 2019 18:00``."""
    if isinstance(value, datetime):
        return f"{format_date(value.date())} {value:%H:%M}"
    return format_date(value)
