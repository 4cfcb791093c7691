"""
ISO-8601 week helpers.

Weeks start on Monday and week 1 is the week holding the year's first
Thursday. Week-keys are formatted "YYYY-Www" where YYYY is the ISO week-year,
which differs from the calendar year around New Year.
"""

import math
import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

from resourceplanner.platform.logging import get_logger

logger = get_logger(__name__)

DateLike = Union[date, datetime]

WEEK_KEY_PATTERN = re.compile(r"^(\d{4})-W(\d{2})$")


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _thursday_of(value: DateLike) -> date:
    day = _as_date(value)
    # isoweekday(): Monday=1 .. Sunday=7
    return day + timedelta(days=4 - day.isoweekday())


def week_tuple(value: DateLike) -> Tuple[int, int]:
    """(ISO week-year, ISO week number), both taken from the week's Thursday."""
    thursday = _thursday_of(value)
    day_of_year = (thursday - date(thursday.year, 1, 1)).days + 1
    return thursday.year, math.ceil(day_of_year / 7)


def week_number(value: DateLike) -> int:
    return week_tuple(value)[1]


def week_key(value: DateLike) -> str:
    year, number = week_tuple(value)
    return f"{year}-W{number:02d}"


def monday_of(value: DateLike) -> date:
    day = _as_date(value)
    return day - timedelta(days=day.isoweekday() - 1)


def parse_week_key(key: str) -> Optional[Tuple[int, int]]:
    """Split a week-key into (year, week); None when it is not well formed."""
    match = WEEK_KEY_PATTERN.match(key.strip()) if isinstance(key, str) else None
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def parse_date(value: object) -> Optional[date]:
    """
    Coerce a request or storage value into a date.

    Accepts dates, datetimes and ISO-8601 strings (with or without a time
    part or trailing "Z"). Returns None for absent or malformed input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            logger.warning("Ignoring malformed date", value=value)
            return None
    logger.warning("Ignoring unsupported date value", value=repr(value))
    return None
