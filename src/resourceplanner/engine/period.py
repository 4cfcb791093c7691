"""
Period normalization.

Dashboards ask for calendar periods ("this month", "this quarter") that
usually begin before today. Capacity judgments are about the work still
ahead, so a multi-week period that straddles today is pulled forward to the
Monday of the current ISO week, and every generated week-key list is filtered
against the current week as well.
"""

import math
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from resourceplanner.engine.iso_week import DateLike, monday_of, parse_week_key, week_key, week_tuple
from resourceplanner.engine.models import PeriodWindow
from resourceplanner.platform.logging import get_logger

logger = get_logger(__name__)

ONE_WEEK = timedelta(days=7)


def _today(now: DateLike) -> date:
    return now.date() if isinstance(now, datetime) else now


def normalize(
    start_date: Optional[date],
    end_date: Optional[date],
    now: DateLike,
) -> PeriodWindow:
    """
    Produce the current-date-aware window for a raw [start, end] range.

    The start moves to the current week's Monday only when the range
    straddles today, spans more than one week and begins before this week.
    """
    if start_date is None or end_date is None:
        return PeriodWindow(start_date, end_date)

    today = _today(now)
    current_week_start = monday_of(today)

    straddles_today = start_date <= today <= end_date
    is_multi_week = (end_date - start_date) > ONE_WEEK
    includes_past_weeks = start_date < current_week_start

    if straddles_today and is_multi_week and includes_past_weeks:
        excluded = (current_week_start - start_date) // ONE_WEEK
        logger.info(
            "Adjusted period for current date awareness",
            original_start=start_date.isoformat(),
            adjusted_start=current_week_start.isoformat(),
            excluded_past_weeks=excluded,
        )
        return PeriodWindow(
            start_date=current_week_start,
            end_date=end_date,
            is_forward_looking=True,
            excluded_past_weeks=excluded,
        )

    return PeriodWindow(start_date, end_date)


def period_multiplier(start_date: Optional[date], end_date: Optional[date]) -> int:
    """Number of weeks a range is worth when scaling weekly capacity; at least 1."""
    if start_date is None or end_date is None:
        return 1
    weeks = (end_date - start_date).days / 7
    return max(1, math.floor(weeks + 0.5))


def is_past_week(key: str, now: DateLike) -> bool:
    """True when the week-key lies strictly before the ISO week containing `now`."""
    parsed = parse_week_key(key)
    if parsed is None:
        return False
    return parsed < week_tuple(now)


def drop_past_weeks(keys: Sequence[str], now: DateLike) -> List[str]:
    """The single authoritative current-or-future week filter."""
    kept = [key for key in keys if not is_past_week(key, now)]
    if len(kept) != len(keys):
        logger.debug(
            "Removed past weeks from analysis",
            removed=len(keys) - len(kept),
            kept=kept,
        )
    return kept


def week_keys_in_range(
    start_date: Optional[date],
    end_date: Optional[date],
    now: DateLike,
) -> List[str]:
    """
    Ordered week-keys from the Monday of `start_date` through `end_date`,
    excluding weeks before the current one.
    """
    if start_date is None or end_date is None:
        return []

    keys = []
    current = monday_of(start_date)
    while current <= end_date:
        keys.append(week_key(current))
        current += ONE_WEEK

    return drop_past_weeks(keys, now)


def week_keys_for_window(window: PeriodWindow, now: DateLike) -> List[str]:
    return week_keys_in_range(window.start_date, window.end_date, now)
