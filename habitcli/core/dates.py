"""Calendar helpers — local calendar days and week windows.

All windows are naive datetimes in local time. Aware inputs are converted
to the local zone first so a completion near midnight lands on the day
the user saw on their clock.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from enum import Enum

from habitcli.core.errors import InvalidDateFormat

DAYS_IN_WEEK = 7
DAY_ID_FORMAT = "%Y-%m-%d"

_DAY_ID_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_LAST_MILLISECOND = timedelta(milliseconds=1)


class WeekMode(str, Enum):
    calendar = "calendar"  # Monday 00:00 through Sunday 23:59:59.999
    rolling = "rolling"  # reference day plus the six days before it


def to_local(moment: datetime | date | None = None) -> datetime:
    """Normalize to a naive local datetime. `None` means now."""
    if moment is None:
        return datetime.now()
    if not isinstance(moment, datetime):
        return datetime.combine(moment, time.min)
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def day_id(moment: datetime | date | None = None) -> str:
    """Local calendar day of `moment` as YYYY-MM-DD."""
    return to_local(moment).strftime(DAY_ID_FORMAT)


def parse_day_id(value: str) -> datetime:
    """Local midnight of a YYYY-MM-DD identifier. Raises InvalidDateFormat."""
    if not isinstance(value, str) or not _DAY_ID_RE.fullmatch(value):
        raise InvalidDateFormat(value)
    try:
        return datetime.combine(date.fromisoformat(value), time.min)
    except ValueError:
        raise InvalidDateFormat(value) from None


def week_bounds(moment: datetime | date | None = None) -> tuple[datetime, datetime]:
    """Monday 00:00:00.000 – Sunday 23:59:59.999 window containing `moment`."""
    local = to_local(moment)
    # isoweekday: Monday=1 … Sunday=7, so Sunday steps back six days.
    offset = 1 - local.isoweekday()
    start = datetime.combine(local.date() + timedelta(days=offset), time.min)
    end = start + timedelta(days=DAYS_IN_WEEK) - _LAST_MILLISECOND
    return start, end


def rolling_bounds(moment: datetime | date | None = None) -> tuple[datetime, datetime]:
    """Trailing seven-day window ending at the close of `moment`'s day."""
    local = to_local(moment)
    day_start = datetime.combine(local.date(), time.min)
    start = day_start - timedelta(days=DAYS_IN_WEEK - 1)
    end = day_start + timedelta(days=1) - _LAST_MILLISECOND
    return start, end


def window_bounds(
    moment: datetime | date | None = None,
    mode: WeekMode | str = WeekMode.calendar,
) -> tuple[datetime, datetime]:
    if WeekMode(mode) is WeekMode.rolling:
        return rolling_bounds(moment)
    return week_bounds(moment)


def window_label(
    moment: datetime | date | None = None,
    mode: WeekMode | str = WeekMode.calendar,
) -> str:
    start, end = window_bounds(moment, mode)
    return f"{day_id(start)} to {day_id(end)}"
