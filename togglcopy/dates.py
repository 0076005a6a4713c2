from __future__ import annotations

import re
from datetime import datetime, time, timedelta, tzinfo
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from togglcopy.errors import TimestampParseError, ZoneResolutionError
from togglcopy.model import DayWindow

# datetime can't go below microseconds, so this is the gap between a day's
# last representable instant and the next midnight.
RESOLUTION = timedelta(microseconds=1)

RFC3339 = re.compile(r'\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})', re.ASCII)


def resolve_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ZoneResolutionError(f'Unknown time zone: {name!r}') from e


def target_day(offset: int, zone: tzinfo, now: Optional[datetime] = None) -> datetime:
    """Return the current instant shifted by `offset` calendar days, expressed in `zone`."""

    now = now or datetime.now(zone)
    return now.astimezone(zone) + timedelta(days=offset)


def start_of_day(t: datetime) -> datetime:
    return datetime.combine(t.date(), time(), tzinfo=t.tzinfo)


def end_of_day(t: datetime) -> datetime:
    next_midnight = datetime.combine(t.date() + timedelta(days=1), time(), tzinfo=t.tzinfo)
    return next_midnight - RESOLUTION


def day_window(t: datetime) -> DayWindow:
    return DayWindow(start=start_of_day(t), end=end_of_day(t))


def next_day(t: datetime) -> datetime:
    """Advance `t` by one calendar day.

    Arithmetic on an aware datetime keeps the wall clock, so 12:00 stays
    12:00 across a DST transition and the UTC offset is recomputed.
    """

    return t + timedelta(days=1)


def parse_timestamp(value: Any) -> datetime:
    """Parse an RFC3339 timestamp as the API sends it.

    Raises:
        TimestampParseError: value is not a string or not an RFC3339 timestamp with a UTC offset.
    """

    if not isinstance(value, str) or not RFC3339.fullmatch(value):
        raise TimestampParseError(f'Expected an RFC3339 timestamp, got {value!r}')

    # The pattern lets through impossible dates such as month 13.
    try:
        return datetime.fromisoformat(value.upper().replace('Z', '+00:00'))
    except ValueError as e:
        raise TimestampParseError(f'Invalid RFC3339 timestamp: {value!r}') from e


def format_timestamp(t: datetime, timespec: str = 'auto') -> str:
    s = t.isoformat(timespec=timespec)
    if t.utcoffset() == timedelta(0) and s.endswith('+00:00'):
        s = s[:-len('+00:00')] + 'Z'
    return s
