from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Dict

# A time entry as the API returns it. Fields we don't know about are passed
# through untouched.
TimeEntry = Dict[str, Any]

IDENTITY_FIELDS = ('guid', 'uid', 'id', 'at')


@dataclass
class DayWindow:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class Config:
    token: str
    base_url: str
    time_zone: tzinfo
