"""
Time-of-day arithmetic on "HH:mm" strings and weekday name handling.
"""

from __future__ import annotations

from datetime import datetime
from typing import Tuple

from .config import MINUTES_PER_DAY, TIME_PATTERN, WEEKDAYS
from .errors import InvalidFormat


def parse_time(value: str) -> Tuple[int, int]:
    if not isinstance(value, str):
        raise InvalidFormat(value)
    match = TIME_PATTERN.match(value.strip())
    if not match:
        raise InvalidFormat(value)
    return int(match.group(1)), int(match.group(2))


def format_time(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def normalize_time(value: str) -> str:
    """Canonical zero-padded form, e.g. ``"9:05" -> "09:05"``."""
    return format_time(*parse_time(value))


def to_minutes(value: str) -> int:
    hour, minute = parse_time(value)
    return hour * 60 + minute


def add_minutes(value: str, delta: int) -> str:
    # Python's modulo keeps negative deltas inside the day as well.
    total = (to_minutes(value) + delta) % MINUTES_PER_DAY
    return format_time(total // 60, total % 60)


def normalize_day(day: str) -> str:
    """Trim and case-normalize a weekday name: ``" WEDNESDAY" -> "Wednesday"``."""
    return day.strip().capitalize()


def is_weekday(day: str) -> bool:
    return normalize_day(day) in WEEKDAYS


def weekday_name(moment: datetime) -> str:
    # Indexing avoids the host locale that strftime("%A") would use.
    return WEEKDAYS[moment.weekday()]


def clock_time(moment: datetime) -> str:
    return format_time(moment.hour, moment.minute)
