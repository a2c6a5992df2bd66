"""
Centralized engine defaults.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List


WEEKDAYS: List[str] = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

# H:mm or HH:mm, hour 0-23, minute 0-59
TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")

MINUTES_PER_DAY = 24 * 60


@dataclass
class EngineConfig:
    tick_seconds: float = 60.0  # reminder scanner period
    shift_minutes: int = 10  # step used when a requested slot is taken
    minutes_per_day: int = MINUTES_PER_DAY  # one full conflict-resolution cycle
    slot_separator: str = "-"
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"
