"""
Typed containers used throughout the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, List, Tuple


@dataclass
class Schedule:
    dose_count: int
    dose_times: List[str]  # committed "HH:mm", one per dose
    days: List[str]  # normalized weekday names, input order
    # (day, time) pairs actually claimed, dose by dose then day by day.
    # Differs from days x dose_times once a shift carries over to a later day.
    committed: List[Tuple[str, str]] = field(default_factory=list)

    def slots(self) -> Iterator[Tuple[str, str]]:
        if self.committed:
            yield from self.committed
            return
        for time in self.dose_times:
            for day in self.days:
                yield day, time

    def applies_on(self, day: str) -> bool:
        wanted = day.strip().lower()
        return any(d.lower() == wanted for d in self.days)

    def __str__(self) -> str:
        return (
            f"Schedule {{Doses per day = {self.dose_count}, "
            f"Times = {', '.join(self.dose_times)}, Days = {', '.join(self.days)}}}"
        )


@dataclass(frozen=True)
class Adjustment:
    """Notice emitted each time a requested time is shifted off a taken slot."""

    day: str
    original: str
    adjusted: str


@dataclass(frozen=True)
class Reminder:
    medicine: str
    dose_time: str
    day: str
    fired_at: datetime

    @property
    def message(self) -> str:
        return f"Reminder: It's time to take your medicine: {self.medicine} at {self.dose_time}"


@dataclass(frozen=True)
class HistoryEntry:
    name: str
    action: str  # added / updated / deleted
    timestamp: str


@dataclass
class MedicineRecord:
    name: str
    added_at: datetime = field(default_factory=datetime.now)
