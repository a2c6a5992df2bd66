"""
Mapping from medicine identifier to its current schedule.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional, Tuple

from .errors import NotFound
from .models import Schedule


def medicine_key(name: str) -> str:
    return name.strip().lower()


class ScheduleStore:
    def __init__(self, lock: Optional[threading.RLock] = None):
        # Shared with MedicineCabinet so reads never interleave with a build.
        self.lock = lock or threading.RLock()
        self._schedules: Dict[str, Schedule] = {}

    def put(self, medicine: str, schedule: Schedule) -> Optional[Schedule]:
        """Insert or replace; returns the schedule that was replaced, if any."""
        with self.lock:
            key = medicine_key(medicine)
            previous = self._schedules.get(key)
            self._schedules[key] = schedule
            return previous

    def get(self, medicine: str) -> Schedule:
        with self.lock:
            try:
                return self._schedules[medicine_key(medicine)]
            except KeyError:
                raise NotFound(medicine_key(medicine)) from None

    def find(self, medicine: str) -> Optional[Schedule]:
        with self.lock:
            return self._schedules.get(medicine_key(medicine))

    def all(self) -> List[Tuple[str, Schedule]]:
        with self.lock:
            return list(self._schedules.items())

    def __contains__(self, medicine: object) -> bool:
        if not isinstance(medicine, str):
            return False
        with self.lock:
            return medicine_key(medicine) in self._schedules

    def __len__(self) -> int:
        with self.lock:
            return len(self._schedules)
