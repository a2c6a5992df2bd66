"""
Medicine list wiring: names -> schedule builder -> schedule store, plus the event history.

All mutations of the slot registry and the schedule store happen while
holding the single lock shared with the store, so the reminder scanner
only ever observes fully committed schedules.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd

from .config import EngineConfig
from .errors import DuplicateMedicine, InvalidName, NotFound
from .history import MedicineHistory
from .models import MedicineRecord, Schedule
from .registry import SlotRegistry
from .scheduling import AdjustCallback, ScheduleBuilder
from .store import ScheduleStore, medicine_key


def normalize_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise InvalidName("Medicine name cannot be empty")
    return medicine_key(name)


class MedicineCabinet:
    def __init__(
        self,
        cfg: Optional[EngineConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
        on_adjust: Optional[AdjustCallback] = None,
    ):
        self.cfg = cfg or EngineConfig()
        self.lock = threading.RLock()
        self.registry = SlotRegistry(self.cfg)
        self.store = ScheduleStore(lock=self.lock)
        self.builder = ScheduleBuilder(self.registry, self.cfg, on_adjust=on_adjust)
        self.history = MedicineHistory(self.cfg, clock=clock)
        self._medicines: Dict[str, MedicineRecord] = {}

    def add(
        self,
        name: str,
        dose_count: int,
        days: Sequence[str],
        times: Sequence[str],
        on_adjust: Optional[AdjustCallback] = None,
    ) -> Schedule:
        key = normalize_name(name)
        with self.lock:
            if key in self._medicines:
                raise DuplicateMedicine(key)
            schedule = self._assign(key, dose_count, days, times, on_adjust)
            self._medicines[key] = MedicineRecord(name=key, added_at=self.history.clock())
            self.history.record(key, "added")
            return schedule

    def rename(
        self,
        old: str,
        new: str,
        dose_count: int,
        days: Sequence[str],
        times: Sequence[str],
        on_adjust: Optional[AdjustCallback] = None,
    ) -> Schedule:
        """Replace ``old`` with ``new`` in the medicine list and schedule ``new``."""
        old_key = normalize_name(old)
        new_key = normalize_name(new)
        with self.lock:
            if old_key not in self._medicines:
                raise NotFound(old_key)
            if new_key == old_key:
                raise InvalidName("New medicine name cannot be the same as the old one")
            if new_key in self._medicines:
                raise DuplicateMedicine(new_key)
            schedule = self._assign(new_key, dose_count, days, times, on_adjust)
            del self._medicines[old_key]
            self.history.record(old_key, "deleted")
            self._medicines[new_key] = MedicineRecord(name=new_key, added_at=self.history.clock())
            self.history.record(new_key, "added")
            self.history.record(f"{old_key} -> {new_key}", "updated")
            return schedule

    def update_schedule(
        self,
        name: str,
        dose_count: int,
        days: Sequence[str],
        times: Sequence[str],
        on_adjust: Optional[AdjustCallback] = None,
    ) -> Schedule:
        key = normalize_name(name)
        with self.lock:
            if key not in self._medicines:
                raise NotFound(key)
            schedule = self._assign(key, dose_count, days, times, on_adjust)
            self.history.record(key, "updated")
            return schedule

    def delete(self, name: str) -> None:
        # The schedule itself is kept; schedules are only ever superseded.
        key = normalize_name(name)
        with self.lock:
            if key not in self._medicines:
                raise NotFound(key)
            del self._medicines[key]
            self.history.record(key, "deleted")

    def medicines(self) -> List[str]:
        with self.lock:
            return list(self._medicines)

    def records(self) -> List[MedicineRecord]:
        with self.lock:
            return list(self._medicines.values())

    def schedule_for(self, name: str) -> Schedule:
        return self.store.get(normalize_name(name))

    def _assign(
        self,
        key: str,
        dose_count: int,
        days: Sequence[str],
        times: Sequence[str],
        on_adjust: Optional[AdjustCallback],
    ) -> Schedule:
        previous = self.store.find(key)
        if previous is not None:
            self.registry.release_schedule(previous)
        try:
            schedule = self.builder.build(dose_count, days, times, on_adjust=on_adjust)
        except BaseException:
            if previous is not None:
                self.registry.commit_schedule(previous)
            raise
        self.store.put(key, schedule)
        return schedule

    def schedules_frame(self) -> pd.DataFrame:
        records = []
        for medicine, schedule in self.store.all():
            per_dose = len(schedule.days)
            for idx, (day, time) in enumerate(schedule.slots()):
                records.append({"medicine": medicine, "dose": idx // per_dose + 1, "day": day, "time": time})
        return pd.DataFrame.from_records(records, columns=["medicine", "dose", "day", "time"])
