"""
Process-wide set of claimed day/time slots.

Callers that share a registry between threads serialize access through
the lock owned by :class:`medsched.cabinet.MedicineCabinet`.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Set, Tuple

from .config import EngineConfig
from .models import Schedule
from .timeslot import normalize_day, normalize_time


class SlotRegistry:
    def __init__(self, cfg: Optional[EngineConfig] = None, taken: Iterable[Tuple[str, str]] = ()):
        self.cfg = cfg or EngineConfig()
        self._keys: Set[str] = set()
        for day, time in taken:
            self.commit(day, time)

    def key(self, day: str, time: str) -> str:
        return f"{normalize_day(day)}{self.cfg.slot_separator}{normalize_time(time)}"

    def contains(self, day: str, time: str) -> bool:
        return self.key(day, time) in self._keys

    def commit(self, day: str, time: str) -> None:
        self._keys.add(self.key(day, time))

    def release(self, day: str, time: str) -> None:
        self._keys.discard(self.key(day, time))

    def release_schedule(self, schedule: Schedule) -> None:
        for day, time in schedule.slots():
            self.release(day, time)

    def commit_schedule(self, schedule: Schedule) -> None:
        for day, time in schedule.slots():
            self.commit(day, time)

    def keys(self) -> List[str]:
        return sorted(self._keys)

    def __contains__(self, slot: object) -> bool:
        if isinstance(slot, tuple) and len(slot) == 2:
            return self.contains(*slot)
        return slot in self._keys

    def __len__(self) -> int:
        return len(self._keys)
