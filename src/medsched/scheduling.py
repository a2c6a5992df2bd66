"""
Scheduling algorithm: assign dose times to day slots, shifting forward past taken slots.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .config import EngineConfig
from .errors import ResourceExhausted
from .models import Adjustment, Schedule
from .registry import SlotRegistry
from .timeslot import add_minutes, is_weekday, normalize_day, normalize_time

logger = logging.getLogger(__name__)

AdjustCallback = Callable[[Adjustment], None]


class ScheduleBuilder:
    def __init__(
        self,
        registry: SlotRegistry,
        cfg: Optional[EngineConfig] = None,
        on_adjust: Optional[AdjustCallback] = None,
    ):
        self.registry = registry
        self.cfg = cfg or EngineConfig()
        self.on_adjust = on_adjust

    def build(
        self,
        dose_count: int,
        days: Sequence[str],
        requested_times: Sequence[str],
        on_adjust: Optional[AdjustCallback] = None,
    ) -> Schedule:
        """Commit ``dose_count x len(days)`` slots and return the resulting schedule.

        Each requested time is processed in input order. For every day the
        time is moved forward by ``cfg.shift_minutes`` until its slot is free;
        the (possibly shifted) time carries over as the starting point for the
        next day, and the value left after the last day becomes the dose time.
        Nothing stays committed if the build fails.
        """
        day_list = self._normalize_days(days)
        times = self._validate(dose_count, requested_times)
        notify = on_adjust or self.on_adjust

        committed: List[Tuple[str, str]] = []
        dose_times: List[str] = []
        try:
            for requested in times:
                time = requested
                for day in day_list:
                    time = self._first_free_time(day, time, notify)
                    self.registry.commit(day, time)
                    committed.append((day, time))
                dose_times.append(time)
        except BaseException:
            for day, time in committed:
                self.registry.release(day, time)
            raise

        return Schedule(dose_count=dose_count, dose_times=dose_times, days=day_list, committed=committed)

    def _first_free_time(self, day: str, start: str, notify: Optional[AdjustCallback]) -> str:
        time = start
        shifted = 0
        while self.registry.contains(day, time):
            if shifted >= self.cfg.minutes_per_day:
                raise ResourceExhausted(day, start)
            adjusted = add_minutes(time, self.cfg.shift_minutes)
            shifted += self.cfg.shift_minutes
            logger.info("Conflict on %s at %s, adjusted to %s", day, time, adjusted)
            if notify is not None:
                notify(Adjustment(day=day, original=time, adjusted=adjusted))
            time = adjusted
        return time

    def _normalize_days(self, days: Sequence[str]) -> List[str]:
        if isinstance(days, str) or not days:
            raise ValueError("At least one day is required")
        out: List[str] = []
        for raw in days:
            if not isinstance(raw, str) or not raw.strip():
                raise ValueError("Day cannot be empty")
            day = normalize_day(raw)
            if not is_weekday(day):
                logger.warning("%r is not a weekday name; reminders will never match it", raw)
            if day not in out:
                out.append(day)
        return out

    def _validate(self, dose_count: int, requested_times: Sequence[str]) -> List[str]:
        if isinstance(dose_count, bool) or not isinstance(dose_count, int) or dose_count <= 0:
            raise ValueError(f"Number of doses must be positive, got {dose_count!r}")
        if isinstance(requested_times, str):
            requested_times = [requested_times]
        if len(requested_times) != dose_count:
            raise ValueError(f"Expected {dose_count} dose time(s), got {len(requested_times)}")
        # Raises InvalidFormat before anything is committed.
        return [normalize_time(raw) for raw in requested_times]
