"""
Periodic scan of every stored schedule against the host clock.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .config import EngineConfig
from .models import Reminder
from .store import ScheduleStore
from .timeslot import clock_time, weekday_name

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Subscriber = Callable[[Reminder], None]


class ScannerState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    STOPPED = "stopped"


class ReminderScanner:
    def __init__(
        self,
        store: ScheduleStore,
        cfg: Optional[EngineConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.store = store
        self.cfg = cfg or EngineConfig()
        self.clock = clock or datetime.now
        self.state = ScannerState.IDLE
        self._subscribers: List[Subscriber] = []
        # (medicine, dose_time) -> minute stamp of the last reminder sent
        self._last_fired: Dict[Tuple[str, str], str] = {}
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def tick(self, now: Optional[datetime] = None) -> List[Reminder]:
        """Scan all schedules once and deliver a reminder for every due dose."""
        now = now or self.clock()
        today = weekday_name(now)
        current = clock_time(now)
        stamp = now.strftime("%Y-%m-%d %H:%M")

        self.state = ScannerState.SCANNING
        try:
            due: List[Reminder] = []
            for medicine, schedule in self.store.all():
                if not schedule.applies_on(today):
                    continue
                for dose_time in schedule.dose_times:
                    if dose_time != current:
                        continue
                    if self._last_fired.get((medicine, dose_time)) == stamp:
                        continue
                    self._last_fired[(medicine, dose_time)] = stamp
                    due.append(Reminder(medicine=medicine, dose_time=dose_time, day=today, fired_at=now))

            self._last_fired = {k: v for k, v in self._last_fired.items() if v == stamp}
            for reminder in due:
                logger.info("Reminder due: %s at %s", reminder.medicine, reminder.dose_time)
                self._deliver(reminder)
            return due
        finally:
            self.state = ScannerState.IDLE

    def _deliver(self, reminder: Reminder) -> None:
        for callback in list(self._subscribers):
            try:
                callback(reminder)
            except Exception:
                logger.exception("Reminder subscriber %r failed", callback)

    def run_forever(self) -> None:
        """Tick every ``cfg.tick_seconds`` until :meth:`stop` is called."""
        while not self._stop.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Reminder scan failed")
            self._stop.wait(self.cfg.tick_seconds)
        self.state = ScannerState.STOPPED

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run_forever, name="reminder-scanner", daemon=True)
        self._thread.start()
        logger.info("Reminder scanner started (every %ss)", self.cfg.tick_seconds)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("Reminder scanner stopped")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
