"""
Append-only log of medicine add/update/delete events.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

import pandas as pd

from .config import EngineConfig
from .models import HistoryEntry

ACTIONS = ("added", "updated", "deleted")


class MedicineHistory:
    def __init__(self, cfg: Optional[EngineConfig] = None, clock: Optional[Callable[[], datetime]] = None):
        self.cfg = cfg or EngineConfig()
        self.clock = clock or datetime.now
        self._entries: List[HistoryEntry] = []

    def record(self, name: str, action: str) -> HistoryEntry:
        if action not in ACTIONS:
            raise ValueError(f"Unknown history action {action!r}")
        entry = HistoryEntry(name=name, action=action, timestamp=self.clock().strftime(self.cfg.timestamp_format))
        self._entries.append(entry)
        return entry

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame.from_records(
            [{"name": e.name, "action": e.action, "timestamp": e.timestamp} for e in self._entries],
            columns=["name", "action", "timestamp"],
        )

    def __len__(self) -> int:
        return len(self._entries)
