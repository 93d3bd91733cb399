from __future__ import annotations

"""Per-day count of completed work sessions, persisted on every change."""

import logging
from datetime import date
from typing import Callable, Dict, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .models import date_key
from .storage import KeyValueStore, STORAGE_KEYS

_log = logging.getLogger(__name__)

TodayProvider = Callable[[], date]


class DailyStats(QObject):
    changed = pyqtSignal(str, int)  # date_key, completed_pomodoros

    def __init__(self, store: KeyValueStore | None = None, today_provider: Optional[TodayProvider] = None):
        super().__init__()
        self._store = store
        self._today_provider: TodayProvider = today_provider or date.today
        self._counts: Dict[str, int] = {}

    # --- Loading --------------------------------------------------------
    def load(self) -> None:
        if self._store is None:
            return
        raw = self._store.load(STORAGE_KEYS["stats"], {})
        self._counts = {}
        if not isinstance(raw, dict):
            _log.warning("discarding malformed stats record")
            return
        for key, entry in raw.items():
            count = entry.get("completed_pomodoros") if isinstance(entry, dict) else None
            if isinstance(count, int) and not isinstance(count, bool) and count >= 0:
                self._counts[str(key)] = count

    # --- Mutation -------------------------------------------------------
    def record_completion(self, key: str) -> int:
        count = self._counts.get(key, 0) + 1
        self._counts[key] = count
        self._persist()
        _log.info("work session credited", extra={"_json_day": key, "_json_count": count})
        self.changed.emit(key, count)
        return count

    # --- Access ---------------------------------------------------------
    def query(self, key: str) -> int:
        return self._counts.get(key, 0)

    def today_key(self) -> str:
        return date_key(self._today_provider())

    def today_count(self) -> int:
        return self.query(self.today_key())

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        return {k: {"completed_pomodoros": v} for k, v in self._counts.items()}

    def _persist(self) -> None:
        if self._store is not None:
            self._store.save(STORAGE_KEYS["stats"], self.snapshot())


__all__ = ["DailyStats", "TodayProvider"]
