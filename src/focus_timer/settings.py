from __future__ import annotations

"""Persisted PhaseConfig with validation for the settings editor."""

import logging
from typing import Any, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from .models import BREAK_MINUTES_RANGE, WORK_MINUTES_RANGE, PhaseConfig
from .storage import KeyValueStore, STORAGE_KEYS

_log = logging.getLogger(__name__)


def validate_minutes(value: Any, bounds: tuple[int, int]) -> int | None:
    """Whole minutes inside ``bounds`` (inclusive), else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int):
        return None
    lo, hi = bounds
    return value if lo <= value <= hi else None


class SettingsStore(QObject):
    changed = pyqtSignal(object)  # PhaseConfig
    error = pyqtSignal(str)

    def __init__(self, store: KeyValueStore | None = None):
        super().__init__()
        self._store = store
        self._config = PhaseConfig()

    def load(self) -> PhaseConfig:
        if self._store is not None:
            self._config = PhaseConfig.from_dict(self._store.load(STORAGE_KEYS["settings"], None))
        return self.config()

    def config(self) -> PhaseConfig:
        return PhaseConfig(**self._config.to_dict())

    def update(
        self,
        *,
        work_minutes: Any = None,
        break_minutes: Any = None,
        auto_chain: Optional[bool] = None,
    ) -> bool:
        cfg = self.config()
        if work_minutes is not None:
            v = validate_minutes(work_minutes, WORK_MINUTES_RANGE)
            if v is None:
                self.error.emit(f"Work minutes must be {WORK_MINUTES_RANGE[0]}-{WORK_MINUTES_RANGE[1]}")
                return False
            cfg.work_minutes = v
        if break_minutes is not None:
            v = validate_minutes(break_minutes, BREAK_MINUTES_RANGE)
            if v is None:
                self.error.emit(f"Break minutes must be {BREAK_MINUTES_RANGE[0]}-{BREAK_MINUTES_RANGE[1]}")
                return False
            cfg.break_minutes = v
        if auto_chain is not None:
            cfg.auto_chain = bool(auto_chain)
        self._apply(cfg)
        return True

    def restore_defaults(self) -> None:
        self._apply(PhaseConfig())

    def _apply(self, cfg: PhaseConfig) -> None:
        self._config = cfg
        if self._store is not None:
            self._store.save(STORAGE_KEYS["settings"], cfg.to_dict())
        _log.info("settings updated", extra={"_json_settings": cfg.to_dict()})
        self.changed.emit(self.config())


__all__ = ["SettingsStore", "validate_minutes"]
