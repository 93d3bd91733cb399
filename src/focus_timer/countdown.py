from __future__ import annotations

"""Drift-corrected countdown.

Design:
 - While running, the absolute ``target_end_at`` (milliseconds on the
   injected clock) is the source of truth; remaining seconds are recomputed
   from it on every tick, so delayed or coalesced timer callbacks never
   accumulate error.
 - While paused, the frozen ``remaining_seconds`` is the source of truth.
 - ``target_end_at`` is set iff running.
 - A QTimer polls every 250 ms so the display flips promptly near second
   boundaries; the cadence has no effect on correctness.
"""

import logging
import time
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

_log = logging.getLogger(__name__)

TimeProvider = Callable[[], int]  # milliseconds

TICK_INTERVAL_MS = 250


def monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


def _ceil_seconds(ms: int) -> int:
    return -(-ms // 1000)


class CountdownEngine(QObject):
    remaining_changed = pyqtSignal(int)
    running_changed = pyqtSignal(bool)
    completed = pyqtSignal()

    def __init__(
        self,
        duration_seconds: int,
        time_provider: Optional[TimeProvider] = None,
        interval_ms: int = TICK_INTERVAL_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._time_provider: TimeProvider = time_provider or monotonic_ms
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.tick)

        self._running: bool = False
        self._target_end_at: Optional[int] = None
        self._remaining: int = max(0, int(duration_seconds))

    # --- Properties -----------------------------------------------------
    @property
    def running(self) -> bool:
        return self._running

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def target_end_at(self) -> Optional[int]:
        return self._target_end_at

    @property
    def scheduled(self) -> bool:
        return self._timer.isActive()

    # --- Public API -----------------------------------------------------
    def arm(self, duration_seconds: int) -> None:
        if self._running:
            return
        self._target_end_at = self._time_provider() + max(0, int(duration_seconds)) * 1000
        self._set_running(True)
        self._timer.start()

    def tick(self) -> None:
        if not self._running or self._target_end_at is None:
            return
        remaining = _ceil_seconds(self._target_end_at - self._time_provider())
        if remaining <= 0:
            self._halt()
            self._set_remaining(0)
            self._set_running(False)
            self.completed.emit()
            return
        self._set_remaining(remaining)

    def pause(self) -> None:
        if not self._running or self._target_end_at is None:
            return
        remaining = max(0, _ceil_seconds(self._target_end_at - self._time_provider()))
        self._halt()
        self._set_remaining(remaining)
        self._set_running(False)

    def reset_to(self, duration_seconds: int) -> None:
        self._halt()
        self._set_remaining(max(0, int(duration_seconds)))
        self._set_running(False)

    def shutdown(self) -> None:
        self._halt()
        self._running = False

    # --- Internal -------------------------------------------------------
    def _halt(self) -> None:
        self._timer.stop()
        self._target_end_at = None

    def _set_remaining(self, value: int) -> None:
        if value != self._remaining:
            self._remaining = value
            self.remaining_changed.emit(value)

    def _set_running(self, value: bool) -> None:
        if value != self._running:
            self._running = value
            self.running_changed.emit(value)


__all__ = ["CountdownEngine", "TimeProvider", "TICK_INTERVAL_MS", "monotonic_ms"]
