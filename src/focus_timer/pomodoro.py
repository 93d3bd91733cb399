from __future__ import annotations

"""Pomodoro phase state machine.

Phases alternate work -> break -> work indefinitely. A natural completion
runs, in this order and without yielding to the event loop:

 1. credit today's stats (work phases only),
 2. emit ``phase_completed`` for the alerting side,
 3. flip the phase and reset the countdown to the new phase's duration,
 4. re-arm the countdown if auto-chain is on.

Skip and reset never credit stats and never emit ``phase_completed``.
Any manual action cancels a pending auto-chain re-arm.
"""

import logging
from datetime import date
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .countdown import CountdownEngine, TimeProvider
from .models import WORK, CompletionEvent, Phase, PhaseConfig, completion_event, date_key, other_phase
from .stats import DailyStats

_log = logging.getLogger(__name__)


class PomodoroService(QObject):
    phase_changed = pyqtSignal(str)
    remaining_changed = pyqtSignal(int)
    running_changed = pyqtSignal(bool)
    phase_completed = pyqtSignal(object)  # CompletionEvent
    skipped = pyqtSignal(str)  # new phase
    reset_performed = pyqtSignal()
    start_requested = pyqtSignal()

    def __init__(
        self,
        config: PhaseConfig | None = None,
        stats: DailyStats | None = None,
        time_provider: Optional[TimeProvider] = None,
        today_provider: Optional[Callable[[], date]] = None,
        auto_chain_delay_ms: int = 0,
    ):
        super().__init__()
        self._config = PhaseConfig().merged(config) if config else PhaseConfig()
        self._stats = stats if stats is not None else DailyStats(today_provider=today_provider)
        self._today_provider = today_provider or date.today
        self._phase: Phase = WORK
        self._countdown = CountdownEngine(self._config.work_seconds, time_provider, parent=self)
        self._countdown.remaining_changed.connect(self.remaining_changed)
        self._countdown.running_changed.connect(self.running_changed)
        self._countdown.completed.connect(self._on_completed)

        self._auto_chain_delay_ms = max(0, auto_chain_delay_ms)
        self._chain_timer = QTimer(self)
        self._chain_timer.setSingleShot(True)
        self._chain_timer.timeout.connect(self._auto_start)

    # --- Properties -----------------------------------------------------
    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def running(self) -> bool:
        return self._countdown.running

    @property
    def remaining_seconds(self) -> int:
        return self._countdown.remaining_seconds

    @property
    def total_seconds(self) -> int:
        return self._config.duration_for(self._phase)

    @property
    def progress(self) -> float:
        total = self.total_seconds
        if total <= 0:
            return 0.0
        elapsed = total - self.remaining_seconds
        return max(0.0, min(1.0, elapsed / total))

    @property
    def config(self) -> PhaseConfig:
        return self._config

    @property
    def stats(self) -> DailyStats:
        return self._stats

    @property
    def countdown(self) -> CountdownEngine:
        return self._countdown

    @property
    def auto_chain_pending(self) -> bool:
        return self._chain_timer.isActive()

    # --- Public API -----------------------------------------------------
    def start(self) -> None:
        self._cancel_auto_chain()
        # Permission prompts hang off this signal; arming never waits on them.
        self.start_requested.emit()
        if self.running:
            return
        self._countdown.arm(self.remaining_seconds)

    def pause(self) -> None:
        self._cancel_auto_chain()
        self._countdown.pause()

    def reset(self) -> None:
        self._cancel_auto_chain()
        self._countdown.reset_to(self.total_seconds)
        _log.info("timer reset", extra={"_json_phase": self._phase})
        self.reset_performed.emit()

    def skip(self) -> None:
        self._cancel_auto_chain()
        self._switch_phase(other_phase(self._phase))
        _log.info("phase skipped", extra={"_json_phase": self._phase})
        self.skipped.emit(self._phase)

    def update_config(self, cfg: PhaseConfig) -> None:
        """Apply edited durations; a running countdown keeps its target."""
        old = self._config
        self._config = old.merged(cfg)
        durations_changed = (old.work_minutes, old.break_minutes) != (
            self._config.work_minutes,
            self._config.break_minutes,
        )
        if durations_changed and not self.running:
            self._countdown.reset_to(self.total_seconds)

    def shutdown(self) -> None:
        self._cancel_auto_chain()
        self._countdown.shutdown()

    # --- Internal -------------------------------------------------------
    def _on_completed(self) -> None:
        ended = self._phase
        if ended == WORK:
            self._stats.record_completion(date_key(self._today_provider()))
        event: CompletionEvent = completion_event(ended)
        _log.info("phase completed", extra={"_json_phase": ended})
        self.phase_completed.emit(event)
        self._switch_phase(event.next_phase)
        if self._config.auto_chain:
            if self._auto_chain_delay_ms:
                self._chain_timer.start(self._auto_chain_delay_ms)
            else:
                self._auto_start()

    def _switch_phase(self, phase: Phase) -> None:
        self._phase = phase
        self._countdown.reset_to(self.total_seconds)
        self.phase_changed.emit(phase)

    def _auto_start(self) -> None:
        if not self.running:
            self._countdown.arm(self.remaining_seconds)

    def _cancel_auto_chain(self) -> None:
        self._chain_timer.stop()


__all__ = ["PomodoroService"]
