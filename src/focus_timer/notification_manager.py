from __future__ import annotations

"""Completion alerts: audio cue, desktop notification and toast.

Design notes:
 - Listens to PomodoroService signals; the service never waits on anything
   done here.
 - Desktop notifications go through a tray icon balloon and are gated on a
   permission state (default|granted|denied|unsupported). Permission is
   requested once, lazily, on the first manual start, and resolves on the
   next event-loop turn so the start itself is never delayed.
 - Every backend call is guarded: a missing tray, a failing beep or a
   broken toast is logged and dropped, and phase progression continues.
"""

import logging
from typing import Callable, Literal, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal
from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import QApplication, QSystemTrayIcon, QWidget

from .models import WORK, CompletionEvent
from .pomodoro import PomodoroService
from .toast import ToastController

_log = logging.getLogger(__name__)

Permission = Literal["default", "granted", "denied", "unsupported"]

NotificationSender = Callable[[str, str], None]

_PERMISSION_LABELS = {
    "granted": "ON",
    "denied": "BLOCKED",
    "default": "ASK",
    "unsupported": "N/A",
}


def permission_label(state: str) -> str:
    return _PERMISSION_LABELS.get(state, "N/A")


def tray_supported() -> bool:  # pragma: no cover - platform dependent
    try:
        return QSystemTrayIcon.isSystemTrayAvailable() and QSystemTrayIcon.supportsMessages()
    except Exception:
        return False


class NotificationManager(QObject):
    permission_changed = pyqtSignal(str)

    def __init__(
        self,
        service: PomodoroService,
        toast: ToastController,
        *,
        sender: Optional[NotificationSender] = None,
        beeper: Optional[Callable[[], None]] = None,
        prompt: Optional[Callable[[], bool]] = None,
        supported: Optional[bool] = None,
        tray_parent: QWidget | None = None,
    ) -> None:
        super().__init__()
        self._service = service
        self._toast = toast
        self._sender = sender
        self._beeper = beeper or QApplication.beep
        self._prompt = prompt
        self._tray_parent = tray_parent
        self._tray: QSystemTrayIcon | None = None
        if supported is None:
            supported = sender is not None or tray_supported()
        self._permission: Permission = "default" if supported else "unsupported"
        self._requested = False

        service.phase_completed.connect(self._on_phase_completed)
        service.skipped.connect(self._on_skipped)
        service.reset_performed.connect(self._on_reset)
        service.start_requested.connect(self.request_permission)

    # --- Public API ----------------------------------------------------
    @property
    def permission(self) -> Permission:
        return self._permission

    def request_permission(self) -> None:
        if self._requested or self._permission != "default":
            return
        self._requested = True
        QTimer.singleShot(0, self._resolve_permission)

    def notify(self, title: str, body: str) -> None:
        if self._permission != "granted":
            return
        self._guard("notification", self._send, title, body)

    def shutdown(self) -> None:
        self._toast.shutdown()
        if self._tray is not None:  # pragma: no cover - UI
            self._tray.hide()

    # --- Event Handlers ------------------------------------------------
    def _on_phase_completed(self, event: CompletionEvent) -> None:
        self._guard("audio", self._beeper)
        self.notify(event.title, event.body)
        self._guard("toast", self._toast.show, event.message)

    def _on_skipped(self, phase: str) -> None:
        label = "Work" if phase == WORK else "Break"
        self._guard("toast", self._toast.show, f"Skipped to {label}.")

    def _on_reset(self) -> None:
        self._guard("toast", self._toast.show, "Reset.")

    # --- Internal ------------------------------------------------------
    def _resolve_permission(self) -> None:
        granted = True
        if self._prompt is not None:
            try:
                granted = bool(self._prompt())
            except Exception as e:
                _log.warning("permission request failed: %s", e)
                granted = False
        self._permission = "granted" if granted else "denied"
        _log.info("notification permission resolved", extra={"_json_permission": self._permission})
        self.permission_changed.emit(self._permission)

    def _send(self, title: str, body: str) -> None:
        if self._sender is not None:
            self._sender(title, body)
            return
        if self._tray is None:  # pragma: no cover - UI
            self._tray = QSystemTrayIcon(self._tray_parent)
            self._tray.setToolTip("Focus Timer Pro")
            self._tray.setIcon(QIcon())
            self._tray.setVisible(True)
        self._tray.showMessage(title, body, QSystemTrayIcon.MessageIcon.NoIcon, 3000)

    def _guard(self, what: str, fn: Callable[..., None], *args) -> None:
        try:
            fn(*args)
        except Exception as e:
            _log.warning("%s alert failed: %s", what, e, extra={"_json_alert": what})


__all__ = ["NotificationManager", "Permission", "permission_label"]
