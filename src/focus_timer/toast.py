from __future__ import annotations

"""Transient toast message with a single replaceable dismissal timer."""

from PyQt6.QtCore import QObject, QTimer, Qt, pyqtSignal
from PyQt6.QtWidgets import QLabel, QWidget

TOAST_TIMEOUT_MS = 3000


class ToastController(QObject):
    message_changed = pyqtSignal(str)  # "" when dismissed

    def __init__(self, timeout_ms: int = TOAST_TIMEOUT_MS, parent: QObject | None = None):
        super().__init__(parent)
        self._message = ""
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(timeout_ms)
        self._timer.timeout.connect(self.dismiss)

    @property
    def message(self) -> str:
        return self._message

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    def show(self, message: str) -> None:
        # restarting the single timer drops the previous toast's dismissal
        self._timer.start()
        self._message = message
        self.message_changed.emit(message)

    def dismiss(self) -> None:
        self._timer.stop()
        if self._message:
            self._message = ""
            self.message_changed.emit("")

    def shutdown(self) -> None:
        self._timer.stop()


class ToastLabel(QLabel):  # pragma: no cover - UI utility
    def __init__(self, parent: QWidget, controller: ToastController):
        super().__init__(parent)
        self.setStyleSheet(
            """
            background: rgba(40,40,40,0.85);
            color: #fff; padding: 6px 12px; border-radius: 6px;
            """
        )
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.hide()
        controller.message_changed.connect(self._on_message)

    def _on_message(self, message: str) -> None:
        self.setText(message)
        self.setVisible(bool(message))


__all__ = ["ToastController", "ToastLabel", "TOAST_TIMEOUT_MS"]
