from __future__ import annotations

"""Dashboard UI containing the live countdown, controls and today's count."""

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QProgressBar,
)

from .models import WORK, PhaseConfig, format_time
from .notification_manager import NotificationManager, permission_label
from .pomodoro import PomodoroService
from .toast import ToastController, ToastLabel


class DashboardPage(QWidget):  # pragma: no cover UI heavy
    def __init__(self, service: PomodoroService, notifications: NotificationManager, toast: ToastController):  # noqa: D401
        super().__init__()
        self._service = service
        self._notifications = notifications

        self.kicker_label = QLabel()
        self.phase_label = QLabel()
        font = self.phase_label.font()
        font.setPointSize(18)
        font.setBold(True)
        self.phase_label.setFont(font)

        self.notify_chip = QLabel()
        self.today_chip = QLabel()

        self.timer_label = QLabel("00:00")
        self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        font = self.timer_label.font()
        font.setPointSize(36)
        self.timer_label.setFont(font)
        self.length_label = QLabel()
        self.length_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self.progress = QProgressBar()
        self.progress.setRange(0, 1000)
        self.progress.setTextVisible(False)

        self.btn_start = QPushButton("Start")
        self.btn_reset = QPushButton("Reset")
        self.btn_skip = QPushButton("Skip")
        btn_row = QHBoxLayout()
        for b in (self.btn_start, self.btn_reset, self.btn_skip):
            btn_row.addWidget(b)

        self.auto_label = QLabel()
        hint = QLabel("Tip: notifications need permission. Press Start once to allow.")
        hint.setWordWrap(True)

        header = QHBoxLayout()
        titles = QVBoxLayout()
        titles.addWidget(self.kicker_label)
        titles.addWidget(self.phase_label)
        header.addLayout(titles)
        header.addStretch(1)
        header.addWidget(self.notify_chip)
        header.addWidget(self.today_chip)

        layout = QVBoxLayout(self)
        layout.addLayout(header)
        layout.addWidget(self.timer_label)
        layout.addWidget(self.length_label)
        layout.addWidget(self.progress)
        layout.addLayout(btn_row)
        layout.addWidget(self.auto_label)
        layout.addWidget(hint)
        layout.addWidget(ToastLabel(self, toast))
        layout.addStretch(1)

        # Wire signals
        self.btn_start.clicked.connect(self._on_start_pause)
        self.btn_reset.clicked.connect(self._service.reset)
        self.btn_skip.clicked.connect(self._service.skip)
        self._service.remaining_changed.connect(lambda _s: self._refresh())
        self._service.running_changed.connect(lambda _r: self._refresh())
        self._service.phase_changed.connect(lambda _p: self._refresh())
        self._service.stats.changed.connect(lambda _k, _c: self._refresh())
        self._notifications.permission_changed.connect(lambda _p: self._refresh())
        self._refresh()

    def on_config_changed(self, _cfg: PhaseConfig) -> None:
        self._refresh()

    def _on_start_pause(self) -> None:
        if self._service.running:
            self._service.pause()
        else:
            self._service.start()

    def _refresh(self) -> None:
        svc = self._service
        cfg = svc.config
        is_work = svc.phase == WORK
        self.kicker_label.setText("Work Session" if is_work else "Break Session")
        self.phase_label.setText("FOCUS" if is_work else "CHILL")
        self.timer_label.setText(format_time(svc.remaining_seconds))
        self.length_label.setText(
            f"{cfg.work_minutes} min work" if is_work else f"{cfg.break_minutes} min break"
        )
        self.progress.setValue(int(svc.progress * 1000))
        self.btn_start.setText("Pause" if svc.running else "Start")
        self.notify_chip.setText(f"Notify: {permission_label(self._notifications.permission)}")
        self.today_chip.setText(f"Today: {svc.stats.today_count()}")
        self.auto_label.setText(f"Auto-start next: {'Yes' if cfg.auto_chain else 'No'}")


__all__ = ["DashboardPage"]
