from __future__ import annotations

"""Settings page: work/break minutes and auto-start toggle."""

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QCheckBox, QPushButton, QSpinBox
)

from .models import BREAK_MINUTES_RANGE, WORK_MINUTES_RANGE, PhaseConfig
from .settings import SettingsStore
from .toast import ToastController


class SettingsPage(QWidget):  # pragma: no cover UI heavy
    def __init__(self, settings: SettingsStore, toast: ToastController):
        super().__init__()
        self._settings = settings
        self._toast = toast

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Pomodoro Configuration (minutes)"))
        row = QHBoxLayout()
        self.work_spin = QSpinBox(); self.work_spin.setRange(*WORK_MINUTES_RANGE)
        self.break_spin = QSpinBox(); self.break_spin.setRange(*BREAK_MINUTES_RANGE)
        for lbl, w, hint in [("Work", self.work_spin, "Typical: 25"), ("Break", self.break_spin, "Typical: 5")]:
            row.addWidget(QLabel(lbl)); row.addWidget(w); row.addWidget(QLabel(hint))
        row.addStretch(1)
        layout.addLayout(row)

        self.auto_cb = QCheckBox("Auto-start next phase")
        layout.addWidget(self.auto_cb)

        btn_row = QHBoxLayout()
        self.btn_save = QPushButton("Save Settings")
        self.btn_defaults = QPushButton("Restore defaults")
        for b in (self.btn_save, self.btn_defaults):
            btn_row.addWidget(b)
        btn_row.addStretch(1)
        layout.addLayout(btn_row)

        note = QLabel(
            "If you change intervals while the timer is paused, the display updates immediately. "
            "If it's running, changes apply after the current phase ends (or you Reset)."
        )
        note.setWordWrap(True)
        layout.addWidget(note)
        layout.addStretch(1)

        self._load(settings.config())

        self.btn_save.clicked.connect(self._save)
        self.btn_defaults.clicked.connect(self._restore_defaults)
        self._settings.changed.connect(self._load)
        self._settings.error.connect(self._toast.show)

    def _load(self, cfg: PhaseConfig) -> None:
        self.work_spin.setValue(cfg.work_minutes)
        self.break_spin.setValue(cfg.break_minutes)
        self.auto_cb.setChecked(cfg.auto_chain)

    def _save(self) -> None:
        ok = self._settings.update(
            work_minutes=self.work_spin.value(),
            break_minutes=self.break_spin.value(),
            auto_chain=self.auto_cb.isChecked(),
        )
        if ok:
            self._toast.show("Settings saved")

    def _restore_defaults(self) -> None:
        self._settings.restore_defaults()
        self._toast.show("Settings restored to defaults.")


__all__ = ["SettingsPage"]
