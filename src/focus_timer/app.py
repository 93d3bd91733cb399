from __future__ import annotations

import sys
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os

from PyQt6.QtWidgets import (
    QApplication,
    QMainWindow,
    QListWidget,
    QWidget,
    QStackedWidget,
    QVBoxLayout,
)

from .storage import KeyValueStore
from .settings import SettingsStore
from .stats import DailyStats
from .pomodoro import PomodoroService
from .toast import ToastController
from .notification_manager import NotificationManager
from .dashboard import DashboardPage
from .settings_page import SettingsPage
from .logging_setup import configure_logging


APP_NAME = "Focus Timer Pro"
DATA_DIR_ENV = "FOCUS_TIMER_DATA_DIR"
DB_FILENAME = "focus_timer.sqlite"
AUTO_CHAIN_DELAY_MS = 100


def default_data_dir() -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".focus_timer"


@dataclass(slots=True)
class AppState:
    data_dir: Path
    store: KeyValueStore
    settings: SettingsStore
    stats: DailyStats
    service: PomodoroService


def get_app_state(data_dir: Path | None = None) -> AppState:
    data_dir = data_dir or default_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    # Logging first
    configure_logging(data_dir)
    store = KeyValueStore.open(data_dir / DB_FILENAME)
    settings = SettingsStore(store)
    config = settings.load()
    stats = DailyStats(store)
    stats.load()
    service = PomodoroService(config, stats, auto_chain_delay_ms=AUTO_CHAIN_DELAY_MS)
    settings.changed.connect(service.update_config)
    logging.getLogger(__name__).info(
        "app_state_created", extra={"_json_settings": config.to_dict(), "_json_today": stats.today_count()}
    )
    return AppState(data_dir=data_dir, store=store, settings=settings, stats=stats, service=service)


class Sidebar(QListWidget):  # pragma: no cover - simple UI
    PAGES = ["Timer", "Settings"]

    def __init__(self) -> None:
        super().__init__()
        self.addItems(self.PAGES)
        self.setFixedHeight(60)
        self.setCurrentRow(0)


class MainWindow(QMainWindow):  # pragma: no cover UI
    def __init__(self, state: AppState) -> None:  # noqa: D401
        super().__init__()
        self.state = state
        self.setWindowTitle(APP_NAME)
        self.resize(520, 560)

        self.toast = ToastController(parent=self)
        self.notifications = NotificationManager(state.service, self.toast, tray_parent=self)

        self.sidebar = Sidebar()
        self.pages = QStackedWidget()
        self.dashboard = DashboardPage(state.service, self.notifications, self.toast)
        self.pages.addWidget(self.dashboard)
        self.pages.addWidget(SettingsPage(state.settings, self.toast))
        state.settings.changed.connect(self.dashboard.on_config_changed)

        container = QWidget()
        container_layout = QVBoxLayout(container)
        container_layout.addWidget(self.sidebar)
        container_layout.addWidget(self.pages, 1)
        self.setCentralWidget(container)
        self.sidebar.currentRowChanged.connect(self.pages.setCurrentIndex)

    def closeEvent(self, event) -> None:  # noqa: N802
        self.state.service.shutdown()
        self.notifications.shutdown()
        self.state.store.close()
        super().closeEvent(event)


def run(argv: Optional[list[str]] = None) -> int:  # pragma: no cover
    if argv is None:
        argv = sys.argv
    app = QApplication(argv)
    app.setApplicationName(APP_NAME)
    state = get_app_state()
    window = MainWindow(state)
    window.show()
    return app.exec()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(run())
