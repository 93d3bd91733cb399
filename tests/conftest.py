import os
from datetime import date
from pathlib import Path
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Ensure src/ is on sys.path for direct test invocation without an editable install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from focus_timer.storage import KeyValueStore


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start_ms: int = 1_000_000):
        self.now = start_ms

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)

    def __call__(self) -> int:
        return self.now


class FakeDay:
    def __init__(self, day: date):
        self.day = day

    def __call__(self) -> date:
        return self.day


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def today() -> FakeDay:
    return FakeDay(date(2025, 3, 14))


@pytest.fixture()
def store(tmp_path: Path):
    kv = KeyValueStore.open(tmp_path / "test.sqlite")
    yield kv
    kv.close()
