from __future__ import annotations

"""Dataclass models shared by the timer, settings and stats layers."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Literal, Mapping, Optional

Phase = Literal["work", "break"]

WORK: Phase = "work"
BREAK: Phase = "break"

DEFAULT_WORK_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5
WORK_MINUTES_RANGE = (1, 180)
BREAK_MINUTES_RANGE = (1, 60)


def other_phase(phase: Phase) -> Phase:
    return BREAK if phase == WORK else WORK


def date_key(day: Optional[date] = None) -> str:
    """Local calendar day as ``YYYY-MM-DD``."""
    day = day or date.today()
    return day.strftime("%Y-%m-%d")


def format_time(total_seconds: int) -> str:
    safe = max(0, int(total_seconds))
    return f"{safe // 60:02d}:{safe % 60:02d}"


def _positive_int(value: Any) -> int | None:
    # bool is an int subclass; a stored ``true`` is not a duration
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value > 0:
        return value
    return None


@dataclass(slots=True)
class PhaseConfig:
    work_minutes: int = DEFAULT_WORK_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES
    auto_chain: bool = False

    @property
    def work_seconds(self) -> int:
        return self.work_minutes * 60

    @property
    def break_seconds(self) -> int:
        return self.break_minutes * 60

    def duration_for(self, phase: Phase) -> int:
        return self.work_seconds if phase == WORK else self.break_seconds

    def merged(self, other: "PhaseConfig") -> "PhaseConfig":
        """Take ``other``'s values, keeping ours for any non-positive duration."""
        return PhaseConfig(
            work_minutes=_positive_int(other.work_minutes) or self.work_minutes,
            break_minutes=_positive_int(other.break_minutes) or self.break_minutes,
            auto_chain=bool(other.auto_chain),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "work_minutes": self.work_minutes,
            "break_minutes": self.break_minutes,
            "auto_chain": self.auto_chain,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "PhaseConfig":
        """Build from a persisted record; malformed fields fall back to defaults."""
        if not isinstance(data, Mapping):
            return cls()
        auto = data.get("auto_chain", False)
        return cls(
            work_minutes=_positive_int(data.get("work_minutes")) or DEFAULT_WORK_MINUTES,
            break_minutes=_positive_int(data.get("break_minutes")) or DEFAULT_BREAK_MINUTES,
            auto_chain=auto if isinstance(auto, bool) else False,
        )


@dataclass(slots=True, frozen=True)
class CompletionEvent:
    ended_phase: Phase
    next_phase: Phase
    title: str
    body: str

    @property
    def message(self) -> str:
        return f"{self.title}. {self.body}"


_COMPLETION_TEXT: dict[str, tuple[str, str]] = {
    WORK: ("Work complete", "Take a short break. You earned it."),
    BREAK: ("Break complete", "Break's over. Back to focus time."),
}


def completion_event(ended: Phase) -> CompletionEvent:
    title, body = _COMPLETION_TEXT[ended]
    return CompletionEvent(ended_phase=ended, next_phase=other_phase(ended), title=title, body=body)


__all__ = [
    "Phase",
    "WORK",
    "BREAK",
    "DEFAULT_WORK_MINUTES",
    "DEFAULT_BREAK_MINUTES",
    "WORK_MINUTES_RANGE",
    "BREAK_MINUTES_RANGE",
    "PhaseConfig",
    "CompletionEvent",
    "completion_event",
    "other_phase",
    "date_key",
    "format_time",
]
