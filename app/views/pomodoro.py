"""
Pomodoro timer as a plain state machine; the caller drives it with tick().

work -> short break, except every Nth completed work session -> long break.
Any break -> work. A finished phase stops the timer until start() is called.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from app.models import PomodoroSettings

WORK = "work"
SHORT_BREAK = "short_break"
LONG_BREAK = "long_break"


@dataclass(frozen=True)
class PhaseFinished:
    finished: str
    next_phase: str
    completed_sessions: int

    @property
    def message(self) -> str:
        if self.finished == WORK:
            if self.next_phase == LONG_BREAK:
                return "Work session completed! Time for a long break!"
            return "Work session completed! Time for a short break!"
        return "Break finished! Ready to work?"


def format_time(seconds: int) -> str:
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


class PomodoroTimer:
    def __init__(self, settings: PomodoroSettings) -> None:
        self._settings = settings
        self.phase = WORK
        self.completed_sessions = 0
        self.active = False
        self.remaining = self.duration_of(WORK)

    @property
    def settings(self) -> PomodoroSettings:
        return self._settings

    def duration_of(self, phase: str) -> int:
        minutes = {
            WORK: self._settings.work_duration,
            SHORT_BREAK: self._settings.short_break_duration,
            LONG_BREAK: self._settings.long_break_duration,
        }[phase]
        return minutes * 60

    def apply_settings(self, settings: PomodoroSettings) -> None:
        """New settings reset the current phase and stop the timer."""
        self._settings = settings
        self.reset()

    def start(self) -> None:
        self.active = True

    def pause(self) -> None:
        self.active = False

    def toggle(self) -> None:
        self.active = not self.active

    def reset(self) -> None:
        self.active = False
        self.remaining = self.duration_of(self.phase)

    def switch_to(self, phase: str) -> None:
        if phase not in (WORK, SHORT_BREAK, LONG_BREAK):
            raise ValueError(f"unknown phase {phase!r}")
        self.phase = phase
        self.reset()

    def tick(self, seconds: int = 1) -> Optional[PhaseFinished]:
        """Advance by `seconds` while active. Returns the transition when a phase ends."""
        if not self.active or seconds <= 0:
            return None
        if seconds < self.remaining:
            self.remaining -= seconds
            return None

        finished = self.phase
        if finished == WORK:
            self.completed_sessions += 1
            every = self._settings.sessions_until_long_break
            next_phase = LONG_BREAK if every > 0 and self.completed_sessions % every == 0 else SHORT_BREAK
        else:
            next_phase = WORK
        self.switch_to(next_phase)
        return PhaseFinished(finished, next_phase, self.completed_sessions)

    @property
    def progress(self) -> float:
        """Elapsed share of the current phase, 0..100."""
        total = self.duration_of(self.phase)
        if total <= 0:
            return 0.0
        return (total - self.remaining) / total * 100

    def display(self) -> str:
        return format_time(self.remaining)

