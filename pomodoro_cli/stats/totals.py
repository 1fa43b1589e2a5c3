"""Running totals collected while the timer is open, saved on exit."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Accumulators:
    completed_work_sessions: int = 0
    total_work_seconds: int = 0
    total_break_seconds: int = 0

    def clear(self) -> None:
        self.completed_work_sessions = 0
        self.total_work_seconds = 0
        self.total_break_seconds = 0
