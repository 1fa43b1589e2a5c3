"""Shared test helpers for Pomodoro CLI."""

from pomodoro_cli.timer.clock import SessionClock
from pomodoro_cli.timer.controller import CycleController


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


def run_ticks(clock: SessionClock, count: int) -> None:
    """Deliver *count* ticks without waiting on real time."""
    for _ in range(count):
        clock._on_tick()


def complete_session(controller: CycleController) -> None:
    """Fast-complete the current session by jumping to the last tick."""
    controller.clock._remaining = 0
    controller.clock._on_tick()


class FakeNotifier:
    def __init__(self):
        self.started: list[str] = []
        self.ended: list[str] = []

    def session_started(self, label):
        self.started.append(label)
        return True

    def session_ended(self, label):
        self.ended.append(label)
        return True


class FakeSounds:
    def __init__(self):
        self.played: list[str] = []

    def play(self, name):
        self.played.append(name)
