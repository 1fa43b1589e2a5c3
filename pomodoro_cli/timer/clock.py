"""One-shot countdown driven by a 1-second ``QTimer``.

The clock knows nothing about work or breaks.  It counts a single
duration down, reports every tick, and calls the completion action once
when the countdown runs out.

The displayed value reaches 00:00 and stays there for one full tick
before the session ends, so a clock started with ``d`` seconds ticks
``d + 1`` times.
"""

from __future__ import annotations

from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal


TICK_INTERVAL_MS = 1000


class SessionClock(QObject):
    """Single countdown with at most one pending tick.

    Signals
    -------
    tick(label: str, remaining_seconds: int)
        Emitted on every tick with the value being shown, before the
        decrement.
    started(label: str)
        Emitted when a countdown starts from its full duration (not on
        resume).
    ended(label: str)
        Emitted when the countdown runs out, right before the completion
        action runs.
    """

    tick = pyqtSignal(str, int)
    started = pyqtSignal(str)
    ended = pyqtSignal(str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._remaining: int = 0
        self._label: str = ""
        self._on_complete: Callable[[], None] | None = None

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._on_tick)

    # ── properties ────────────────────────────────────────────────────

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def label(self) -> str:
        return self._label

    @property
    def is_active(self) -> bool:
        """True while a countdown is armed."""
        return self._on_complete is not None

    # ── controls ──────────────────────────────────────────────────────

    def start(
        self,
        duration: int,
        label: str,
        on_complete: Callable[[], None],
        *,
        nominal: int | None = None,
    ) -> None:
        """Count down from *duration* seconds.

        *nominal* is the full length of the session.  When it is given and
        differs from *duration* the call is a resume and ``started`` is
        not emitted.
        """
        if duration < 0:
            raise ValueError(f"duration must be >= 0, got {duration}")
        self.cancel()

        self._remaining = duration
        self._label = label
        self._on_complete = on_complete

        if nominal is None or duration == nominal:
            self.started.emit(label)
        self._qt_timer.start()

    def cancel(self) -> None:
        """Stop ticking without running the completion action."""
        self._qt_timer.stop()
        self._on_complete = None

    # ── internal ──────────────────────────────────────────────────────

    def _on_tick(self) -> None:
        if self._on_complete is None:
            return  # cancelled while a timeout was queued

        self.tick.emit(self._label, self._remaining)
        self._remaining -= 1

        if self._remaining < 0:
            on_complete = self._on_complete
            self.cancel()
            self.ended.emit(self._label)
            on_complete()
