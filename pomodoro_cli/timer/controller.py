"""Qt front for the cycle transition table.

``CycleController`` owns the :class:`SessionContext` and the
:class:`SessionClock`.  User commands and clock completions are turned
into :class:`Event` values, run through :func:`machine.apply`, and the
returned effects are carried out here.
"""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal

from ..log import get_logger
from ..settings import Durations
from . import machine
from .clock import SessionClock
from .machine import (
    Accumulators,
    CancelClock,
    Effect,
    Event,
    Notice,
    Phase,
    SessionContext,
    SessionState,
    StartClock,
)

logger = get_logger(__name__)


class CycleController(QObject):
    """Work → break → work sequencing plus pause/resume/stop/reset.

    Signals
    -------
    notice(level: str, text: str)
        A message for the user.  ``level`` is one of ``info``,
        ``success``, ``warning`` or ``error``.
    phase_changed(new_phase: Phase)
        Emitted whenever an event moves the cycle to another phase.
    """

    notice = pyqtSignal(str, str)
    phase_changed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        clock: SessionClock | None = None,
        durations: Durations | None = None,
    ) -> None:
        super().__init__(parent)
        self._clock = clock or SessionClock(self)
        self._context = SessionContext(durations=durations or Durations())

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def clock(self) -> SessionClock:
        return self._clock

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def durations(self) -> Durations:
        """Edits apply to sessions started afterwards."""
        return self._context.durations

    @property
    def session(self) -> SessionState:
        self._sync_remaining()
        return self._context.session

    @property
    def totals(self) -> Accumulators:
        return self._context.totals

    @property
    def phase(self) -> Phase:
        return self._context.session.phase

    # ══════════════════════════════════════════════════════════════════
    #  COMMANDS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> list[Effect]:
        return self.handle(Event.START)

    def pause(self) -> list[Effect]:
        return self.handle(Event.PAUSE)

    def resume(self) -> list[Effect]:
        return self.handle(Event.RESUME)

    def stop(self) -> list[Effect]:
        return self.handle(Event.STOP)

    def reset(self) -> list[Effect]:
        return self.handle(Event.RESET)

    def handle(self, event: Event) -> list[Effect]:
        """Apply *event* to the current state and perform its effects."""
        self._sync_remaining()
        before = self.phase
        effects = machine.apply(self._context, event)
        logger.debug("%s in %s -> %s", event.value, before.value, effects)

        for effect in effects:
            self._perform(effect)

        after = self.phase
        if after != before:
            self.phase_changed.emit(after)
        return effects

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _sync_remaining(self) -> None:
        """Copy the clock's countdown into the session while it ticks."""
        if self._context.session.is_running and self._clock.is_active:
            self._context.session.remaining = self._clock.remaining

    def _perform(self, effect: Effect) -> None:
        if isinstance(effect, StartClock):
            self._clock.start(
                effect.seconds,
                effect.kind.value,
                self._on_clock_complete,
                nominal=effect.nominal,
            )
        elif isinstance(effect, CancelClock):
            self._clock.cancel()
        elif isinstance(effect, Notice):
            self.notice.emit(effect.level, effect.text)

    def _on_clock_complete(self) -> None:
        self._context.session.remaining = self._clock.remaining
        self.handle(Event.COMPLETE)
