"""Work/break cycle as a transition table.

Phases
------
IDLE      No session.  Waiting for ``start``.
RUNNING   A work or break countdown is ticking.
PAUSED    Countdown frozen; remembers its kind, remaining and nominal time.

Transitions
-----------
IDLE    → RUNNING   (start: begins a work session)
RUNNING → PAUSED    (pause)
PAUSED  → RUNNING   (resume: same kind, from the retained remaining time)
RUNNING → IDLE      (stop: elapsed part goes into the totals)
PAUSED  → IDLE      (stop)
Any     → IDLE      (reset: totals are discarded)
RUNNING → RUNNING   (complete: next session of the cycle)

Every handler in :data:`TRANSITIONS` mutates the :class:`SessionContext`
and returns the side effects the caller must carry out.  Nothing in this
module touches timers, audio or the terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Union

from ..settings import Durations, SessionKind
from ..stats.totals import Accumulators


# ── enums ─────────────────────────────────────────────────────────────────


class Phase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class Event(Enum):
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    STOP = "stop"
    RESET = "reset"
    COMPLETE = "complete"


# ── state ─────────────────────────────────────────────────────────────────


@dataclass
class SessionState:
    kind: SessionKind = SessionKind.NONE
    remaining: int = 0
    nominal: int = 0  # full length the session was started with
    is_running: bool = False
    is_paused: bool = False

    @property
    def phase(self) -> Phase:
        if self.is_running:
            return Phase.RUNNING
        if self.is_paused:
            return Phase.PAUSED
        return Phase.IDLE

    @property
    def elapsed(self) -> int:
        return max(0, self.nominal - self.remaining)

    def clear(self) -> None:
        self.kind = SessionKind.NONE
        self.remaining = 0
        self.nominal = 0
        self.is_running = False
        self.is_paused = False


@dataclass
class SessionContext:
    """Everything the cycle needs: settings, live session, running totals."""

    durations: Durations = field(default_factory=Durations)
    session: SessionState = field(default_factory=SessionState)
    totals: Accumulators = field(default_factory=Accumulators)


# ── effects ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class StartClock:
    kind: SessionKind
    seconds: int
    nominal: int


@dataclass(frozen=True)
class CancelClock:
    pass


@dataclass(frozen=True)
class Notice:
    level: str  # "info" | "success" | "warning" | "error"
    text: str


Effect = Union[StartClock, CancelClock, Notice]


# ── handlers ──────────────────────────────────────────────────────────────


def _begin(ctx: SessionContext, kind: SessionKind) -> StartClock:
    seconds = ctx.durations.for_kind(kind)
    s = ctx.session
    s.kind = kind
    s.remaining = seconds
    s.nominal = seconds
    s.is_running = True
    s.is_paused = False
    return StartClock(kind, seconds, seconds)


def _start(ctx: SessionContext) -> list[Effect]:
    return [
        Notice("info", "Work Session Started"),
        _begin(ctx, SessionKind.WORK),
    ]


def _pause(ctx: SessionContext) -> list[Effect]:
    s = ctx.session
    s.is_running = False
    s.is_paused = True
    return [CancelClock(), Notice("warning", f"{s.kind.value} has been paused.")]


def _resume(ctx: SessionContext) -> list[Effect]:
    s = ctx.session
    s.is_running = True
    s.is_paused = False
    return [
        Notice("warning", f"{s.kind.value} session resuming..."),
        StartClock(s.kind, s.remaining, s.nominal),
    ]


def _stop(ctx: SessionContext) -> list[Effect]:
    s = ctx.session
    label = s.kind.value
    if s.kind == SessionKind.WORK:
        ctx.totals.total_work_seconds += s.elapsed
    else:
        ctx.totals.total_break_seconds += s.elapsed
    s.clear()
    return [CancelClock(), Notice("warning", f"{label} session stopped.")]


def _reset(ctx: SessionContext) -> list[Effect]:
    ctx.session.clear()
    ctx.totals.clear()
    return [CancelClock(), Notice("success", "Timer has been reset")]


def _complete(ctx: SessionContext) -> list[Effect]:
    s = ctx.session
    t = ctx.totals
    if s.kind == SessionKind.WORK:
        t.completed_work_sessions += 1
        t.total_work_seconds += s.nominal
        if t.completed_work_sessions % ctx.durations.sessions_before_long_break == 0:
            return [
                Notice("warning", "Time for a long break!"),
                _begin(ctx, SessionKind.LONG_BREAK),
            ]
        return [
            Notice("warning", "Take a short break!"),
            _begin(ctx, SessionKind.SHORT_BREAK),
        ]

    # Break time is counted when the break finishes, same as work.
    t.total_break_seconds += s.nominal
    return _start(ctx)


Handler = Callable[[SessionContext], list[Effect]]

TRANSITIONS: dict[tuple[Phase, Event], Handler] = {
    (Phase.IDLE, Event.START): _start,
    (Phase.RUNNING, Event.PAUSE): _pause,
    (Phase.PAUSED, Event.RESUME): _resume,
    (Phase.RUNNING, Event.STOP): _stop,
    (Phase.PAUSED, Event.STOP): _stop,
    (Phase.IDLE, Event.RESET): _reset,
    (Phase.RUNNING, Event.RESET): _reset,
    (Phase.PAUSED, Event.RESET): _reset,
    (Phase.RUNNING, Event.COMPLETE): _complete,
}

REJECTIONS: dict[Event, str] = {
    Event.START: "Timer is already running or paused.",
    Event.PAUSE: "No timer to pause.",
    Event.RESUME: "No timer to resume.",
    Event.STOP: "No timer to stop.",
}


def apply(ctx: SessionContext, event: Event) -> list[Effect]:
    """Run *event* against *ctx* and return the effects to perform.

    Events the current phase does not accept leave *ctx* untouched.  A
    completion that arrives after the session was paused or stopped is
    dropped without a message.
    """
    handler = TRANSITIONS.get((ctx.session.phase, event))
    if handler is None:
        text = REJECTIONS.get(event)
        return [Notice("error", text)] if text else []
    return handler(ctx)
