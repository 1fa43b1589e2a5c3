"""Timer package."""

from .clock import SessionClock, TICK_INTERVAL_MS
from .controller import CycleController
from .machine import (
    Accumulators,
    Event,
    Phase,
    SessionContext,
    SessionState,
    TRANSITIONS,
)

__all__ = [
    "SessionClock",
    "TICK_INTERVAL_MS",
    "CycleController",
    "Accumulators",
    "Event",
    "Phase",
    "SessionContext",
    "SessionState",
    "TRANSITIONS",
]
