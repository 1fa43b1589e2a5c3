"""Shared pytest fixtures for Pomodoro CLI tests."""

import io
import sys

import pytest
from PyQt6.QtCore import QCoreApplication
from rich.console import Console

from pomodoro_cli.settings import Durations
from pomodoro_cli.stats.store import StatsStore
from pomodoro_cli.timer.clock import SessionClock
from pomodoro_cli.timer.controller import CycleController


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    yield app


@pytest.fixture
def clock(qapp):
    """Fresh SessionClock; tests drive it by calling ``_on_tick``."""
    return SessionClock(parent=None)


@pytest.fixture
def controller(qapp):
    """Fresh CycleController with default durations."""
    return CycleController(parent=None, durations=Durations())


@pytest.fixture
def store(tmp_path):
    """StatsStore pointed at a file that does not exist yet."""
    return StatsStore(tmp_path / "savedState.json")


@pytest.fixture
def console():
    """Rich console writing to memory; read it back with ``console.file.getvalue()``."""
    return Console(file=io.StringIO(), width=120, color_system=None)
