"""Interactive shell: reads commands from stdin inside the Qt event loop.

Keyboard input and the session clock are both plain events on one
``QCoreApplication`` loop, so a command handler never runs while a tick
is being processed.
"""

from __future__ import annotations

import os
import signal
import sys
from typing import Callable

from PyQt6.QtCore import QCoreApplication, QObject, QSocketNotifier, QTimer
from rich.console import Console
from rich.control import Control

from .audio.sounds import SoundManager
from .log import get_logger
from .notifications import DesktopNotifier
from .settings import SessionKind
from .stats.report import build_table
from .stats.store import StatsFileError, StatsStore
from .timer.controller import CycleController
from .ui.console import (
    CYCLE_PROMPT,
    HELP,
    MINUTES_PROMPT,
    PROMPT,
    SETTINGS_MENU,
    SETTINGS_PROMPT,
    WELCOME,
    format_clock,
    get_console,
    styled,
)

logger = get_logger(__name__)


# Lets Python run its SIGINT handler while Qt sits in the event loop.
_SIGNAL_POLL_MS = 250


_SETTINGS_KINDS: dict[int, SessionKind] = {
    1: SessionKind.WORK,
    2: SessionKind.SHORT_BREAK,
    3: SessionKind.LONG_BREAK,
}


def _parse_positive(text: str) -> int | None:
    try:
        value = int(text)
    except ValueError:
        return None
    return value if value > 0 else None


class PomodoroShell(QObject):
    """Command dispatch, the settings sub-menu, and session side effects."""

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        store: StatsStore,
        controller: CycleController | None = None,
        console: Console | None = None,
        sounds: SoundManager | None = None,
        notifier: DesktopNotifier | None = None,
        on_exit: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._controller = controller or CycleController(self)
        self._console = console or get_console()
        self._sounds = sounds
        self._notifier = notifier
        self._on_exit = on_exit

        self._line_handler: Callable[[str], None] = self._handle_command
        self._prompt_text = PROMPT
        self._pending_kind: SessionKind | None = None
        self._tick_line_open = False
        self._finished = False

        self._stdin_notifier: QSocketNotifier | None = None
        self._stdin_buffer = b""
        self._signal_timer: QTimer | None = None

        self._commands: dict[str, Callable[[], object]] = {
            "start": self._cmd_start,
            "w": self._cmd_start,
            "pause": self._controller.pause,
            "p": self._controller.pause,
            "resume": self._controller.resume,
            "r": self._controller.resume,
            "stop": self._cmd_stop,
            "a": self._cmd_stop,
            "reset": self._cmd_reset,
            "x": self._cmd_reset,
            "settings": self._cmd_settings,
            "stat": self._cmd_stat,
            "help": self._cmd_help,
            "h": self._cmd_help,
            "exit": self.exit,
        }

        self._controller.notice.connect(self._say)
        clock = self._controller.clock
        clock.tick.connect(self._on_tick)
        clock.started.connect(self._on_session_started)
        clock.ended.connect(self._on_session_ended)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC API
    # ══════════════════════════════════════════════════════════════════

    @property
    def controller(self) -> CycleController:
        return self._controller

    @property
    def finished(self) -> bool:
        return self._finished

    def run(self) -> int:
        """Attach to stdin and block in the Qt event loop until exit."""
        app = QCoreApplication.instance()
        if app is None:
            raise RuntimeError("PomodoroShell.run() needs a QCoreApplication")
        if self._on_exit is None:
            self._on_exit = app.quit

        self._stdin_notifier = QSocketNotifier(
            sys.stdin.fileno(), QSocketNotifier.Type.Read, self
        )
        self._stdin_notifier.activated.connect(lambda *_: self._read_stdin())

        signal.signal(signal.SIGINT, lambda *_: self.exit())
        self._signal_timer = QTimer(self)
        self._signal_timer.timeout.connect(lambda: None)
        self._signal_timer.start(_SIGNAL_POLL_MS)

        self.show_welcome()
        self._show_prompt()
        return app.exec()

    def show_welcome(self) -> None:
        self._console.clear()
        self._print(styled("info", "Welcome to the Pomodoro Timer!\n"))
        self._print(styled("info", WELCOME))

    def handle_line(self, line: str) -> None:
        """Dispatch one line of user input to the active handler."""
        self._close_tick_line()
        self._line_handler(line.strip())
        if not self._finished:
            self._show_prompt()

    def exit(self) -> None:
        """Save today's totals and leave the event loop."""
        if self._finished:
            return
        self._finished = True
        self._controller.clock.cancel()
        if self._stdin_notifier is not None:
            self._stdin_notifier.setEnabled(False)
        if self._signal_timer is not None:
            self._signal_timer.stop()

        self._say("success", "Exiting Pomodoro Timer. Goodbye!")
        self._save_stats()
        if self._on_exit is not None:
            self._on_exit()

    # ══════════════════════════════════════════════════════════════════
    #  MAIN COMMANDS
    # ══════════════════════════════════════════════════════════════════

    def _handle_command(self, text: str) -> None:
        command = self._commands.get(text.lower())
        if command is None:
            self._console.clear()
            self._say("error", "Please enter a valid command!")
            return
        command()

    def _cmd_start(self) -> None:
        self._console.clear()
        self._controller.start()

    def _cmd_stop(self) -> None:
        self._console.clear()
        self._controller.stop()

    def _cmd_reset(self) -> None:
        self._console.clear()
        self._controller.reset()

    def _cmd_help(self) -> None:
        self._console.clear()
        self._print(styled("info", HELP))

    def _cmd_stat(self) -> None:
        self._console.clear()
        try:
            records = self._store.load()
        except StatsFileError as exc:
            logger.error("Cannot show statistics: %s", exc)
            self._say("error", f"Statistics file is corrupted: {exc}")
            return
        if not records:
            self._say("info", "No statistics saved yet.")
            return
        self._console.print(build_table(records))

    # ══════════════════════════════════════════════════════════════════
    #  SETTINGS SUB-MENU
    # ══════════════════════════════════════════════════════════════════

    def _cmd_settings(self) -> None:
        self._console.clear()
        self._open_settings_menu()

    def _open_settings_menu(self) -> None:
        self._print(styled("info", SETTINGS_MENU))
        self._line_handler = self._handle_settings_choice
        self._prompt_text = SETTINGS_PROMPT
        self._pending_kind = None

    def _back_to_main(self) -> None:
        self._line_handler = self._handle_command
        self._prompt_text = PROMPT
        self._pending_kind = None

    def _handle_settings_choice(self, text: str) -> None:
        choice = _parse_positive(text)
        durations = self._controller.durations

        if choice in _SETTINGS_KINDS:
            self._pending_kind = _SETTINGS_KINDS[choice]
            self._line_handler = self._handle_minutes
            self._prompt_text = MINUTES_PROMPT
        elif choice == 4:
            self._line_handler = self._handle_cycle
            self._prompt_text = CYCLE_PROMPT
        elif choice == 5:
            durations.reset_defaults()
            self._console.clear()
            self._say("success", "Time reset is successful!")
            self._open_settings_menu()
        elif choice == 6:
            self._back_to_main()
            self.show_welcome()
        else:
            self._console.clear()
            self._say("error", "Please Enter Correct Number!")
            self._open_settings_menu()

    def _handle_minutes(self, text: str) -> None:
        minutes = _parse_positive(text)
        if minutes is None or self._pending_kind is None:
            self._say("error", "Please Enter Correct Time!")
            return
        self._controller.durations.set_minutes(self._pending_kind, minutes)
        logger.info("%s duration set to %s min", self._pending_kind.value, minutes)
        self._console.clear()
        self._say("success", f"Time Changed Successfully to {minutes} minutes")
        self._open_settings_menu()

    def _handle_cycle(self, text: str) -> None:
        cycle = _parse_positive(text)
        if cycle is None:
            self._say("error", "Please Enter Correct Number!")
            return
        self._controller.durations.set_cycle(cycle)
        logger.info("Long break every %s work sessions", cycle)
        self._console.clear()
        self._say("success", f"Cycle Changed Successfully to {cycle} cycles")
        self._open_settings_menu()

    # ══════════════════════════════════════════════════════════════════
    #  CLOCK SLOTS
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self, label: str, remaining: int) -> None:
        self._console.control(Control.move_to_column(0))
        self._console.print(
            styled("tick", f"{label} Session: {format_clock(remaining)}"),
            end="",
        )
        self._tick_line_open = True

    def _on_session_started(self, label: str) -> None:
        if self._notifier is not None:
            QTimer.singleShot(
                0, lambda: self._side_effect(self._notifier.session_started, label)
            )

    def _on_session_ended(self, label: str) -> None:
        self._say("success", f"{label} ended.")
        if self._sounds is not None:
            QTimer.singleShot(0, lambda: self._side_effect(self._play_end_sound, label))
        if self._notifier is not None:
            QTimer.singleShot(
                0, lambda: self._side_effect(self._notifier.session_ended, label)
            )

    def _play_end_sound(self, label: str) -> None:
        name = "work_complete" if label == SessionKind.WORK.value else "break_complete"
        self._sounds.play(name)

    def _side_effect(self, fn: Callable[[str], object], label: str) -> None:
        try:
            fn(label)
        except Exception:
            logger.exception("Side effect for %r failed", label)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _read_stdin(self) -> None:
        chunk = os.read(sys.stdin.fileno(), 4096)
        if not chunk:
            self._close_tick_line()
            self.exit()
            return
        self._stdin_buffer += chunk
        while b"\n" in self._stdin_buffer and not self._finished:
            raw, self._stdin_buffer = self._stdin_buffer.split(b"\n", 1)
            self.handle_line(raw.decode("utf-8", errors="replace"))

    def _save_stats(self) -> None:
        try:
            self._store.save(self._controller.totals)
        except StatsFileError as exc:
            logger.error("Statistics not saved: %s", exc)
            self._say("error", f"Statistics not saved, file is corrupted: {exc}")
        except OSError as exc:
            logger.exception("Statistics not saved")
            self._say("error", f"Statistics not saved: {exc}")

    def _say(self, level: str, text: str) -> None:
        self._close_tick_line()
        self._print(styled(level, text))

    def _print(self, markup: str) -> None:
        self._console.print(markup)

    def _show_prompt(self) -> None:
        self._console.print(styled("info", self._prompt_text), end="")

    def _close_tick_line(self) -> None:
        if self._tick_line_open:
            self._console.print()
            self._tick_line_open = False
