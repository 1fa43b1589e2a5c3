"""Tests for the interactive shell: command parsing, settings menu, exit."""

from __future__ import annotations

import json
from datetime import date

import pytest
from PyQt6.QtCore import QCoreApplication

from pomodoro_cli.app import PomodoroShell
from pomodoro_cli.settings import SessionKind
from pomodoro_cli.stats.store import date_key
from pomodoro_cli.timer.machine import Phase

from helpers import FakeNotifier, FakeSounds, complete_session, run_ticks


@pytest.fixture
def exits():
    return []


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def sounds():
    return FakeSounds()


@pytest.fixture
def shell(qapp, store, console, notifier, sounds, exits):
    return PomodoroShell(
        store=store,
        console=console,
        notifier=notifier,
        sounds=sounds,
        on_exit=lambda: exits.append(True),
    )


def output(console) -> str:
    return console.file.getvalue()


def feed(shell, *lines):
    for line in lines:
        shell.handle_line(line)


# ═══════════════════════════════════════════════════════════════════════
#  COMMANDS
# ═══════════════════════════════════════════════════════════════════════


class TestCommands:
    @pytest.mark.parametrize("text", ["start", "w", "  START  ", "W"])
    def test_start_aliases(self, shell, text):
        feed(shell, text)
        assert shell.controller.phase == Phase.RUNNING

    @pytest.mark.parametrize("pause, resume", [("pause", "resume"), ("p", "r")])
    def test_pause_resume_aliases(self, shell, pause, resume):
        feed(shell, "start", pause)
        assert shell.controller.phase == Phase.PAUSED
        feed(shell, resume)
        assert shell.controller.phase == Phase.RUNNING

    @pytest.mark.parametrize("text", ["stop", "a"])
    def test_stop_aliases(self, shell, text):
        feed(shell, "start")
        run_ticks(shell.controller.clock, 12)
        feed(shell, text)
        assert shell.controller.phase == Phase.IDLE
        assert shell.controller.totals.total_work_seconds == 12

    @pytest.mark.parametrize("text", ["reset", "x"])
    def test_reset_aliases(self, shell, text):
        feed(shell, "start")
        complete_session(shell.controller)
        feed(shell, text)
        assert shell.controller.totals.completed_work_sessions == 0
        assert shell.controller.phase == Phase.IDLE

    def test_unknown_command_reports_error(self, shell, console):
        feed(shell, "dance")
        assert "Please enter a valid command!" in output(console)
        assert shell.controller.phase == Phase.IDLE

    def test_forbidden_command_is_reported(self, shell, console):
        feed(shell, "pause")
        assert "No timer to pause." in output(console)

    def test_start_twice_is_reported(self, shell, console):
        feed(shell, "start", "start")
        assert "Timer is already running or paused." in output(console)

    def test_help_lists_commands(self, shell, console):
        feed(shell, "help")
        out = output(console)
        assert "Available Commands:" in out
        assert "settings" in out

    def test_prompt_is_shown_after_each_line(self, shell, console):
        feed(shell, "help", "help")
        assert output(console).count("Insert a command:") == 2

    def test_tick_line_is_rendered(self, shell, console):
        feed(shell, "start")
        run_ticks(shell.controller.clock, 2)
        out = output(console)
        assert "Work Session: 25:00" in out
        assert "Work Session: 24:59" in out


# ═══════════════════════════════════════════════════════════════════════
#  SESSION SIDE EFFECTS
# ═══════════════════════════════════════════════════════════════════════


class TestSideEffects:
    def test_start_notification_is_deferred(self, shell, notifier, qapp):
        feed(shell, "start")
        assert notifier.started == []
        QCoreApplication.processEvents()
        assert notifier.started == ["Work"]

    def test_end_plays_sound_and_notifies(self, shell, notifier, sounds, console):
        feed(shell, "start")
        complete_session(shell.controller)
        assert "Work ended." in output(console)
        QCoreApplication.processEvents()
        assert sounds.played == ["work_complete"]
        assert notifier.ended == ["Work"]
        assert notifier.started == ["Work", "Short Break"]

    def test_break_end_uses_break_sound(self, shell, sounds):
        feed(shell, "start")
        complete_session(shell.controller)
        complete_session(shell.controller)
        QCoreApplication.processEvents()
        assert sounds.played == ["work_complete", "break_complete"]

    def test_resume_sends_no_start_notification(self, shell, notifier):
        feed(shell, "start")
        run_ticks(shell.controller.clock, 3)
        feed(shell, "pause", "resume")
        QCoreApplication.processEvents()
        assert notifier.started == ["Work"]

    def test_failing_side_effect_does_not_stop_cycle(self, shell, notifier, caplog):
        def boom(label):
            raise RuntimeError("audio device missing")

        notifier.session_ended = boom
        feed(shell, "start")
        complete_session(shell.controller)
        QCoreApplication.processEvents()

        assert shell.controller.session.kind == SessionKind.SHORT_BREAK
        assert shell.controller.clock.is_active
        assert "Side effect for 'Work' failed" in caplog.text

    def test_failing_sound_still_notifies(self, shell, notifier, sounds, caplog):
        def boom(name):
            raise RuntimeError("no audio output")

        sounds.play = boom
        feed(shell, "start")
        complete_session(shell.controller)
        QCoreApplication.processEvents()

        assert notifier.ended == ["Work"]
        assert "Side effect for 'Work' failed" in caplog.text

    def test_failing_notifier_still_plays_sound(self, shell, notifier, sounds):
        def boom(label):
            raise RuntimeError("notification daemon gone")

        notifier.session_ended = boom
        feed(shell, "start")
        complete_session(shell.controller)
        QCoreApplication.processEvents()

        assert sounds.played == ["work_complete"]


# ═══════════════════════════════════════════════════════════════════════
#  SETTINGS MENU
# ═══════════════════════════════════════════════════════════════════════


class TestSettingsMenu:
    def test_menu_is_shown(self, shell, console):
        feed(shell, "settings")
        out = output(console)
        assert "1) Change the work duration" in out
        assert "Insert a Number (1-6):" in out

    @pytest.mark.parametrize("choice, attr", [
        ("1", "work"), ("2", "short_break"), ("3", "long_break"),
    ])
    def test_change_duration(self, shell, console, choice, attr):
        feed(shell, "settings", choice, "9")
        assert getattr(shell.controller.durations, attr) == 9 * 60
        assert "Time Changed Successfully to 9 minutes" in output(console)

    def test_change_cycle(self, shell, console):
        feed(shell, "settings", "4", "2")
        assert shell.controller.durations.sessions_before_long_break == 2
        assert "Cycle Changed Successfully to 2 cycles" in output(console)

    @pytest.mark.parametrize("bad", ["abc", "0", "-4", ""])
    def test_invalid_minutes_reprompt(self, shell, console, bad):
        feed(shell, "settings", "1", bad)
        assert "Please Enter Correct Time!" in output(console)
        feed(shell, "30")
        assert shell.controller.durations.work == 30 * 60

    def test_invalid_cycle_reprompts(self, shell, console):
        feed(shell, "settings", "4", "zero")
        assert "Please Enter Correct Number!" in output(console)
        feed(shell, "3")
        assert shell.controller.durations.sessions_before_long_break == 3

    @pytest.mark.parametrize("bad", ["7", "0", "nope"])
    def test_invalid_choice_reprompts(self, shell, console, bad):
        feed(shell, "settings", bad)
        assert "Please Enter Correct Number!" in output(console)
        feed(shell, "1", "10")
        assert shell.controller.durations.work == 10 * 60

    def test_reset_to_defaults(self, shell):
        feed(shell, "settings", "1", "40", "4", "6", "5")
        d = shell.controller.durations
        assert d.work == 25 * 60
        assert d.sessions_before_long_break == 4

    def test_back_returns_to_commands(self, shell):
        feed(shell, "settings", "6", "start")
        assert shell.controller.phase == Phase.RUNNING

    def test_menu_does_not_treat_commands_as_choices(self, shell):
        feed(shell, "settings", "start")
        assert shell.controller.phase == Phase.IDLE

    def test_change_applies_to_next_session_only(self, shell):
        feed(shell, "start", "settings", "1", "50", "6")
        assert shell.controller.clock.remaining == 25 * 60
        complete_session(shell.controller)
        complete_session(shell.controller)
        assert shell.controller.clock.remaining == 50 * 60


# ═══════════════════════════════════════════════════════════════════════
#  STAT / EXIT
# ═══════════════════════════════════════════════════════════════════════


class TestStatAndExit:
    def test_stat_with_no_history(self, shell, console):
        feed(shell, "stat")
        assert "No statistics saved yet." in output(console)

    def test_stat_shows_table(self, shell, store, console):
        store.path.write_text(json.dumps([
            {"id": "2024/6/1", "totalBreakTime": 1800, "totalWorkTime": 9000,
             "completedWorkSessions": 6},
        ]), encoding="utf-8")
        feed(shell, "stat")
        out = output(console)
        assert "2024/6/1" in out
        assert "02:30:00" in out

    def test_stat_reports_corruption(self, shell, store, console):
        store.path.write_text("garbage", encoding="utf-8")
        feed(shell, "stat")
        assert "Statistics file is corrupted" in output(console)

    def test_exit_saves_totals(self, shell, store, exits):
        feed(shell, "start")
        complete_session(shell.controller)
        feed(shell, "exit")

        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data == [{
            "id": date_key(date.today()),
            "totalBreakTime": 0,
            "totalWorkTime": 25 * 60,
            "completedWorkSessions": 1,
        }]
        assert exits == [True]
        assert shell.finished

    def test_exit_does_not_fold_unstopped_session(self, shell, store):
        feed(shell, "start")
        run_ticks(shell.controller.clock, 100)
        feed(shell, "exit")
        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data[0]["totalWorkTime"] == 0

    def test_exit_after_stop_includes_partial(self, shell, store):
        feed(shell, "start")
        run_ticks(shell.controller.clock, 100)
        feed(shell, "stop", "exit")
        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data[0]["totalWorkTime"] == 100

    def test_exit_cancels_clock(self, shell):
        feed(shell, "start", "exit")
        assert shell.controller.clock.is_active is False

    def test_exit_is_idempotent(self, shell, store, exits):
        feed(shell, "exit")
        shell.exit()
        assert exits == [True]
        assert len(json.loads(store.path.read_text(encoding="utf-8"))) == 1

    def test_exit_with_corrupt_file_keeps_it(self, shell, store, console, exits):
        store.path.write_text("garbage", encoding="utf-8")
        feed(shell, "exit")
        assert store.path.read_text(encoding="utf-8") == "garbage"
        assert "Statistics not saved" in output(console)
        assert exits == [True]

    def test_no_prompt_after_exit(self, shell, console):
        feed(shell, "exit")
        assert "Insert a command:" not in output(console)
        assert "Goodbye!" in output(console)
