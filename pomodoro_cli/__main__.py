"""Allow running the timer as a module: python -m pomodoro_cli."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from PyQt6.QtCore import QCoreApplication

from .app import PomodoroShell
from .audio.sounds import SoundManager
from .log import configure_logging, get_logger
from .notifications import DesktopNotifier
from .settings import load_config
from .stats.store import StatsStore

logger = get_logger(__name__)

cli = typer.Typer(
    name="pomodoro",
    help="Interactive Pomodoro timer with daily statistics",
    add_completion=False,
)


@cli.command()
def main(
    stats_file: Optional[Path] = typer.Option(
        None, "--stats-file", help="JSON file holding the daily statistics"
    ),
    no_sound: bool = typer.Option(False, "--no-sound", help="Do not play chimes"),
    no_notify: bool = typer.Option(
        False, "--no-notify", help="Do not send desktop notifications"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Mirror the log file to stderr"
    ),
) -> None:
    """Start the interactive timer shell."""
    log_path = configure_logging(verbose=verbose)
    config = load_config()
    stats_path = stats_file or config.resolved_stats_path
    logger.info("Starting; stats at %s, log at %s", stats_path, log_path)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("Pomodoro CLI")

    sounds = None
    if config.sound_enabled and not no_sound:
        sounds = SoundManager(parent=app)
        sounds.set_volume(config.sound_volume)

    notifier = DesktopNotifier(
        enabled=config.notifications_enabled and not no_notify,
    )

    shell = PomodoroShell(
        parent=app,
        store=StatsStore(stats_path),
        sounds=sounds,
        notifier=notifier,
    )
    raise typer.Exit(shell.run())


def run() -> None:
    cli()


if __name__ == "__main__":
    run()
