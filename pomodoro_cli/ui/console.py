"""Console styling and the fixed blocks of text the shell prints."""

from __future__ import annotations

from functools import lru_cache

from rich.console import Console
from rich.markup import escape


# Notice level → rich style
STYLES: dict[str, str] = {
    "info": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "tick": "blue",
}

PROMPT = "\nInsert a command: "

WELCOME = """\
start (w) - Start the Pomodoro
settings - Change the time durations
stat - See the statistics
help (h) - See the available commands
exit - Exit the program"""

HELP = """
Available Commands:
start   (w)  - Start the Pomodoro timer
stop    (a)  - Stop the current timer
pause   (p)  - Pause the current timer
resume  (r)  - Resume the paused timer
reset   (x)  - Reset the timer
settings     - Change timer settings (work/break durations)
stat         - Show saved daily statistics
help    (h)  - Display this help message
exit         - Exit the program
"""

SETTINGS_MENU = """\
1) Change the work duration
2) Change the short break duration
3) Change the long break duration
4) Change the cycle the long break appears
5) Reset to default (Work = 25, Short Break = 5, Long Break = 15, Work Cycle before Long Break = 4)
6) Back"""

SETTINGS_PROMPT = "Insert a Number (1-6): "
MINUTES_PROMPT = "Enter the time in minutes: "
CYCLE_PROMPT = "Enter the cycle: "


@lru_cache(maxsize=2)
def get_console(highlight: bool = False) -> Console:
    """Shared Console for everything the shell prints."""
    return Console(highlight=highlight)


def format_clock(seconds: int) -> str:
    """``MM:SS`` (minutes are not wrapped at 60)."""
    seconds = max(0, seconds)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def format_duration(seconds: int) -> str:
    """``HH:MM:SS`` for statistics totals."""
    seconds = max(0, seconds)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def styled(level: str, text: str) -> str:
    """Wrap *text* in the markup for *level*; brackets in *text* are kept literal."""
    text = escape(text)
    style = STYLES.get(level, "")
    if not style:
        return text
    return f"[{style}]{text}[/{style}]"
