"""Timer durations and application settings.

Durations live for the process lifetime only and are edited through the
``settings`` menu.  Application preferences (sound, notifications, where
statistics are kept) are read from JSON at:

    <user config dir>/pomodoro-cli/config.json

Usage::

    config = load_config()
    config.sound_volume = 50
    save_config(config)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

from .log import get_logger

logger = get_logger(__name__)


APP_NAME = "pomodoro-cli"
CONFIG_DIR = Path(user_config_dir(APP_NAME))
CONFIG_PATH = CONFIG_DIR / "config.json"
DATA_DIR = Path(user_data_dir(APP_NAME))
DEFAULT_STATS_PATH = DATA_DIR / "savedState.json"


class SessionKind(Enum):
    WORK = "Work"
    SHORT_BREAK = "Short Break"
    LONG_BREAK = "Long Break"
    NONE = ""

    @property
    def is_break(self) -> bool:
        return self in (SessionKind.SHORT_BREAK, SessionKind.LONG_BREAK)


# ── defaults ──────────────────────────────────────────────────────────────

DEFAULT_WORK = 25 * 60
DEFAULT_SHORT_BREAK = 5 * 60
DEFAULT_LONG_BREAK = 15 * 60
DEFAULT_SESSIONS_BEFORE_LONG_BREAK = 4


@dataclass
class Durations:
    """Session lengths in seconds plus the long-break cadence."""

    work: int = DEFAULT_WORK
    short_break: int = DEFAULT_SHORT_BREAK
    long_break: int = DEFAULT_LONG_BREAK
    sessions_before_long_break: int = DEFAULT_SESSIONS_BEFORE_LONG_BREAK

    def for_kind(self, kind: SessionKind) -> int:
        if kind == SessionKind.WORK:
            return self.work
        if kind == SessionKind.SHORT_BREAK:
            return self.short_break
        if kind == SessionKind.LONG_BREAK:
            return self.long_break
        raise ValueError("no duration for an empty session")

    def set_minutes(self, kind: SessionKind, minutes: int) -> None:
        """Change one session length.  Only later sessions are affected."""
        if minutes < 1:
            raise ValueError(f"duration must be at least 1 minute, got {minutes}")
        seconds = minutes * 60
        if kind == SessionKind.WORK:
            self.work = seconds
        elif kind == SessionKind.SHORT_BREAK:
            self.short_break = seconds
        elif kind == SessionKind.LONG_BREAK:
            self.long_break = seconds
        else:
            raise ValueError("no duration for an empty session")

    def set_cycle(self, count: int) -> None:
        if count < 1:
            raise ValueError(f"cycle must be at least 1 session, got {count}")
        self.sessions_before_long_break = count

    def reset_defaults(self) -> None:
        self.work = DEFAULT_WORK
        self.short_break = DEFAULT_SHORT_BREAK
        self.long_break = DEFAULT_LONG_BREAK
        self.sessions_before_long_break = DEFAULT_SESSIONS_BEFORE_LONG_BREAK


@dataclass
class AppConfig:
    """User preferences that survive restarts."""

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True

    # ── storage ───────────────────────────────────────────────────────
    stats_path: str | None = None

    @property
    def resolved_stats_path(self) -> Path:
        if self.stats_path:
            return Path(self.stats_path).expanduser()
        return DEFAULT_STATS_PATH


def _is_bool(value: object) -> bool:
    return isinstance(value, bool)


def _is_volume(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 100


def _is_optional_str(value: object) -> bool:
    return value is None or isinstance(value, str)


_CONFIG_CHECKS = {
    "sound_enabled": _is_bool,
    "sound_volume": _is_volume,
    "notifications_enabled": _is_bool,
    "stats_path": _is_optional_str,
}


def load_config() -> AppConfig:
    """Load preferences from disk, falling back to defaults.

    Unknown keys are ignored; a value of the wrong type or range falls
    back to that field's default.
    """
    if not CONFIG_PATH.exists():
        return AppConfig()
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Could not read %s, using defaults", CONFIG_PATH, exc_info=True)
        return AppConfig()
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a JSON object", CONFIG_PATH)
        return AppConfig()

    filtered = {}
    for name, check in _CONFIG_CHECKS.items():
        if name not in data:
            continue
        if check(data[name]):
            filtered[name] = data[name]
        else:
            logger.warning(
                "Ignoring invalid %s=%r in %s, using default", name, data[name], CONFIG_PATH
            )
    return AppConfig(**filtered)


def save_config(config: AppConfig) -> None:
    """Write preferences to disk as JSON."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(
        json.dumps(asdict(config), indent=2) + "\n",
        encoding="utf-8",
    )
