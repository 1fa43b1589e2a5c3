"""Application-wide logging to a rotating file in the user log directory."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir
from rich.console import Console
from rich.logging import RichHandler

_APP_NAME = "pomodoro-cli"
_ROOT_LOGGER = "pomodoro_cli"
_LOG_FILE = "pomodoro.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3


def get_logger(name: str = _ROOT_LOGGER) -> logging.Logger:
    """Return a logger under the application namespace.

    Handlers are only attached by :func:`configure_logging`; until then
    records propagate to the root logger (which is what pytest's caplog
    captures).
    """
    if name != _ROOT_LOGGER and not name.startswith(_ROOT_LOGGER + "."):
        name = f"{_ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(*, verbose: bool = False, log_dir: Path | None = None) -> Path:
    """Attach the rotating file handler (and stderr mirroring when verbose).

    Returns the path of the log file.
    """
    log_dir = log_dir or Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / _LOG_FILE

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    logger.addHandler(file_handler)

    if verbose:
        stderr_handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        stderr_handler.setLevel(logging.DEBUG)
        logger.addHandler(stderr_handler)

    logger.propagate = False
    return log_path
