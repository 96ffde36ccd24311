"""Application-wide logger writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "blokit"
_LOG_FILE = "blokit.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_configured = False


def configure_logging(level: str | int = logging.INFO, log_dir: Path | None = None) -> None:
    """Attach the rotating file handler to the application logger.

    Safe to call more than once; only the level changes after the first call.
    """
    global _configured
    root = logging.getLogger(_APP_NAME)
    root.setLevel(level)
    if _configured:
        return

    if log_dir is None:
        log_dir = Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    if not root.handlers:
        root.addHandler(handler)
    root.propagate = False
    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the application logger, or a named child of it.

    Module names under the ``blokit`` package map onto the same hierarchy,
    so ``get_logger(__name__)`` inherits the handler configured above.
    """
    if name is None or name == _APP_NAME:
        return logging.getLogger(_APP_NAME)
    if name.startswith(f"{_APP_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_APP_NAME}.{name}")
