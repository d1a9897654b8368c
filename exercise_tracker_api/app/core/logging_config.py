"""
Logging setup for the exercise tracker.

Application modules and uvicorn's own loggers write through one
console handler (plus a file handler when ``LOG_FILE`` is set) with a
shared format, so request logs and store/service messages interleave
readably.
"""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def build_logging_config(level: str = "INFO", logfile: Optional[str] = None) -> Dict[str, Any]:
    """Return a ``logging.config.dictConfig`` dictionary for the service."""
    level_name = level.upper() if isinstance(logging.getLevelName(level.upper()), int) else "INFO"
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {"class": "logging.StreamHandler", "formatter": "default"},
    }
    if logfile:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "default",
            "filename": str(Path(logfile).resolve()),
            "encoding": "utf-8",
        }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT}},
        "handlers": handlers,
        "root": {"level": level_name, "handlers": list(handlers)},
        # Route uvicorn through the root handlers instead of its own.
        "loggers": {
            name: {"level": level_name, "handlers": [], "propagate": True}
            for name in _SERVER_LOGGERS
        },
    }


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Apply ``build_logging_config`` unless the root logger is already set up.

    Repeated ``create_app`` calls, and test runners that install their
    own root handlers, leave the existing configuration untouched.
    """
    if logging.getLogger().handlers:
        return
    logging.config.dictConfig(build_logging_config(level, logfile))
