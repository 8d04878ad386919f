from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any

from core.config import BACKEND_DIR


_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# httpx logs one INFO line per request.
_QUIET_LOGGERS = ("httpx", "httpcore")
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Schedule edits (including superseded slots) go to their own file in production.
AUDIT_LOGGER = "services.schedule_session"


def _rotating_file(path: Path, level: str) -> dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": str(path),
        "maxBytes": 10 * 1024 * 1024,
        "backupCount": 5,
        "encoding": "utf-8",
        "level": level,
        "formatter": "plain",
    }


def logging_config(*, environment: str, log_dir: Path | None = None) -> dict[str, Any]:
    """Build the `logging.config.dictConfig` payload.

    Development: console only, DEBUG.
    Production: console plus `schedule.log` at INFO, and `schedule-audit.log`
    for the session controller.
    """

    production = (environment or "development").strip().lower() == "production"
    level = "INFO" if production else "DEBUG"

    handlers: dict[str, dict[str, Any]] = {
        "console": {"class": "logging.StreamHandler", "level": level, "formatter": "plain"},
    }
    root_handlers = ["console"]
    loggers: dict[str, dict[str, Any]] = {name: {"level": "WARNING"} for name in _QUIET_LOGGERS}
    loggers.update({name: {"level": level} for name in _SERVER_LOGGERS})

    if production:
        logs_dir = Path(log_dir) if log_dir is not None else BACKEND_DIR / "logs"
        logs_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"] = _rotating_file(logs_dir / "schedule.log", level)
        handlers["audit"] = _rotating_file(logs_dir / "schedule-audit.log", "INFO")
        root_handlers.append("file")
        loggers[AUDIT_LOGGER] = {"level": "INFO", "handlers": ["audit"]}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"plain": {"format": _FORMAT, "datefmt": _DATEFMT}},
        "handlers": handlers,
        "root": {"level": level, "handlers": root_handlers},
        "loggers": loggers,
    }


def setup_logging(*, environment: str, log_dir: Path | None = None) -> None:
    # A configured root (uvicorn --log-config, pytest) is left alone.
    if logging.getLogger().handlers:
        return
    logging.config.dictConfig(logging_config(environment=environment, log_dir=log_dir))
