"""Logging setup driven by ``log_level`` / ``log_format``."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

from relsync.config.models import RelsyncConfig

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(config: RelsyncConfig, handler: logging.Handler | None = None) -> logging.Logger:
    """Attach a single handler to the ``relsync`` logger and set its level.

    Calling it again replaces the handler rather than adding another.
    """
    logger = logging.getLogger("relsync")
    logger.setLevel(_LEVELS[config.log_level])

    handler = handler or logging.StreamHandler()
    if config.log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    for existing in list(logger.handlers):
        if getattr(existing, "_relsync_handler", False):
            logger.removeHandler(existing)
    handler._relsync_handler = True
    logger.addHandler(handler)
    return logger
