"""Logging configuration for the wiki engine."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

from tome.core.time import isoformat_z, utc_now

ROOT_LOGGER_NAME = "tome"
_HANDLER_ATTR = "_is_tome_stream_handler"
_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int = logging.INFO, fmt: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the ``tome`` logger if it is missing."""

    logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in logger.handlers:
        if getattr(handler, _HANDLER_ATTR, False):
            break
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
        setattr(handler, _HANDLER_ATTR, True)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


class StructuredLogger:
    """Helper for emitting structured JSON log entries."""

    def __init__(self, logger: logging.Logger, defaults: Optional[Mapping[str, Any]] = None):
        self._logger = logger
        self._defaults: Dict[str, Any] = dict(defaults or {})

    def bind(self, **extra: Any) -> "StructuredLogger":
        """Return a new logger with additional default fields."""

        merged = dict(self._defaults)
        merged.update(extra)
        return StructuredLogger(self._logger, merged)

    def _emit(self, level: int, event: str, exc_info: bool = False, **fields: Any) -> None:
        payload: Dict[str, Any] = {
            "ts": isoformat_z(utc_now()),
            "event": event,
            "level": logging.getLevelName(level),
        }
        payload.update(self._defaults)
        payload.update(fields)
        message = json.dumps(payload, ensure_ascii=False, default=str)
        self._logger.log(level, message, exc_info=exc_info, extra={"event": event})

    def info(self, event: str, **fields: Any) -> None:
        self._emit(logging.INFO, event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit(logging.WARNING, event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit(logging.ERROR, event, **fields)

    def exception(self, event: str, **fields: Any) -> None:
        """Emit an error entry carrying the active exception's traceback."""

        self._emit(logging.ERROR, event, exc_info=True, **fields)


def structured_logger(logger_name: str, **defaults: Any) -> StructuredLogger:
    """Return a :class:`StructuredLogger` wrapping ``logging.getLogger(logger_name)``."""

    return StructuredLogger(logging.getLogger(logger_name), defaults)


__all__ = ["ROOT_LOGGER_NAME", "StructuredLogger", "configure_logging", "structured_logger"]
