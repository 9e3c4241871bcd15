from __future__ import annotations

import logging
from pathlib import Path
from tempfile import gettempdir
from typing import Any

from pythonjsonlogger import jsonlogger

from .settings import settings

LOGGER_NAME = "access_router"
LOG_FILE_NAME = "router.log.jsonl"

# Events that signal bad input data rather than normal traffic.
WARNING_EVENTS: frozenset[str] = frozenset({"network_rejected", "route_search_aborted"})


def _parse_level(name: str) -> int:
    level = logging.getLevelName(str(name or "").upper())
    return level if isinstance(level, int) else logging.INFO


def _resolve_log_dir(configured_out_dir: str) -> Path | None:
    """First writable of: configured out dir, ./out, the system temp dir."""
    for log_dir in (
        Path(configured_out_dir) / "logs",
        Path.cwd() / "out" / "logs",
        Path(gettempdir()) / "access-router" / "logs",
    ):
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            marker = log_dir / ".writetest"
            marker.touch(exist_ok=True)
            marker.unlink(missing_ok=True)
        except OSError:
            continue
        return log_dir
    return None


def _json_handler(handler: logging.Handler) -> logging.Handler:
    handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    return handler


def get_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if getattr(logger, "_configured", False):
        return logger

    logger.setLevel(_parse_level(settings.log_level))
    logger.propagate = False
    logger.addHandler(_json_handler(logging.StreamHandler()))

    log_dir = _resolve_log_dir(settings.out_dir)
    if log_dir is not None:
        try:
            logger.addHandler(_json_handler(logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8")))
        except OSError:
            pass

    logger._configured = True  # type: ignore[attr-defined]
    return logger


def reset_logger() -> None:
    """Drop handlers so the next call picks up changed settings."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger._configured = False  # type: ignore[attr-defined]


def log_event(event: str, **fields: Any) -> None:
    level = logging.WARNING if event in WARNING_EVENTS else logging.INFO
    # The event name doubles as message and as a top-level JSON key.
    get_logger().log(level, event, extra={"event": event, **fields})
