"""
Logging configuration helpers.
It centralizes cross-cutting concerns like settings, logging, and document store access used by the API.
The structured helpers give services one way to report business events and query timings.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

from src.common.settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILE_NAME = "app.log"
LOG_FILE_BACKUP_DAYS = 14

_LOGGING_CONFIGURED = False


def configure_logging() -> None:
    """Configure process-wide logging from environment settings."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    settings = get_settings()
    level_name = settings.LOG_LEVEL.upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)

    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            when="midnight",
            backupCount=LOG_FILE_BACKUP_DAYS,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)

    _LOGGING_CONFIGURED = True


def _to_json(data: dict[str, Any]) -> str:
    return json.dumps(data, default=str, sort_keys=True)


def log_business_event(logger: logging.Logger, event: str, **data: Any) -> None:
    """Emit one INFO line describing a domain event and its payload."""

    if data:
        logger.info("Business event: %s | %s", event, _to_json(data))
    else:
        logger.info("Business event: %s", event)


@contextmanager
def timed_operation(
    logger: logging.Logger,
    name: str,
    *,
    expected: tuple[type[Exception], ...] = (),
) -> Iterator[None]:
    """Log the duration of a document store operation, re-raising any failure.

    Failures listed in `expected` are outcomes the caller turns into client
    errors, so they are logged at WARNING instead of ERROR.
    """

    started = time.perf_counter()
    try:
        yield
    except Exception as exc:
        duration_ms = (time.perf_counter() - started) * 1000.0
        level = logging.WARNING if isinstance(exc, expected) else logging.ERROR
        logger.log(level, "Query %s failed after %.2fms: %s", name, duration_ms, exc)
        raise
    duration_ms = (time.perf_counter() - started) * 1000.0
    logger.debug("Query %s completed in %.2fms", name, duration_ms)
