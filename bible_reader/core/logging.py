"""Structured logging helpers with correlation and data-source metadata."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, Optional

from pythonjsonlogger import jsonlogger

from bible_reader.core.config import settings

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_data_source: ContextVar[Optional[str]] = ContextVar("data_source", default=None)

LOG_LEVEL = logging.getLevelName(settings.BIBLE_READER_LOG_LEVEL.upper())
if not isinstance(LOG_LEVEL, int):
    LOG_LEVEL = logging.INFO

PACKAGE_DIR = Path(__file__).resolve().parent.parent


def _resolve_logs_dir() -> Path:
    """Return the first writable of: BIBLE_READER_LOG_DIR, DOCUMENT_DIR/logs, package logs."""

    candidates = [settings.DOCUMENT_DIR / "logs", PACKAGE_DIR / "logs"]
    if settings.BIBLE_READER_LOG_DIR:
        candidates.insert(0, Path(settings.BIBLE_READER_LOG_DIR))

    for candidate in candidates:
        try:
            candidate.mkdir(parents=True, exist_ok=True)
        except OSError:
            continue
        return candidate
    raise PermissionError(f"No writable logs directory among {candidates}")


LOGS_DIR = _resolve_logs_dir()
LOG_SCHEMA_VERSION = "1.0.0"
LOG_FILE_PATH = LOGS_DIR / "bible_reader.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5


class VersionedJsonFormatter(jsonlogger.JsonFormatter):
    """Inject a schema version into each structured log entry."""

    def __init__(self, *args, schema_version: str, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._schema_version = schema_version

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("schema_version", self._schema_version)


class CorrelationIdFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Attach correlation id and active data source to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        record.data_source = get_data_source() or "-"
        return True


def bind_correlation_id(value: Optional[str]) -> Token[Optional[str]]:
    """Bind ``value`` to the correlation id context variable."""

    return _correlation_id.set(value)


def reset_correlation_id(token: Token[Optional[str]]) -> None:
    """Reset the correlation id context variable to a previous state."""

    _correlation_id.reset(token)


def get_correlation_id() -> Optional[str]:
    """Return the current correlation id if bound."""

    return _correlation_id.get()


def bind_data_source(value: Optional[str]) -> Token[Optional[str]]:
    """Bind the engine mode ("local" or "remote") serving the current call."""

    return _data_source.set(value)


def reset_data_source(token: Token[Optional[str]]) -> None:
    """Reset the data source context variable."""

    _data_source.reset(token)


def get_data_source() -> Optional[str]:
    """Return the engine mode bound to the current call, if any."""

    return _data_source.get()


@contextmanager
def data_source_context(value: Optional[str]) -> Iterator[None]:
    """Context manager that temporarily binds the active data source."""

    token = bind_data_source(value)
    try:
        yield
    finally:
        reset_data_source(token)


def _ensure_handlers(logger: logging.Logger) -> None:
    if logger.handlers:
        return

    formatter = VersionedJsonFormatter(
        " ".join(
            [
                "%(asctime)s",
                "%(levelname)s",
                "%(name)s",
                "%(message)s",
                "%(correlation_id)s",
                "%(data_source)s",
            ]
        ),
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
            "correlation_id": "cid",
            "data_source": "source",
        },
        datefmt="%Y-%m-%d %H:%M:%S",
        json_ensure_ascii=False,
        schema_version=LOG_SCHEMA_VERSION,
    )
    correlation_filter = CorrelationIdFilter()

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.addFilter(correlation_filter)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    file_handler = RotatingFileHandler(
        LOG_FILE_PATH, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
    )
    file_handler.addFilter(correlation_filter)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger with correlation id filtering."""

    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)
    _ensure_handlers(logger)
    return logger


__all__ = [
    "CorrelationIdFilter",
    "bind_correlation_id",
    "bind_data_source",
    "reset_correlation_id",
    "reset_data_source",
    "get_correlation_id",
    "get_data_source",
    "data_source_context",
    "get_logger",
    "LOG_FILE_PATH",
    "LOG_SCHEMA_VERSION",
]
