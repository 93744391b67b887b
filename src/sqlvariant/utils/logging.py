"""Structured logging helpers for sqlvariant."""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterable, Iterator, Optional

ROOT_LOGGER = "sqlvariant"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(correlation_id)s | %(name)s | %(message)s"

_correlation_id: ContextVar[str | None] = ContextVar("sqlvariant_correlation_id", default=None)


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the active correlation id."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """
    Install the package handler once and optionally set the package level.

    The level lives on the shared ``sqlvariant`` logger, so it is set here
    and nowhere else. Without ``level`` an existing level is left alone.
    """

    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(CorrelationIdFilter())
        logger.addHandler(handler)
        if level is None:
            level = logging.INFO
    if level is not None:
        logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_correlation_id(value: Optional[str] = None) -> str:
    cid = value or uuid.uuid4().hex
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str:
    cid = _correlation_id.get()
    return cid if cid is not None else set_correlation_id()


@contextmanager
def correlation_scope(value: Optional[str] = None) -> Iterator[str]:
    """
    Bind a correlation id for the duration of a block.

    An id already bound by the caller is reused unless ``value`` is given;
    the previous binding is restored on exit.
    """

    previous = _correlation_id.get()
    cid = set_correlation_id(value or previous)
    try:
        yield cid
    finally:
        _correlation_id.set(previous)


def time_call(
    name: str,
    logger: logging.Logger,
    *,
    sql: str | None = None,
    params: Iterable[Any] | None = None,
    threshold_ms: int = 100,
):
    """Log how long a block took; WARNING at or above ``threshold_ms``."""
    start = time.monotonic()

    class Timer:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            elapsed_ms = (time.monotonic() - start) * 1000
            level = logging.WARNING if elapsed_ms >= threshold_ms else logging.DEBUG
            extra = {"sql": sql, "params": params, "elapsed_ms": elapsed_ms}
            outcome = "failed after" if exc_type is not None else "took"
            logger.log(level, "%s %s %.2fms", name, outcome, elapsed_ms, extra=extra)

    return Timer()
