"""
Translation options resolved from code or the environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .errors import DialectConfigurationError
from .utils.logging import configure_logging

WEEK_START_ENV = "SQLVARIANT_WEEK_START"
SLOW_QUERY_ENV = "SQLVARIANT_SLOW_QUERY_MS"
LOG_LEVEL_ENV = "SQLVARIANT_LOG_LEVEL"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _parse_int(value: str, *, key: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise DialectConfigurationError(f"Invalid integer value for '{key}': {value!r}") from exc


def _parse_level(value: str, *, key: str) -> int:
    normalized = value.strip().upper()
    if normalized not in _LOG_LEVELS:
        raise DialectConfigurationError(f"Invalid log level for '{key}': {value!r}")
    return getattr(logging, normalized)


@dataclass(frozen=True)
class TranslationOptions:
    """
    Options consulted by translation rules and the introspection adapter.

    ``week_start`` follows the lubridate convention: 1 is Monday, 7 is Sunday.
    """

    week_start: int = 7
    slow_query_ms: int = 100
    log_level: int = logging.INFO

    def __post_init__(self) -> None:
        if isinstance(self.week_start, bool) or not 1 <= self.week_start <= 7:
            raise DialectConfigurationError(
                f"week_start must be between 1 and 7, got {self.week_start!r}"
            )
        if self.slow_query_ms < 0:
            raise DialectConfigurationError("slow_query_ms must not be negative")

    def apply_logging(self) -> None:
        """Set the shared ``sqlvariant`` logger to ``log_level``."""
        configure_logging(self.log_level)

    @classmethod
    def from_env(cls, **overrides) -> "TranslationOptions":
        """
        Build options from ``SQLVARIANT_*`` environment variables.

        Keyword overrides win over the environment.
        """

        values: dict[str, int] = {}
        week_start = os.getenv(WEEK_START_ENV)
        if week_start:
            values["week_start"] = _parse_int(week_start, key=WEEK_START_ENV)
        slow_query = os.getenv(SLOW_QUERY_ENV)
        if slow_query:
            values["slow_query_ms"] = _parse_int(slow_query, key=SLOW_QUERY_ENV)
        log_level = os.getenv(LOG_LEVEL_ENV)
        if log_level:
            values["log_level"] = _parse_level(log_level, key=LOG_LEVEL_ENV)
        values.update(overrides)
        return cls(**values)


DEFAULT_OPTIONS = TranslationOptions()
