"""
Dialect strategy registry.
"""

from __future__ import annotations

from typing import Any, Dict, Type, Union

from ..errors import DialectConfigurationError
from .ansi import AnsiDialect
from .base import Dialect, DialectCapabilities, DialectTag
from .postgres import PostgresDialect

DIALECTS: Dict[DialectTag, Type[AnsiDialect]] = {
    DialectTag.POSTGRES: PostgresDialect,
    DialectTag.ANSI: AnsiDialect,
}

_ALIASES = {"postgres": DialectTag.POSTGRES, "pg": DialectTag.POSTGRES}


def get_dialect(tag: Union[DialectTag, str], **kwargs: Any) -> AnsiDialect:
    """
    Instantiate the dialect registered under ``tag``.

    Keyword arguments (``insert_method``, ``upsert_method``) are passed to the
    dialect constructor and validated there.
    """

    if not isinstance(tag, DialectTag):
        key = str(tag).strip().lower()
        try:
            tag = _ALIASES.get(key) or DialectTag(key)
        except ValueError:
            available = ", ".join(sorted(t.value for t in DIALECTS))
            raise DialectConfigurationError(
                f"Unknown dialect '{key}'; available dialects: {available}"
            ) from None
    return DIALECTS[tag](**kwargs)


__all__ = [
    "Dialect",
    "DialectCapabilities",
    "DialectTag",
    "AnsiDialect",
    "PostgresDialect",
    "DIALECTS",
    "get_dialect",
]
