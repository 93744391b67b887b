"""
PostgreSQL dialect implementation.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import ClassVar

from ..query.expressions import Expression, Infix
from ..translate.registry import SqlVariant
from .ansi import AnsiDialect
from .base import DialectCapabilities, DialectTag
from .postgres_functions import postgres_variant


class PostgresDialect(AnsiDialect):
    """
    PostgreSQL dialect with native ON CONFLICT, RETURNING and regex operators.
    """

    tag: ClassVar[DialectTag] = DialectTag.POSTGRES
    name: ClassVar[str] = "postgresql"
    display_name: ClassVar[str] = "PostgreSQL"
    capabilities: ClassVar[DialectCapabilities] = DialectCapabilities(
        supports_returning=True,
        supports_on_conflict=True,
        supports_window_clause=True,
        supports_table_alias_with_as=True,
        column_type_probe=True,
        explain_formats=("text", "json", "yaml", "xml"),
    )
    default_insert_method: ClassVar[str] = "on_conflict"
    default_upsert_method: ClassVar[str] = "on_conflict"

    @property
    def variant(self) -> SqlVariant:
        return postgres_variant

    def escape_number(self, value: int | float | Decimal) -> str:
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            if math.isnan(value):
                return "'NaN'::float8"
            return "'Infinity'::float8" if value > 0 else "'-Infinity'::float8"
        return super().escape_number(value)

    def escape_date(self, value: date | time) -> str:
        if isinstance(value, datetime):
            kind = "timestamptz" if value.tzinfo is not None else "timestamp"
            return f"'{value.isoformat(sep=' ')}'::{kind}"
        if isinstance(value, time):
            return f"'{value.isoformat()}'::time"
        return f"'{value.isoformat()}'::date"

    def expr_matches(self, x: Expression, y: Expression) -> Expression:
        return Infix("IS NOT DISTINCT FROM", x, y)


def get_postgres_dialect() -> PostgresDialect:
    return PostgresDialect()
