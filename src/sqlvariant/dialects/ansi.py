"""
ANSI SQL dialect: the generic backend every concrete dialect builds on.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, ClassVar, FrozenSet

from ..errors import UnsupportedArgumentError
from ..query.compiler import ExpressionCompiler
from ..query.expressions import Expression, Infix, Paren, Postfix
from ..translate.base import base_variant
from ..translate.registry import SqlVariant
from .base import DialectCapabilities, DialectTag, resolve_method

_PLAIN_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")

RESERVED_WORDS: FrozenSet[str] = frozenset(
    """
    all analyse analyze and any array as asc asymmetric both case cast check
    collate column constraint create current_catalog current_date current_role
    current_time current_timestamp current_user default deferrable desc distinct
    do else end except false fetch for foreign from grant group having in
    initially intersect into lateral leading limit localtime localtimestamp not
    null offset on only or order placing primary references returning select
    session_user some symmetric table then to trailing true union unique user
    using variadic when where window with
    """.split()
)


class AnsiDialect:
    """
    Standard SQL without native conflict handling or RETURNING.
    """

    tag: ClassVar[DialectTag] = DialectTag.ANSI
    name: ClassVar[str] = "ansi"
    display_name: ClassVar[str] = "ANSI SQL"
    capabilities: ClassVar[DialectCapabilities] = DialectCapabilities(
        supports_returning=False,
        supports_on_conflict=False,
        supports_window_clause=False,
        supports_table_alias_with_as=True,
        column_type_probe=False,
        explain_formats=("text",),
    )
    default_insert_method: ClassVar[str] = "where_not_exists"
    default_upsert_method: ClassVar[str] = "cte_update"
    reserved_words: ClassVar[FrozenSet[str]] = RESERVED_WORDS

    def __init__(self, insert_method: str | None = None, upsert_method: str | None = None) -> None:
        self.insert_method = insert_method or self.default_insert_method
        self.upsert_method = upsert_method or self.default_upsert_method
        # validated once, at construction
        resolve_method(self, "insert", self.insert_method)
        resolve_method(self, "upsert", self.upsert_method)
        self._compiler = ExpressionCompiler(self)

    @property
    def variant(self) -> SqlVariant:
        return base_variant

    # Identifiers -------------------------------------------------------
    def quote_identifier(self, identifier: str) -> str:
        escaped = identifier.replace('"', '""')
        return f'"{escaped}"'

    def escape_identifier(self, identifier: str) -> str:
        """Quote only when the identifier would not survive unquoted."""
        if _PLAIN_IDENTIFIER.match(identifier) and identifier not in self.reserved_words:
            return identifier
        return self.quote_identifier(identifier)

    def format_table(self, table_name: str) -> str:
        if "." in table_name:
            schema, table = table_name.split(".", 1)
            return f"{self.escape_identifier(schema)}.{self.escape_identifier(table)}"
        return self.escape_identifier(table_name)

    # Literals ----------------------------------------------------------
    def escape_literal(self, value: Any) -> str:
        if value is None:
            return "NULL"
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, (int, float, Decimal)):
            return self.escape_number(value)
        if isinstance(value, (date, time)):
            return self.escape_date(value)
        if isinstance(value, str):
            return self.escape_string(value)
        raise TypeError(f"Cannot escape value of type {type(value).__name__} as a SQL literal")

    def escape_string(self, value: str) -> str:
        if "\x00" in value:
            raise UnsupportedArgumentError("literal", "strings without NUL characters", self.display_name)
        escaped = value.replace("'", "''")
        return f"'{escaped}'"

    def escape_number(self, value: int | float | Decimal) -> str:
        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                raise UnsupportedArgumentError("literal", "finite numbers", self.display_name)
            return repr(value)
        if isinstance(value, Decimal) and not value.is_finite():
            raise UnsupportedArgumentError("literal", "finite numbers", self.display_name)
        return str(value)

    def escape_date(self, value: date | time) -> str:
        if isinstance(value, datetime):
            return f"TIMESTAMP '{value.isoformat(sep=' ')}'"
        if isinstance(value, time):
            return f"TIME '{value.isoformat()}'"
        return f"DATE '{value.isoformat()}'"

    # Expressions -------------------------------------------------------
    def expr_matches(self, x: Expression, y: Expression) -> Expression:
        equal = Infix("=", x, y)
        both_null = Infix("AND", Postfix(x, "IS NULL"), Postfix(y, "IS NULL"))
        return Paren(Infix("OR", equal, Paren(both_null)))

    def render(self, expr: Expression) -> str:
        return self._compiler.compile(expr)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(insert_method={self.insert_method!r}, upsert_method={self.upsert_method!r})"
