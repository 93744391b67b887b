"""
Dialect strategy interfaces describing SQL translation behaviors.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, Tuple

from ..errors import DialectConfigurationError, InvalidArgumentError

if TYPE_CHECKING:
    from ..query.expressions import Expression
    from ..translate.registry import SqlVariant


class DialectTag(str, enum.Enum):
    """
    Explicit dispatch key for every supported dialect.
    """

    POSTGRES = "postgresql"
    ANSI = "ansi"


@dataclass(frozen=True)
class DialectCapabilities:
    """
    Feature flags describing backend capabilities.
    """

    supports_returning: bool = False
    supports_on_conflict: bool = False
    supports_window_clause: bool = False
    supports_table_alias_with_as: bool = True
    column_type_probe: bool = False
    explain_formats: Tuple[str, ...] = ("text",)


INSERT_METHODS: Tuple[str, ...] = ("on_conflict", "where_not_exists")
UPSERT_METHODS: Tuple[str, ...] = ("on_conflict", "cte_update")
_NATIVE_METHODS = frozenset({"on_conflict"})


class Dialect(Protocol):
    """
    Strategy interface consumed by the translator, compiler and composer.
    """

    @property
    def tag(self) -> DialectTag: ...

    @property
    def name(self) -> str: ...

    @property
    def display_name(self) -> str: ...

    @property
    def capabilities(self) -> DialectCapabilities: ...

    @property
    def variant(self) -> "SqlVariant": ...

    @property
    def insert_method(self) -> str: ...

    @property
    def upsert_method(self) -> str: ...

    def quote_identifier(self, identifier: str) -> str: ...

    def escape_identifier(self, identifier: str) -> str: ...

    def format_table(self, table_name: str) -> str: ...

    def escape_literal(self, value: Any) -> str: ...

    def expr_matches(self, x: "Expression", y: "Expression") -> "Expression": ...

    def render(self, expr: "Expression") -> str: ...


def resolve_method(dialect: Dialect, kind: str, method: str | None) -> str:
    """
    Validate a row-statement build method for ``kind`` ("insert" or "upsert").

    ``None`` selects the dialect's configured default. Unknown names are an
    ``InvalidArgumentError``; a native method on a dialect without native
    conflict syntax is a configuration problem.
    """

    if kind == "insert":
        allowed, default = INSERT_METHODS, dialect.insert_method
    elif kind == "upsert":
        allowed, default = UPSERT_METHODS, dialect.upsert_method
    else:
        raise ValueError(f"Unknown row statement kind '{kind}'")

    if method is None:
        method = default
    if not isinstance(method, str) or method not in allowed:
        raise InvalidArgumentError("method", allowed)
    check_method_capability(dialect.display_name, dialect.capabilities, method)
    return method


def check_method_capability(display_name: str, capabilities: DialectCapabilities, method: str) -> None:
    if method in _NATIVE_METHODS and not capabilities.supports_on_conflict:
        raise DialectConfigurationError(
            f"Method '{method}' requires native conflict syntax, which {display_name} lacks."
        )
