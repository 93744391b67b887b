"""
Clause composition for complete SQL statements.

A statement is a list of ``Clause`` objects (``None`` entries are skipped)
rendered one per line through the dialect's escaping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..errors import UnsupportedArgumentError
from .compiler import ExpressionCompiler
from .expressions import Expression, ExprList, Ident, Infix, Raw, WindowSpec, as_expr

if TYPE_CHECKING:
    from ..dialects.base import Dialect


@dataclass(frozen=True)
class Clause:
    """
    A leading keyword followed by expressions.

    ``parens`` wraps the joined items, as in ``INSERT INTO t (a, b)``. A
    clause with no items renders as the bare keyword (``DO NOTHING``).
    """

    keyword: str
    items: Tuple[Expression, ...] = ()
    separator: str = ", "
    parens: bool = False

    def render(self, dialect: "Dialect") -> str:
        if not self.items:
            return self.keyword
        body = self.separator.join(dialect.render(item) for item in self.items)
        if self.parens:
            body = f"({body})"
        return f"{self.keyword} {body}"


def clause(keyword: str, *items: Any, separator: str = ", ", parens: bool = False) -> Clause:
    return Clause(keyword, tuple(as_expr(item) for item in items), separator, parens)


def compose(clauses: Iterable[Optional[Clause]], dialect: "Dialect") -> str:
    return "\n".join(part.render(dialect) for part in clauses if part is not None)


# Shared clause builders --------------------------------------------------
def qualified(dialect: "Dialect", qualifier: str, column: str) -> Raw:
    """``qualifier.column`` where ``qualifier`` is already escaped SQL."""
    return Raw(f"{qualifier}.{dialect.escape_identifier(column)}")


def column_list(columns: Sequence[str]) -> Tuple[Expression, ...]:
    return tuple(Ident(column) for column in columns)


def returning_clause(
    dialect: "Dialect", table: str, returning_cols: Optional[Sequence[str]]
) -> Optional[Clause]:
    """
    ``RETURNING`` with table-qualified columns; ``"*"`` returns every column.
    """

    if not returning_cols:
        return None
    if not dialect.capabilities.supports_returning:
        raise UnsupportedArgumentError("returning_cols", None, dialect.display_name)
    table_sql = dialect.format_table(table)
    items: List[Expression] = []
    for column in returning_cols:
        if column == "*":
            items.append(Raw(f"{table_sql}.*"))
        else:
            items.append(qualified(dialect, table_sql, column))
    return Clause("RETURNING", tuple(items))


def set_clause(dialect: "Dialect", assignments: Mapping[str, Any]) -> Clause:
    items = tuple(Infix("=", Ident(column), as_expr(value)) for column, value in assignments.items())
    return Clause("SET", items)


def conflict_target(dialect: "Dialect", by: Sequence[str]) -> Clause:
    return Clause("ON CONFLICT", (ExprList(column_list(by)),))


def table_alias(dialect: "Dialect", source_sql: str, alias: str) -> str:
    """Parenthesise a subquery and attach an alias."""
    alias_sql = dialect.escape_identifier(alias)
    if dialect.capabilities.supports_table_alias_with_as:
        return f"({source_sql}) AS {alias_sql}"
    return f"({source_sql}) {alias_sql}"


def window_clause(dialect: "Dialect", windows: Mapping[str, WindowSpec]) -> Optional[Clause]:
    """
    ``WINDOW name AS (...)`` for named windows.

    Dialects without a WINDOW clause inline the specification at each use,
    so no clause is emitted for them.
    """

    if not windows or not dialect.capabilities.supports_window_clause:
        return None
    compiler = ExpressionCompiler(dialect)
    items = tuple(
        Raw(f"{dialect.escape_identifier(name)} AS {compiler.compile_window(spec)}")
        for name, spec in windows.items()
    )
    return Clause("WINDOW", items)


def values_subquery(
    dialect: "Dialect",
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    alias: str = "v",
) -> str:
    """
    Build ``SELECT * FROM (VALUES ...) AS alias (cols)`` from literal rows.
    """

    if not columns:
        raise ValueError("values_subquery() requires at least one column")
    rendered: List[str] = []
    for row in rows:
        row = tuple(row)
        if len(row) != len(columns):
            raise ValueError(f"Row {row!r} does not match columns {tuple(columns)!r}")
        rendered.append(dialect.render(ExprList(tuple(as_expr(value) for value in row))))
    if not rendered:
        raise ValueError("values_subquery() requires at least one row")
    column_sql = ", ".join(dialect.escape_identifier(column) for column in columns)
    source = table_alias(dialect, "VALUES " + ", ".join(rendered), alias)
    return f"SELECT * FROM {source} ({column_sql})"
