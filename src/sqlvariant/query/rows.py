"""
Row-level statements: INSERT with conflict handling, UPSERT and EXPLAIN.

Each statement has a native form built on ``ON CONFLICT`` and a generic
fallback (``where_not_exists`` / ``cte_update``) for dialects without it.
The build method comes from the call, else from the dialect's default.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from ..dialects.base import resolve_method
from ..errors import InvalidArgumentError
from ..utils import get_logger
from .clauses import (
    Clause,
    column_list,
    compose,
    conflict_target,
    qualified,
    returning_clause,
    set_clause,
    table_alias,
)
from .expressions import Infix, Keyword, Raw, Star, conjunction

if TYPE_CHECKING:
    from ..dialects.base import Dialect

SOURCE_ALIAS = "...y"
UPDATED_ALIAS = "updated"
CONFLICT_ACTIONS: Tuple[str, ...] = ("error", "ignore")

logger = get_logger("query.rows")


def insert_statement(
    dialect: "Dialect",
    table: str,
    source: str,
    insert_cols: Sequence[str],
    by: Sequence[str] = (),
    conflict: str = "error",
    returning_cols: Optional[Sequence[str]] = None,
    method: Optional[str] = None,
) -> str:
    """
    Insert the rows of ``source`` (a SELECT statement) into ``table``.

    With ``conflict="ignore"`` rows whose ``by`` key already exists are
    skipped. With ``conflict="error"`` no conflict handling is emitted and a
    duplicate key fails in the database.
    """

    if conflict not in CONFLICT_ACTIONS:
        raise InvalidArgumentError("conflict", CONFLICT_ACTIONS)
    method = resolve_method(dialect, "insert", method)
    insert_cols = _require_columns("insert_cols", insert_cols)
    by = tuple(by or ())
    if conflict == "ignore":
        by = _require_columns("by", by)

    table_sql = dialect.format_table(table)
    clauses: List[Optional[Clause]] = [
        Clause(f"INSERT INTO {table_sql}", column_list(insert_cols), parens=True),
        Clause("SELECT", (Star(),)),
        _from_source(dialect, source),
    ]
    if conflict == "ignore":
        if method == "on_conflict":
            clauses.append(conflict_target(dialect, by))
            clauses.append(Clause("DO NOTHING"))
        else:
            clauses.append(_where_not_exists(dialect, table_sql, by))
    clauses.append(returning_clause(dialect, table, returning_cols))

    logger.debug("Built insert into %s using %s (conflict=%s)", table, method, conflict)
    return compose(clauses, dialect)


def upsert_statement(
    dialect: "Dialect",
    table: str,
    source: str,
    by: Sequence[str],
    update_cols: Sequence[str],
    returning_cols: Optional[Sequence[str]] = None,
    method: Optional[str] = None,
) -> str:
    """
    Update rows of ``table`` matching ``source`` on ``by`` and insert the rest.
    """

    method = resolve_method(dialect, "upsert", method)
    by = _require_columns("by", by)
    update_cols = _require_columns("update_cols", update_cols)
    overlap = sorted(set(by) & set(update_cols))
    if overlap:
        raise InvalidArgumentError(
            "update_cols", message=f"Key columns cannot also be updated: {', '.join(overlap)}."
        )

    insert_cols = by + update_cols
    table_sql = dialect.format_table(table)
    if method == "on_conflict":
        excluded = {column: qualified(dialect, "excluded", column) for column in update_cols}
        clauses: List[Optional[Clause]] = [
            Clause(f"INSERT INTO {table_sql}", column_list(insert_cols), parens=True),
            Clause("SELECT", column_list(insert_cols)),
            _from_source(dialect, source),
            Clause("WHERE", (Keyword("true"),)),
            conflict_target(dialect, by),
            Clause("DO UPDATE"),
            set_clause(dialect, excluded),
        ]
    else:
        clauses = [
            _updated_cte(dialect, table_sql, source, by, update_cols),
            Clause(f"INSERT INTO {table_sql}", column_list(insert_cols), parens=True),
            Clause("SELECT", column_list(insert_cols)),
            _from_source(dialect, source),
            _where_not_exists(dialect, dialect.escape_identifier(UPDATED_ALIAS), by),
        ]
    clauses.append(returning_clause(dialect, table, returning_cols))

    logger.debug("Built upsert into %s using %s", table, method)
    return compose(clauses, dialect)


def explain_statement(dialect: "Dialect", sql: str, format: Optional[str] = "text") -> str:
    if format is None:
        return f"EXPLAIN {sql}"
    formats = dialect.capabilities.explain_formats
    if format not in formats:
        raise InvalidArgumentError("format", formats)
    return f"EXPLAIN (FORMAT {format}) {sql}"


# Helpers -----------------------------------------------------------------
def _require_columns(argument: str, columns: Sequence[str]) -> Tuple[str, ...]:
    if isinstance(columns, str):
        columns = (columns,)
    columns = tuple(columns or ())
    if not columns:
        raise InvalidArgumentError(argument, message=f"'{argument}' must name at least one column.")
    return columns


def _from_source(dialect: "Dialect", source: str) -> Clause:
    return Clause("FROM", (Raw(table_alias(dialect, source, SOURCE_ALIAS)),))


def _key_match(dialect: "Dialect", left_sql: str, right_sql: str, by: Sequence[str]):
    return conjunction(
        Infix("=", qualified(dialect, left_sql, column), qualified(dialect, right_sql, column))
        for column in by
    )


def _where_not_exists(dialect: "Dialect", target_sql: str, by: Sequence[str]) -> Clause:
    source_sql = dialect.escape_identifier(SOURCE_ALIAS)
    subquery = compose(
        [
            Clause("SELECT", (Raw("1"),)),
            Clause("FROM", (Raw(target_sql),)),
            Clause("WHERE", (_key_match(dialect, target_sql, source_sql, by),)),
        ],
        dialect,
    )
    return Clause("WHERE NOT EXISTS", (Raw(f"(\n{_indent(subquery)}\n)"),))


def _updated_cte(
    dialect: "Dialect",
    table_sql: str,
    source: str,
    by: Sequence[str],
    update_cols: Sequence[str],
) -> Clause:
    source_sql = dialect.escape_identifier(SOURCE_ALIAS)
    update = compose(
        [
            Clause(f"UPDATE {table_sql}"),
            set_clause(dialect, {column: qualified(dialect, source_sql, column) for column in update_cols}),
            _from_source(dialect, source),
            Clause("WHERE", (_key_match(dialect, source_sql, table_sql, by),)),
            Clause("RETURNING", (Raw(f"{table_sql}.*"),)),
        ],
        dialect,
    )
    name = dialect.escape_identifier(UPDATED_ALIAS)
    return Clause("WITH", (Raw(f"{name} AS (\n{_indent(update)}\n)"),))


def _indent(sql: str, prefix: str = "  ") -> str:
    return "\n".join(prefix + line for line in sql.splitlines())
