import math
from datetime import date, datetime

import pytest

from sqlvariant.dialects import AnsiDialect
from sqlvariant.errors import DialectConfigurationError, UnsupportedArgumentError
from sqlvariant.query.expressions import Ident


def test_ansi_capabilities():
    caps = AnsiDialect().capabilities
    assert not caps.supports_returning
    assert not caps.supports_on_conflict
    assert not caps.supports_window_clause
    assert caps.supports_table_alias_with_as
    assert not caps.column_type_probe
    assert caps.explain_formats == ("text",)


def test_ansi_literals():
    dialect = AnsiDialect()
    assert dialect.escape_literal(date(2024, 1, 2)) == "DATE '2024-01-02'"
    assert dialect.escape_literal(datetime(2024, 1, 2, 3, 4)) == "TIMESTAMP '2024-01-02 03:04:00'"
    assert dialect.escape_literal(False) == "FALSE"


def test_ansi_rejects_non_finite_and_nul():
    dialect = AnsiDialect()
    with pytest.raises(UnsupportedArgumentError):
        dialect.escape_literal(math.nan)
    with pytest.raises(UnsupportedArgumentError):
        dialect.escape_literal("a\x00b")


def test_ansi_rejects_unescapable_objects():
    with pytest.raises(TypeError):
        AnsiDialect().escape_literal(object())


def test_ansi_expr_matches_handles_nulls():
    dialect = AnsiDialect()
    expr = dialect.expr_matches(Ident("a"), Ident("b"))
    assert dialect.render(expr) == "((a = b) OR (a IS NULL AND b IS NULL))"


def test_ansi_defaults_to_fallback_methods():
    dialect = AnsiDialect()
    assert dialect.insert_method == "where_not_exists"
    assert dialect.upsert_method == "cte_update"


def test_ansi_rejects_native_conflict_method():
    with pytest.raises(DialectConfigurationError):
        AnsiDialect(insert_method="on_conflict")
