import logging

import pytest

from sqlvariant.config import TranslationOptions
from sqlvariant.dialects import PostgresDialect
from sqlvariant.errors import UnknownFunctionError
from sqlvariant.query.expressions import Ident, Literal, WindowSpec
from sqlvariant.translate import EvaluationContext, Translator, col, fixed, func, sql


@pytest.fixture
def translator():
    return Translator(PostgresDialect())


def test_translate_plain_values(translator):
    assert translator.translate(3) == Literal(3)
    assert translator.translate(col("x", table="t")) == Ident("x", "t")
    assert translator.to_sql("it's") == "'it''s'"


def test_raw_sql_passes_through(translator):
    assert translator.to_sql(func.coalesce(col("x"), sql("now()"))) == "COALESCE(x, now())"


def test_fixed_outside_pattern_is_rejected(translator):
    with pytest.raises(TypeError):
        translator.translate(fixed("a"))


def test_unknown_function(translator):
    with pytest.raises(UnknownFunctionError) as excinfo:
        translator.to_sql(func.frobnicate(col("x")))
    assert excinfo.value.context == "postgres_scalar"


def test_scalar_functions_resolve_inside_aggregates(translator):
    sql_text = translator.to_sql(func.sum(func.abs(col("x"))), context=EvaluationContext.AGGREGATE)
    assert sql_text == "SUM(ABS(x))"


def test_translate_call_accepts_names(translator):
    expr = translator.translate_call("round", [Ident("x")], {"digits": 1})
    assert translator.compiler.compile(expr) == "round(CAST(x AS numeric), 1)"


def test_window_spec_accepts_host_expressions(translator):
    window = translator.window_spec(partition_by=[col("g")], order_by=[func.desc(col("t"))])
    assert window.partition_by == (Ident("g"),)
    assert translator.compiler.compile_window(window) == "(PARTITION BY g ORDER BY t DESC)"
    assert isinstance(window, WindowSpec)


def test_resolution_is_logged(translator, caplog):
    caplog.set_level(logging.DEBUG, logger="sqlvariant.translate")
    translator.to_sql(func.abs(col("x")))
    assert any("Resolved abs in scalar context" in record.message for record in caplog.records)


def test_options_default_from_code():
    translator = Translator(PostgresDialect(), options=TranslationOptions(week_start=3))
    assert translator.options.week_start == 3


@pytest.mark.parametrize(
    "expr, expected",
    [
        (func.sum(col("x")) / func.n(), "SUM(x) / COUNT(*)"),
        (func.sd(col("x")) + 1, "STDDEV_SAMP(x) + 1"),
        (func.round(func.mean(col("x")), 2), "round(CAST(AVG(x) AS numeric), 2)"),
    ],
)
def test_aggregates_compose_with_scalar_rules(translator, expr, expected):
    assert translator.to_sql(expr, context=EvaluationContext.AGGREGATE) == expected


def test_window_functions_compose_with_operators(translator):
    window = translator.window_spec(partition_by=["g"], order_by=["t"])
    sql_text = translator.to_sql(func.lag(col("x")) - col("x"), context="window", window=window)
    assert sql_text == "LAG(x, 1) OVER (PARTITION BY g ORDER BY t) - x"


def test_aggregates_stay_unknown_in_scalar_context(translator):
    with pytest.raises(UnknownFunctionError) as excinfo:
        translator.to_sql(func.sum(col("x")) / func.n())
    assert excinfo.value.context == "postgres_scalar"


def test_unknown_names_report_the_requested_context(translator):
    with pytest.raises(UnknownFunctionError) as excinfo:
        translator.to_sql(func.frobnicate(col("x")), context="aggregate")
    assert excinfo.value.context == "postgres_aggregate"


def test_none_operands_become_null(translator):
    assert translator.to_sql(col("x") + None) == "x + NULL"
    assert translator.to_sql(col("x") - None) == "x - NULL"
    assert translator.to_sql(-col("x")) == "-x"


def test_negating_a_negative_literal_is_parenthesised(translator):
    assert translator.to_sql(func("-", -5)) == "-(-5)"


def test_translators_leave_the_package_log_level_alone():
    logger = logging.getLogger("sqlvariant")
    before = logger.level
    Translator(PostgresDialect(), options=TranslationOptions(log_level=logging.DEBUG))
    Translator(PostgresDialect(), options=TranslationOptions(log_level=logging.ERROR))
    assert logger.level == before
    assert logging.getLogger("sqlvariant.translate").level == logging.NOTSET
