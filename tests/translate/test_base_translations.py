import pytest

from sqlvariant.dialects import AnsiDialect
from sqlvariant.errors import UnknownFunctionError, UnsupportedArgumentError
from sqlvariant.translate import Translator, col, func


@pytest.fixture
def translator():
    return Translator(AnsiDialect())


@pytest.mark.parametrize(
    "expr, expected",
    [
        (col("a") + 1, "a + 1"),
        ((col("a") + 1) * 2, "(a + 1) * 2"),
        (col("a") - col("b") - 1, "a - b - 1"),
        (col("a") / (col("b") + 1), "a / (b + 1)"),
        (col("a") % 2, "a % 2"),
        (col("a") ** 2, "POWER(a, 2)"),
        (-col("a"), "-a"),
        (col("a") == col("b"), "a = b"),
        (col("a") != 1, "a <> 1"),
        ((col("a") > 1) & (col("b") <= 2), "(a > 1) AND (b <= 2)"),
        ((col("a") < 1) | (col("b") >= 2), "(a < 1) OR (b >= 2)"),
        (~(col("a") > 1), "NOT (a > 1)"),
        (col("a").isin([1, 2]), "a IN (1, 2)"),
        (col("a").is_na(), "a IS NULL"),
        (col("x", table="t") + 1, "t.x + 1"),
    ],
)
def test_operators(translator, expr, expected):
    assert translator.to_sql(expr) == expected


def test_empty_in_is_false(translator):
    assert translator.to_sql(col("a").isin([])) == "FALSE"


@pytest.mark.parametrize(
    "expr, expected",
    [
        (func.abs(col("x")), "ABS(x)"),
        (func.ceiling(col("x")), "CEIL(x)"),
        (func.round(col("x"), 1), "ROUND(x, 1)"),
        (func.log(col("x")), "ln(x)"),
        (func.as_numeric(col("x")), "CAST(x AS NUMERIC)"),
        (func.as_character(col("x")), "CAST(x AS VARCHAR)"),
        (func.tolower(col("s")), "LOWER(s)"),
        (func.nchar(col("s")), "LENGTH(s)"),
        (func.trimws(col("s"), which="left"), "LTRIM(s)"),
        (func.substr(col("s"), 2, 4), "SUBSTR(s, 2, 3)"),
        (func.paste(col("a"), col("b")), "CONCAT_WS(' ', a, b)"),
        (func.paste0(col("a"), col("b")), "CONCAT_WS('', a, b)"),
        (func.coalesce(col("a"), 0), "COALESCE(a, 0)"),
        (func.bitwXor(col("a"), col("b")), "BITXOR(a, b)"),
        (
            func.ifelse(col("a") > 1, "big", "small"),
            "CASE WHEN a > 1 THEN 'big' ELSE 'small' END",
        ),
    ],
)
def test_scalar_functions(translator, expr, expected):
    assert translator.to_sql(expr) == expected


def test_trimws_rejects_unknown_side(translator):
    with pytest.raises(UnsupportedArgumentError) as excinfo:
        translator.to_sql(func.trimws(col("s"), which="middle"))
    assert excinfo.value.allowed == ("both", "left", "right")


def test_paste_rejects_collapse(translator):
    with pytest.raises(UnsupportedArgumentError) as excinfo:
        translator.to_sql(func.paste(col("a"), collapse=","))
    assert excinfo.value.argument == "collapse"
    assert excinfo.value.allowed is None


@pytest.mark.parametrize(
    "expr, expected",
    [
        (func.n(), "COUNT(*)"),
        (func.n_distinct(col("x")), "COUNT(DISTINCT x)"),
        (func.mean(col("x"), na_rm=True), "AVG(x)"),
        (func.median(col("x")), "PERCENTILE_CONT(0.5) WITHIN GROUP (ORDER BY x)"),
        (func.quantile(col("x"), 0.25), "PERCENTILE_CONT(0.25) WITHIN GROUP (ORDER BY x)"),
    ],
)
def test_aggregates(translator, expr, expected):
    assert translator.to_sql(expr, context="aggregate") == expected


def test_quantile_probability_must_be_in_range(translator):
    with pytest.raises(UnsupportedArgumentError) as excinfo:
        translator.to_sql(func.quantile(col("x"), 1.5), context="aggregate")
    assert excinfo.value.argument == "probs"


def test_aggregate_is_not_a_scalar(translator):
    with pytest.raises(UnknownFunctionError):
        translator.to_sql(func.n_distinct(col("x")))


@pytest.fixture
def window(translator):
    return translator.window_spec(partition_by=["g"], order_by=["t"])


@pytest.mark.parametrize(
    "expr, expected",
    [
        (func.row_number(), "ROW_NUMBER() OVER (PARTITION BY g ORDER BY t)"),
        (func.min_rank(col("x")), "RANK() OVER (PARTITION BY g ORDER BY x)"),
        (func.lag(col("x")), "LAG(x, 1) OVER (PARTITION BY g ORDER BY t)"),
        (func.lead(col("x"), 2, 0), "LEAD(x, 2, 0) OVER (PARTITION BY g ORDER BY t)"),
        (func.ntile(col("x"), 4), "NTILE(4) OVER (PARTITION BY g ORDER BY x)"),
        (func.mean(col("x")), "AVG(x) OVER (PARTITION BY g)"),
        (func.n(), "COUNT(*) OVER (PARTITION BY g)"),
        (
            func.cumsum(col("x")),
            "SUM(x) OVER (PARTITION BY g ORDER BY t ROWS BETWEEN UNBOUNDED PRECEDING AND CURRENT ROW)",
        ),
        (
            func.last(col("x")),
            "LAST_VALUE(x) OVER (PARTITION BY g ORDER BY t "
            "ROWS BETWEEN UNBOUNDED PRECEDING AND UNBOUNDED FOLLOWING)",
        ),
        (
            func.median(col("x")),
            "PERCENTILE_CONT(0.5) WITHIN GROUP (ORDER BY x) OVER (PARTITION BY g)",
        ),
    ],
)
def test_window_functions(translator, window, expr, expected):
    assert translator.to_sql(expr, context="window", window=window) == expected


def test_window_aggregate_keeps_order_with_frame(translator):
    window = translator.window_spec(partition_by=["g"], order_by=["t"], frame=(-2, 0))
    sql = translator.to_sql(func.sum(col("x")), context="window", window=window)
    assert sql == "SUM(x) OVER (PARTITION BY g ORDER BY t ROWS BETWEEN 2 PRECEDING AND CURRENT ROW)"


def test_named_window_is_inlined_without_window_clause(translator):
    window = translator.window_spec(partition_by=["g"], name="w")
    sql = translator.to_sql(func.row_number(), context="window", window=window)
    assert sql == "ROW_NUMBER() OVER (PARTITION BY g)"


def test_lag_offset_must_be_non_negative(translator):
    with pytest.raises(UnsupportedArgumentError):
        translator.to_sql(func.lag(col("x"), -1), context="window")
