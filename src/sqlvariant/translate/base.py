"""
Dialect-independent translation tables.

``base_scalar``, ``base_aggregate`` and ``base_window`` are the parents that
every dialect registry extends. They are frozen at import time.
"""

from __future__ import annotations

from typing import Any

from ..query.expressions import (
    Call,
    Case,
    ExprList,
    Infix,
    OrderBy,
    Over,
    Postfix,
    Prefix,
    Star,
    WindowSpec,
    WithinGroup,
    as_expr,
    call,
    infix,
    lit,
    negate,
)
from ..validation import BooleanArgument, Choice, NumberArgument, WholeNumberArgument
from .helpers import (
    sql_aggregate,
    sql_cast,
    sql_infix,
    sql_log,
    sql_paste,
    sql_prefix,
    win_aggregate,
    win_cumulative,
    win_over,
    win_rank,
)
from .registry import Registry, SqlVariant, TranslationRule


# Scalar ------------------------------------------------------------------
# Marks a unary call; an explicit None operand is a NULL literal.
_UNARY = object()


def _plus(ctx, x, y=_UNARY):
    if y is _UNARY:
        return as_expr(x)
    return infix("+", x, y)


def _minus(ctx, x, y=_UNARY):
    if y is _UNARY:
        return Prefix("-", as_expr(x))
    return infix("-", x, y)


def _not(ctx, x):
    return negate(x)


def _in(ctx, x, table):
    if isinstance(table, tuple):
        if not table:
            return lit(False)
        return Infix("IN", as_expr(x), ExprList(tuple(as_expr(item) for item in table)))
    return Infix("IN", as_expr(x), ExprList((as_expr(table),)))


def _is_na(ctx, x):
    return Postfix(as_expr(x), "IS NULL")


def _ifelse(ctx, condition, true, false):
    return Case(((as_expr(condition), as_expr(true)),), as_expr(false))


def _round(ctx, x, digits=0):
    return call("ROUND", x, digits)


def _trimws(ctx, x, which="both"):
    if which == "left":
        return call("LTRIM", x)
    if which == "right":
        return call("RTRIM", x)
    return call("TRIM", x)


def _substr(ctx, x, start, stop):
    length = max(stop - start + 1, 0)
    return call("SUBSTR", x, start, length)


def _desc(ctx, x):
    return OrderBy(as_expr(x), descending=True)


def _build_scalar() -> Registry:
    registry = Registry("base_scalar")
    registry.update(
        {
            "+": _plus,
            "-": _minus,
            "*": sql_infix("*"),
            "/": sql_infix("/"),
            "%%": sql_infix("%"),
            "^": sql_prefix("POWER", 2),
            "==": sql_infix("="),
            "!=": sql_infix("<>"),
            "<": sql_infix("<"),
            "<=": sql_infix("<="),
            ">": sql_infix(">"),
            ">=": sql_infix(">="),
            "&": sql_infix("AND"),
            "|": sql_infix("OR"),
            "!": _not,
            "%in%": _in,
            "is_na": _is_na,
            "ifelse": _ifelse,
            "coalesce": sql_prefix("COALESCE"),
            "desc": _desc,
            # math
            "abs": sql_prefix("ABS", 1),
            "ceiling": sql_prefix("CEIL", 1),
            "floor": sql_prefix("FLOOR", 1),
            "sqrt": sql_prefix("SQRT", 1),
            "exp": sql_prefix("EXP", 1),
            "sign": sql_prefix("SIGN", 1),
            "log": sql_log(),
            "log10": sql_prefix("LOG10", 1),
            "round": TranslationRule("round", _round, validators={"digits": (WholeNumberArgument(),)}),
            "bitwAnd": sql_infix("&"),
            "bitwOr": sql_infix("|"),
            "bitwXor": sql_prefix("BITXOR", 2),
            # casts
            "as_numeric": sql_cast("NUMERIC"),
            "as_integer": sql_cast("INTEGER"),
            "as_character": sql_cast("VARCHAR"),
            "as_date": sql_cast("DATE"),
            # strings
            "tolower": sql_prefix("LOWER", 1),
            "toupper": sql_prefix("UPPER", 1),
            "str_to_lower": sql_prefix("LOWER", 1),
            "str_to_upper": sql_prefix("UPPER", 1),
            "nchar": sql_prefix("LENGTH", 1),
            "str_length": sql_prefix("LENGTH", 1),
            "trimws": TranslationRule(
                "trimws", _trimws, validators={"which": (Choice(("both", "left", "right")),)}
            ),
            "substr": TranslationRule(
                "substr",
                _substr,
                validators={"start": (WholeNumberArgument(),), "stop": (WholeNumberArgument(),)},
            ),
            "paste": sql_paste(" "),
            "paste0": sql_paste(""),
        }
    )
    return registry.freeze()


# Aggregate ---------------------------------------------------------------
def _n(ctx):
    return Call("COUNT", (Star(),))


def _n_distinct(ctx, x):
    return Call("COUNT", (as_expr(x),), distinct=True)


def _median(ctx, x, na_rm=False):
    return WithinGroup(call("PERCENTILE_CONT", 0.5), (as_expr(x),))


def _quantile(ctx, x, probs, na_rm=False):
    return WithinGroup(call("PERCENTILE_CONT", probs), (as_expr(x),))


_QUANTILE_VALIDATORS = {"probs": (NumberArgument(minimum=0, maximum=1),), "na_rm": (BooleanArgument(),)}


def _build_aggregate() -> Registry:
    registry = Registry("base_aggregate")
    registry.update(
        {
            "n": _n,
            "n_distinct": _n_distinct,
            "mean": sql_aggregate("AVG"),
            "sum": sql_aggregate("SUM"),
            "min": sql_aggregate("MIN"),
            "max": sql_aggregate("MAX"),
            "median": TranslationRule("median", _median, validators={"na_rm": (BooleanArgument(),)}),
            "quantile": TranslationRule("quantile", _quantile, validators=_QUANTILE_VALIDATORS),
        }
    )
    return registry.freeze()


# Window ------------------------------------------------------------------
def _ordered(ctx) -> WindowSpec:
    return WindowSpec(partition_by=ctx.window.partition_by, order_by=ctx.window.order_by)


def _win_n(ctx):
    return win_over(Call("COUNT", (Star(),)), ctx.window.for_aggregate())


def _ntile(ctx, x, n):
    window = WindowSpec(partition_by=ctx.window.partition_by, order_by=(as_expr(x),))
    return win_over(call("NTILE", n), window)


def _offset(name: str):
    def template(ctx, x, n=1, default=None):
        args: list[Any] = [x, n]
        if default is not None:
            args.append(default)
        return win_over(call(name, *args), _ordered(ctx))

    return TranslationRule(name, template, validators={"n": (WholeNumberArgument(minimum=0),)})


def _first(ctx, x):
    return win_over(call("FIRST_VALUE", x), _ordered(ctx))


def _last(ctx, x):
    window = WindowSpec(
        partition_by=ctx.window.partition_by,
        order_by=ctx.window.order_by,
        frame=(None, None),
    )
    return win_over(call("LAST_VALUE", x), window)


def _nth(ctx, x, n):
    return win_over(call("NTH_VALUE", x, n), _ordered(ctx))


def _win_median(ctx, x, na_rm=False):
    return Over(_median(ctx, x), WindowSpec(partition_by=ctx.window.partition_by))


def _win_quantile(ctx, x, probs, na_rm=False):
    return Over(_quantile(ctx, x, probs), WindowSpec(partition_by=ctx.window.partition_by))


def _build_window() -> Registry:
    registry = Registry("base_window")
    registry.update(
        {
            "row_number": win_rank("ROW_NUMBER"),
            "min_rank": win_rank("RANK"),
            "dense_rank": win_rank("DENSE_RANK"),
            "percent_rank": win_rank("PERCENT_RANK"),
            "cume_dist": win_rank("CUME_DIST"),
            "ntile": TranslationRule("ntile", _ntile, validators={"n": (WholeNumberArgument(minimum=1),)}),
            "lag": _offset("LAG"),
            "lead": _offset("LEAD"),
            "first": _first,
            "last": _last,
            "nth": TranslationRule("nth", _nth, validators={"n": (WholeNumberArgument(minimum=1),)}),
            "cumsum": win_cumulative("SUM"),
            "cummin": win_cumulative("MIN"),
            "cummax": win_cumulative("MAX"),
            "cummean": win_cumulative("AVG"),
            "n": _win_n,
            "mean": win_aggregate("AVG"),
            "sum": win_aggregate("SUM"),
            "min": win_aggregate("MIN"),
            "max": win_aggregate("MAX"),
            "median": TranslationRule("median", _win_median, validators={"na_rm": (BooleanArgument(),)}),
            "quantile": TranslationRule("quantile", _win_quantile, validators=_QUANTILE_VALIDATORS),
        }
    )
    return registry.freeze()


base_scalar = _build_scalar()
base_aggregate = _build_aggregate()
base_window = _build_window()

base_variant = SqlVariant(scalar=base_scalar, aggregate=base_aggregate, window=base_window)

__all__ = ["base_scalar", "base_aggregate", "base_window", "base_variant"]
