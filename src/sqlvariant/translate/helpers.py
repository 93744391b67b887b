"""
Factories producing translation rules for common SQL shapes.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Optional

from ..errors import TranslationAmbiguityError, UnsupportedArgumentError
from ..query.expressions import (
    Call,
    Cast,
    Expression,
    Infix,
    Literal,
    Over,
    Paren,
    Prefix,
    WindowSpec,
    as_expr,
    call,
    infix,
    is_static,
    lit,
    negate,
    static_value,
)
from ..validation import AllowedValues, BooleanArgument, NumberArgument
from .host import FixedPattern
from .registry import TranslationRule

REGEX_METACHARACTERS = frozenset(".^$*+?()[]{}|\\")


# Scalar shapes -----------------------------------------------------------
def sql_infix(op: str) -> Callable[..., Expression]:
    def template(ctx, x, y):
        return infix(op, x, y)

    return template


def sql_prefix(name: str, n: Optional[int] = None) -> Callable[..., Expression]:
    """A plain function call ``name(args...)``; ``n`` fixes the arity."""
    if n == 1:
        def unary(ctx, x):
            return call(name, x)

        return unary
    if n == 2:
        def binary(ctx, x, y):
            return call(name, x, y)

        return binary

    def variadic(ctx, *args):
        return call(name, *args)

    return variadic


def sql_cast(type_name: str) -> Callable[..., Expression]:
    def template(ctx, x):
        return Cast(as_expr(x), type_name)

    return template


def sql_paste(default_sep: str) -> TranslationRule:
    def template(ctx, *args, sep=default_sep, collapse=None):
        return call("CONCAT_WS", sep, *args)

    return TranslationRule("paste", template, validators={"collapse": (AllowedValues(),)})


def sql_log() -> TranslationRule:
    def template(ctx, x, base=math.e):
        if math.isclose(base, math.e):
            return call("ln", x)
        return infix("/", call("log", x), call("log", base))

    return TranslationRule("log", template, validators={"base": (NumberArgument(),)})


def sql_cot() -> Callable[..., Expression]:
    def template(ctx, x):
        return infix("/", 1, call("TAN", x))

    return template


def sql_not_supported(name: str) -> Callable[..., Expression]:
    def template(ctx, *args, **kwargs):
        raise TranslationAmbiguityError(name, ctx.context.value, ctx.backend)

    return template


# Aggregate shapes --------------------------------------------------------
def sql_aggregate(f: str) -> TranslationRule:
    """Single-argument aggregate; missing values are always dropped in SQL."""

    def template(ctx, x, na_rm=False):
        return call(f, x)

    return TranslationRule(f, template, validators={"na_rm": (BooleanArgument(),)})


def sql_aggregate_2(f: str) -> Callable[..., Expression]:
    def template(ctx, x, y):
        return call(f, x, y)

    return template


# Window shapes -----------------------------------------------------------
def win_over(expr: Expression, window: WindowSpec) -> Over:
    return Over(expr, window)


def win_aggregate(f: str) -> TranslationRule:
    def template(ctx, x, na_rm=False):
        return win_over(call(f, x), ctx.window.for_aggregate())

    return TranslationRule(f, template, validators={"na_rm": (BooleanArgument(),)})


def win_aggregate_2(f: str) -> Callable[..., Expression]:
    def template(ctx, x, y):
        return win_over(call(f, x, y), ctx.window.for_aggregate())

    return template


def win_rank(f: str) -> Callable[..., Expression]:
    """Ranking function ordered by ``x`` when given, else by the current order."""

    def template(ctx, x=None):
        window = ctx.window
        if x is not None:
            window = WindowSpec(partition_by=window.partition_by, order_by=(as_expr(x),))
        return win_over(Call(f), window)

    return template


def win_cumulative(f: str) -> Callable[..., Expression]:
    def template(ctx, x):
        window = WindowSpec(
            partition_by=ctx.window.partition_by,
            order_by=ctx.window.order_by,
            frame=(None, 0),
        )
        return win_over(call(f, x), window)

    return template


win_not_supported = sql_not_supported


# Pattern handling --------------------------------------------------------
def is_fixed_pattern(pattern: Any) -> bool:
    """
    Decide from the argument's static shape whether a pattern is a fixed string.

    ``fixed(...)`` wrappers are always fixed; string literals are fixed when
    they contain no regex metacharacters; expressions are never fixed.
    """

    if isinstance(pattern, FixedPattern):
        return True
    if not is_static(pattern):
        return False
    value = static_value(pattern)
    return isinstance(value, str) and not any(ch in REGEX_METACHARACTERS for ch in value)


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _unwrap(pattern: Any) -> Any:
    if isinstance(pattern, FixedPattern):
        return pattern.pattern
    return pattern


def sql_str_detect_fixed_position(kind: str) -> Callable[..., Expression]:
    """
    Fixed-string templates for ``detect``, ``start`` and ``end``.

    Literal patterns for start/end use LIKE with escaped wildcards;
    expression patterns fall back to position arithmetic.
    """

    def template(ctx, string, pattern, negate_result=False):
        string = as_expr(string)
        pattern = _unwrap(pattern)
        if kind == "detect":
            position = call("STRPOS", string, pattern)
            return infix("=" if negate_result else ">", position, 0)

        op = "NOT LIKE" if negate_result else "LIKE"
        if is_static(pattern):
            text = escape_like(str(static_value(pattern)))
            like = f"{text}%" if kind == "start" else f"%{text}"
            return Infix(op, string, Literal(like))

        pattern = as_expr(pattern)
        comparison = "!=" if negate_result else "="
        if kind == "start":
            return infix(comparison, call("STRPOS", string, pattern), 1)
        return Infix(comparison, call("RIGHT", string, call("LENGTH", pattern)), pattern)

    return template


def sql_str_detect_regex(kind: str, operator: str = "~") -> Callable[..., Expression]:
    """Native regex-operator templates, anchored for start/end."""

    def template(ctx, string, pattern, negate_result=False):
        pattern = as_expr(pattern)
        if kind == "start":
            pattern = _anchor(pattern, "^(?:", ")")
        elif kind == "end":
            pattern = _anchor(pattern, "(?:", ")$")
        expr = infix(operator, string, pattern)
        if negate_result:
            return negate(expr)
        return expr

    return template


def _anchor(pattern: Expression, prefix: str, suffix: str) -> Expression:
    if isinstance(pattern, Literal):
        return lit(f"{prefix}{pattern.value}{suffix}")
    return Paren(infix("||", infix("||", prefix, pattern), suffix))


def sql_str_pattern_switch(
    kind: str,
    f_fixed: Callable[..., Expression] | None = None,
    f_regex: Callable[..., Expression] | None = None,
) -> TranslationRule:
    """
    Rule for ``str_<kind>(string, pattern, negate=False)`` choosing the fixed
    or regex template from the pattern's static shape.
    """

    f_fixed = f_fixed or sql_str_detect_fixed_position(kind)
    f_regex = f_regex or sql_str_detect_regex(kind)

    def template(ctx, string, pattern, negate=False):
        if is_fixed_pattern(pattern):
            return f_fixed(ctx, string, pattern, negate)
        return f_regex(ctx, string, pattern, negate)

    return TranslationRule(f"str_{kind}", template, validators={"negate": (BooleanArgument(),)})


def interval_literal(ctx, x: Any, unit: str) -> Expression:
    """Native interval for ``x`` units: a literal for numbers, a product otherwise."""
    if is_static(x):
        value = static_value(x)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise UnsupportedArgumentError("x", "a number or a column expression", ctx.backend)
        return Cast(lit(f"{value} {unit}"), "INTERVAL")
    return Paren(Infix("*", as_expr(x), Prefix("INTERVAL", lit(f"1 {unit}"))))
