"""
PostgreSQL translation tables.

Each registry extends the matching base registry, so anything not listed
here falls back to the generic translation.
"""

from __future__ import annotations

from ..query.expressions import (
    Cast,
    Infix,
    Over,
    Paren,
    Prefix,
    WindowSpec,
    as_expr,
    call,
    extract,
    infix,
    lit,
)
from ..translate.base import base_aggregate, base_scalar, base_window
from ..translate.helpers import (
    interval_literal,
    sql_aggregate,
    sql_aggregate_2,
    sql_cot,
    sql_infix,
    sql_log,
    sql_paste,
    sql_str_pattern_switch,
    win_aggregate,
    win_aggregate_2,
    win_not_supported,
)
from ..translate.registry import Registry, SqlVariant, TranslationRule
from ..validation import AllowedValues, BooleanArgument, Choice, WholeNumberArgument

DATE_TRUNC_UNITS = ("second", "minute", "hour", "day", "week", "month", "quarter", "year")
PERIOD_UNITS = ("seconds", "minutes", "hours", "days", "weeks", "months", "years")

_BOOL = (BooleanArgument(),)


# Numbers and patterns ----------------------------------------------------
def _round(ctx, x, digits=0):
    # round(double precision, int) does not exist
    return call("round", Cast(as_expr(x), "numeric"), digits)


def _log10(ctx, x):
    return call("log", x)


def _grepl(ctx, pattern, x, ignore_case=False, perl=False, fixed=False, use_bytes=False):
    return infix("~*" if ignore_case else "~", x, pattern)


def _str_locate(ctx, string, pattern):
    return call("strpos", string, pattern)


def _str_like(ctx, string, pattern, ignore_case=True):
    return infix("ILIKE" if ignore_case else "LIKE", string, pattern)


def _str_replace(ctx, string, pattern, replacement):
    return call("regexp_replace", string, pattern, replacement)


def _str_replace_all(ctx, string, pattern, replacement):
    return call("regexp_replace", string, pattern, replacement, "g")


def _str_squish(ctx, string):
    return call("ltrim", call("rtrim", call("regexp_replace", string, r"\s+", " ", "g")))


def _str_remove(ctx, string, pattern):
    return call("regexp_replace", string, pattern, "")


def _str_remove_all(ctx, string, pattern):
    return call("regexp_replace", string, pattern, "", "g")


# Dates -------------------------------------------------------------------
def _day(ctx, x):
    return extract("DAY", x)


def _wday(ctx, x, label=False, abbr=True, week_start=None):
    if not label:
        if week_start is None:
            week_start = ctx.options.week_start
        offset = 7 - week_start
        shifted = infix("+", call("DATE", x), offset)
        return infix("+", extract("dow", shifted), 1)
    if not abbr:
        return call("TO_CHAR", x, "Day")
    return call("SUBSTR", call("TO_CHAR", x, "Day"), 1, 3)


def _yday(ctx, x):
    return extract("DOY", x)


def _week(ctx, x):
    days = infix("-", extract("DOY", x), 1)
    return infix("+", call("FLOOR", infix("/", days, 7)), 1)


def _isoweek(ctx, x):
    return extract("WEEK", x)


def _month(ctx, x, label=False, abbr=True):
    if not label:
        return extract("MONTH", x)
    return call("TO_CHAR", x, "Mon" if abbr else "Month")


def _quarter(ctx, x, with_year=False, fiscal_start=1):
    if not with_year:
        return extract("QUARTER", x)
    return Paren(infix("||", infix("||", extract("YEAR", x), "."), extract("QUARTER", x)))


def _isoyear(ctx, x):
    return extract("YEAR", x)


def _period(unit: str):
    def template(ctx, x):
        return interval_literal(ctx, x, unit)

    return template


def _floor_date(ctx, x, unit="seconds"):
    return call("DATE_TRUNC", unit, x)


def _add_interval(unit: str):
    def template(ctx, x, n):
        step = Infix("*", as_expr(n), Prefix("INTERVAL", lit(f"1 {unit}")))
        return Paren(Infix("+", as_expr(x), step))

    return template


def _date_build(ctx, year, month=1, day=1, *, invalid=None):
    return call("make_date", year, month, day)


def _date_count_between(ctx, start, end, precision, *, n=1):
    return infix("-", end, start)


def _date_part(part: str):
    def template(ctx, x):
        return call("date_part", part, x)

    return template


def _difftime(ctx, time1, time2, tz=None, units="days"):
    return Paren(Infix("-", Cast(as_expr(time1), "DATE"), Cast(as_expr(time2), "DATE")))


def _build_scalar() -> Registry:
    registry = Registry("postgres_scalar", parent=base_scalar)
    registry.update(
        {
            "bitwXor": sql_infix("#"),
            "log10": _log10,
            "log": sql_log(),
            "cot": sql_cot(),
            "round": TranslationRule("round", _round, validators={"digits": (WholeNumberArgument(),)}),
            "grepl": TranslationRule(
                "grepl",
                _grepl,
                validators={
                    "ignore_case": _BOOL,
                    "perl": (AllowedValues(False),),
                    "fixed": (AllowedValues(False),),
                    "use_bytes": (AllowedValues(False),),
                },
            ),
            "paste": sql_paste(" "),
            "paste0": sql_paste(""),
            "str_c": sql_paste(""),
            "str_locate": _str_locate,
            "str_detect": sql_str_pattern_switch("detect"),
            "str_starts": sql_str_pattern_switch("start"),
            "str_ends": sql_str_pattern_switch("end"),
            "str_like": TranslationRule("str_like", _str_like, validators={"ignore_case": _BOOL}),
            "str_replace": _str_replace,
            "str_replace_all": _str_replace_all,
            "str_squish": _str_squish,
            "str_remove": _str_remove,
            "str_remove_all": _str_remove_all,
            "day": _day,
            "mday": _day,
            "wday": TranslationRule(
                "wday",
                _wday,
                validators={
                    "label": _BOOL,
                    "abbr": _BOOL,
                    "week_start": (WholeNumberArgument(allow_none=True, minimum=1, maximum=7),),
                },
            ),
            "yday": _yday,
            "week": _week,
            "isoweek": _isoweek,
            "month": TranslationRule("month", _month, validators={"label": _BOOL, "abbr": _BOOL}),
            "quarter": TranslationRule(
                "quarter",
                _quarter,
                validators={"with_year": _BOOL, "fiscal_start": (AllowedValues(1),)},
            ),
            "isoyear": _isoyear,
            "floor_date": TranslationRule(
                "floor_date",
                _floor_date,
                validators={
                    "unit": (Choice(DATE_TRUNC_UNITS, aliases={f"{u}s": u for u in DATE_TRUNC_UNITS}),)
                },
            ),
            "add_days": _add_interval("day"),
            "add_years": _add_interval("year"),
            "date_build": TranslationRule(
                "date_build", _date_build, validators={"invalid": (AllowedValues(),)}
            ),
            "date_count_between": TranslationRule(
                "date_count_between",
                _date_count_between,
                validators={"precision": (AllowedValues("day"),), "n": (AllowedValues(1),)},
            ),
            "get_year": _date_part("year"),
            "get_month": _date_part("month"),
            "get_day": _date_part("day"),
            "difftime": TranslationRule(
                "difftime",
                _difftime,
                validators={"tz": (AllowedValues(),), "units": (AllowedValues("days"),)},
            ),
        }
    )
    registry.update({unit: _period(unit) for unit in PERIOD_UNITS})
    return registry.freeze()


# Aggregates and windows --------------------------------------------------
def _str_flatten(ctx, x, collapse=""):
    return call("string_agg", x, collapse)


def _win_str_flatten(ctx, x, collapse=""):
    window = WindowSpec(partition_by=ctx.window.partition_by, order_by=ctx.window.order_by)
    return Over(call("string_agg", x, collapse), window)


def _build_aggregate() -> Registry:
    return Registry(
        "postgres_aggregate",
        parent=base_aggregate,
        rules={
            "cor": sql_aggregate_2("CORR"),
            "cov": sql_aggregate_2("COVAR_SAMP"),
            "sd": sql_aggregate("STDDEV_SAMP"),
            "var": sql_aggregate("VAR_SAMP"),
            "all": sql_aggregate("BOOL_AND"),
            "any": sql_aggregate("BOOL_OR"),
            "str_flatten": _str_flatten,
        },
    ).freeze()


def _build_window() -> Registry:
    return Registry(
        "postgres_window",
        parent=base_window,
        rules={
            "cor": win_aggregate_2("CORR"),
            "cov": win_aggregate_2("COVAR_SAMP"),
            "sd": win_aggregate("STDDEV_SAMP"),
            "var": win_aggregate("VAR_SAMP"),
            "all": win_aggregate("BOOL_AND"),
            "any": win_aggregate("BOOL_OR"),
            "str_flatten": _win_str_flatten,
            "median": win_not_supported("median"),
            "quantile": win_not_supported("quantile"),
        },
    ).freeze()


postgres_variant = SqlVariant(
    scalar=_build_scalar(),
    aggregate=_build_aggregate(),
    window=_build_window(),
)

__all__ = ["postgres_variant", "DATE_TRUNC_UNITS", "PERIOD_UNITS"]
