"""
Host-side expression objects describing what to translate.

``col("x")`` references a column, ``func.<name>(...)`` calls a translatable
function, and Python operators on these objects build calls to the
operator rules of the scalar registry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Tuple

from ..query.expressions import Raw


class HostExpr:
    """Operator overloads shared by host expressions."""

    __slots__ = ()

    def _op(self, name: str, *args: Any) -> "HostCall":
        return HostCall(name, args)

    def __add__(self, other: Any) -> "HostCall":
        return self._op("+", self, other)

    def __radd__(self, other: Any) -> "HostCall":
        return self._op("+", other, self)

    def __sub__(self, other: Any) -> "HostCall":
        return self._op("-", self, other)

    def __rsub__(self, other: Any) -> "HostCall":
        return self._op("-", other, self)

    def __mul__(self, other: Any) -> "HostCall":
        return self._op("*", self, other)

    def __rmul__(self, other: Any) -> "HostCall":
        return self._op("*", other, self)

    def __truediv__(self, other: Any) -> "HostCall":
        return self._op("/", self, other)

    def __rtruediv__(self, other: Any) -> "HostCall":
        return self._op("/", other, self)

    def __mod__(self, other: Any) -> "HostCall":
        return self._op("%%", self, other)

    def __pow__(self, other: Any) -> "HostCall":
        return self._op("^", self, other)

    def __neg__(self) -> "HostCall":
        return self._op("-", self)

    def __eq__(self, other: Any) -> "HostCall":  # type: ignore[override]
        return self._op("==", self, other)

    def __ne__(self, other: Any) -> "HostCall":  # type: ignore[override]
        return self._op("!=", self, other)

    def __lt__(self, other: Any) -> "HostCall":
        return self._op("<", self, other)

    def __le__(self, other: Any) -> "HostCall":
        return self._op("<=", self, other)

    def __gt__(self, other: Any) -> "HostCall":
        return self._op(">", self, other)

    def __ge__(self, other: Any) -> "HostCall":
        return self._op(">=", self, other)

    def __and__(self, other: Any) -> "HostCall":
        return self._op("&", self, other)

    def __or__(self, other: Any) -> "HostCall":
        return self._op("|", self, other)

    def __invert__(self) -> "HostCall":
        return self._op("!", self)

    __hash__ = object.__hash__

    def isin(self, values: Iterable[Any]) -> "HostCall":
        return self._op("%in%", self, tuple(values))

    def is_na(self) -> "HostCall":
        return self._op("is_na", self)


@dataclass(frozen=True, eq=False)
class HostColumn(HostExpr):
    name: str
    table: str | None = None


@dataclass(frozen=True, eq=False)
class HostCall(HostExpr):
    name: str
    args: Tuple[Any, ...] = ()
    kwargs: Tuple[Tuple[str, Any], ...] = ()


@dataclass(frozen=True)
class FixedPattern:
    """Marks a pattern argument as a fixed string rather than a regex."""

    pattern: Any


class _FunctionNamespace:
    """``func.round(col("x"), 2)`` builds ``HostCall("round", ...)``."""

    def __getattr__(self, name: str):
        if name.startswith("__"):
            raise AttributeError(name)

        def build(*args: Any, **kwargs: Any) -> HostCall:
            return HostCall(name, tuple(args), tuple(kwargs.items()))

        build.__name__ = name
        return build

    def __call__(self, name: str, *args: Any, **kwargs: Any) -> HostCall:
        return HostCall(name, tuple(args), tuple(kwargs.items()))


func = _FunctionNamespace()


def col(name: str, table: str | None = None) -> HostColumn:
    return HostColumn(name, table)


def fixed(pattern: Any) -> FixedPattern:
    return FixedPattern(pattern)


def sql(text: str) -> Raw:
    """Pre-escaped SQL passed through untouched."""
    return Raw(text)
