"""
Expression tree primitives for SQL fragments.

Nodes are immutable; translation rules compose them and the compiler turns
them into text. User data only ever travels inside ``Literal`` (escaped as a
literal) or ``Ident`` (escaped as an identifier). ``Keyword`` carries fixed
SQL tokens written by rule templates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Tuple


AND = "AND"
OR = "OR"


class Expression:
    """Marker base class for SQL expression nodes."""

    __slots__ = ()


@dataclass(frozen=True)
class Literal(Expression):
    value: Any


@dataclass(frozen=True)
class Ident(Expression):
    """Column identifier, optionally qualified by a table or row alias."""

    name: str
    table: Optional[str] = None


@dataclass(frozen=True)
class Keyword(Expression):
    text: str


@dataclass(frozen=True)
class Raw(Expression):
    """Pre-escaped SQL supplied by the caller, rendered verbatim."""

    sql: str


@dataclass(frozen=True)
class Star(Expression):
    table: Optional[str] = None


@dataclass(frozen=True)
class Call(Expression):
    name: str
    args: Tuple[Expression, ...] = ()
    distinct: bool = False


@dataclass(frozen=True)
class Infix(Expression):
    op: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class Prefix(Expression):
    op: str
    operand: Expression


@dataclass(frozen=True)
class Postfix(Expression):
    operand: Expression
    op: str


@dataclass(frozen=True)
class Cast(Expression):
    expr: Expression
    type_name: str


@dataclass(frozen=True)
class Paren(Expression):
    expr: Expression


@dataclass(frozen=True)
class Case(Expression):
    whens: Tuple[Tuple[Expression, Expression], ...]
    otherwise: Optional[Expression] = None


@dataclass(frozen=True)
class ExprList(Expression):
    """Parenthesised, comma separated list such as the right side of IN."""

    items: Tuple[Expression, ...]


@dataclass(frozen=True)
class OrderBy(Expression):
    expr: Expression
    descending: bool = False


@dataclass(frozen=True)
class WithinGroup(Expression):
    """Ordered-set aggregate: ``call WITHIN GROUP (ORDER BY ...)``."""

    call: Call
    order_by: Tuple[Expression, ...]


@dataclass(frozen=True)
class WindowSpec:
    """
    Window over which window-context rules evaluate.

    ``frame`` is a ``(start, end)`` pair of row offsets: ``None`` means
    unbounded, negative values precede the current row, ``0`` is the
    current row and positive values follow it.
    """

    partition_by: Tuple[Expression, ...] = ()
    order_by: Tuple[Expression, ...] = ()
    frame: Optional[Tuple[Optional[int], Optional[int]]] = None
    name: Optional[str] = None

    def for_aggregate(self) -> "WindowSpec":
        """Plain aggregates keep the ordering only when a frame is set."""
        if self.frame is not None:
            return self
        return WindowSpec(partition_by=self.partition_by)


@dataclass(frozen=True)
class Over(Expression):
    expr: Expression
    window: WindowSpec = field(default_factory=WindowSpec)


# Constructors -----------------------------------------------------------
def as_expr(value: Any) -> Expression:
    """Wrap plain Python values as literals; expressions pass through."""
    if isinstance(value, Expression):
        return value
    return Literal(value)


def lit(value: Any) -> Literal:
    return Literal(value)


def ident(name: str, table: str | None = None) -> Ident:
    return Ident(name, table)


def kw(text: str) -> Keyword:
    return Keyword(text)


def call(name: str, *args: Any, distinct: bool = False) -> Call:
    return Call(name, tuple(as_expr(arg) for arg in args), distinct=distinct)


def infix(op: str, left: Any, right: Any) -> Infix:
    return Infix(op, as_expr(left), as_expr(right))


def cast(expr: Any, type_name: str) -> Cast:
    return Cast(as_expr(expr), type_name)


def extract(part: str, expr: Any) -> Call:
    """``EXTRACT(part FROM expr)``."""
    return Call("EXTRACT", (Infix("FROM", Keyword(part), as_expr(expr)),))


def negate(expr: Any) -> Prefix:
    return Prefix("NOT", Paren(as_expr(expr)))


def conjunction(exprs: Iterable[Expression], connector: str = AND) -> Expression:
    items = [Paren(expr) for expr in exprs]
    if not items:
        raise ValueError("conjunction() requires at least one expression")
    result: Expression = items[0]
    for item in items[1:]:
        result = Infix(connector, result, item)
    return result


def is_static(value: Any) -> bool:
    """True when the value is known at translation time (not a SQL expression)."""
    if isinstance(value, Literal):
        return True
    return not isinstance(value, Expression)


def static_value(value: Any) -> Any:
    if isinstance(value, Literal):
        return value.value
    return value
