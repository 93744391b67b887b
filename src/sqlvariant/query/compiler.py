"""
SQL compilation utilities rendering expression trees into SQL strings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

from .expressions import (
    Call,
    Case,
    Cast,
    Expression,
    ExprList,
    Ident,
    Infix,
    Keyword,
    Literal,
    OrderBy,
    Over,
    Paren,
    Postfix,
    Prefix,
    Raw,
    Star,
    WindowSpec,
    WithinGroup,
)

if TYPE_CHECKING:
    from ..dialects.base import Dialect


class ExpressionCompiler:
    """
    Compile expression trees into SQL text using a dialect's escaping.
    """

    def __init__(self, dialect: "Dialect") -> None:
        self.dialect = dialect

    def compile(self, expr: Expression) -> str:
        if isinstance(expr, Literal):
            return self.dialect.escape_literal(expr.value)
        if isinstance(expr, Ident):
            return self._compile_ident(expr)
        if isinstance(expr, Keyword):
            return expr.text
        if isinstance(expr, Raw):
            return expr.sql
        if isinstance(expr, Star):
            if expr.table:
                return f"{self.dialect.escape_identifier(expr.table)}.*"
            return "*"
        if isinstance(expr, Call):
            return self._compile_call(expr)
        if isinstance(expr, Infix):
            return self._compile_infix(expr)
        if isinstance(expr, Prefix):
            operand = self._compile_operand(expr.operand)
            if expr.op.isalpha():
                return f"{expr.op} {operand}"
            if operand.startswith("-"):
                # "--" would open a line comment
                operand = f"({operand})"
            return f"{expr.op}{operand}"
        if isinstance(expr, Postfix):
            return f"{self._compile_operand(expr.operand)} {expr.op}"
        if isinstance(expr, Cast):
            return f"CAST({self.compile(expr.expr)} AS {expr.type_name})"
        if isinstance(expr, Paren):
            inner = expr.expr
            if isinstance(inner, Paren):
                return self.compile(inner)
            return f"({self.compile(inner)})"
        if isinstance(expr, Case):
            return self._compile_case(expr)
        if isinstance(expr, ExprList):
            return "(" + ", ".join(self.compile(item) for item in expr.items) + ")"
        if isinstance(expr, OrderBy):
            sql = self.compile(expr.expr)
            return f"{sql} DESC" if expr.descending else sql
        if isinstance(expr, WithinGroup):
            order_sql = ", ".join(self.compile(item) for item in expr.order_by)
            return f"{self._compile_call(expr.call)} WITHIN GROUP (ORDER BY {order_sql})"
        if isinstance(expr, Over):
            return f"{self.compile(expr.expr)} OVER {self._compile_window_ref(expr.window)}"
        raise TypeError(f"Cannot compile object of type {type(expr).__name__}")

    def compile_window(self, window: WindowSpec) -> str:
        """Render the parenthesised body of a window specification."""
        parts: List[str] = []
        if window.partition_by:
            parts.append("PARTITION BY " + ", ".join(self.compile(e) for e in window.partition_by))
        if window.order_by:
            parts.append("ORDER BY " + ", ".join(self.compile(e) for e in window.order_by))
        if window.frame is not None:
            parts.append(self._compile_frame(window.frame))
        return "(" + " ".join(parts) + ")"

    # Helpers -----------------------------------------------------------
    def _compile_ident(self, expr: Ident) -> str:
        name = self.dialect.escape_identifier(expr.name)
        if expr.table:
            return f"{self.dialect.escape_identifier(expr.table)}.{name}"
        return name

    def _compile_call(self, expr: Call) -> str:
        args = ", ".join(self.compile(arg) for arg in expr.args)
        if expr.distinct:
            args = f"DISTINCT {args}"
        return f"{expr.name}({args})"

    def _compile_infix(self, expr: Infix) -> str:
        left = self.compile(expr.left)
        if isinstance(expr.left, Infix) and expr.left.op != expr.op:
            left = f"({left})"
        right = self.compile(expr.right)
        if isinstance(expr.right, Infix):
            right = f"({right})"
        return f"{left} {expr.op} {right}"

    def _compile_operand(self, expr: Expression) -> str:
        sql = self.compile(expr)
        if isinstance(expr, Infix):
            return f"({sql})"
        return sql

    def _compile_case(self, expr: Case) -> str:
        parts = ["CASE"]
        for condition, value in expr.whens:
            parts.append(f"WHEN {self.compile(condition)} THEN {self.compile(value)}")
        if expr.otherwise is not None:
            parts.append(f"ELSE {self.compile(expr.otherwise)}")
        parts.append("END")
        return " ".join(parts)

    def _compile_window_ref(self, window: WindowSpec) -> str:
        if window.name and self.dialect.capabilities.supports_window_clause:
            return self.dialect.escape_identifier(window.name)
        return self.compile_window(window)

    @staticmethod
    def _compile_frame(frame: Tuple[Optional[int], Optional[int]]) -> str:
        start, end = frame
        return f"ROWS BETWEEN {_frame_bound(start, True)} AND {_frame_bound(end, False)}"


def _frame_bound(offset: Optional[int], is_start: bool) -> str:
    if offset is None:
        return "UNBOUNDED PRECEDING" if is_start else "UNBOUNDED FOLLOWING"
    if offset == 0:
        return "CURRENT ROW"
    if offset < 0:
        return f"{-offset} PRECEDING"
    return f"{offset} FOLLOWING"
