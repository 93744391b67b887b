"""
SQL expression trees, compilation and statement composition.
"""

from .clauses import Clause, compose, values_subquery, window_clause
from .compiler import ExpressionCompiler
from .expressions import Expression, WindowSpec
from .rows import explain_statement, insert_statement, upsert_statement

__all__ = [
    "Clause",
    "Expression",
    "ExpressionCompiler",
    "WindowSpec",
    "compose",
    "explain_statement",
    "insert_statement",
    "upsert_statement",
    "values_subquery",
    "window_clause",
]
