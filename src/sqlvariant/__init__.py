"""
sqlvariant public package initialization.

Translate host expressions into dialect-specific SQL and compose row-level
statements (INSERT with conflict handling, UPSERT, EXPLAIN).
"""

from .config import TranslationOptions  # noqa: F401
from .dialects import AnsiDialect, DialectCapabilities, DialectTag, PostgresDialect, get_dialect  # noqa: F401
from .errors import (  # noqa: F401
    DialectConfigurationError,
    InvalidArgumentError,
    RegistryFrozenError,
    TranslationAmbiguityError,
    TranslationError,
    UnknownFunctionError,
    UnsupportedArgumentError,
)
from .query import explain_statement, insert_statement, upsert_statement  # noqa: F401
from .translate import EvaluationContext, Translator, col, fixed, func, sql  # noqa: F401

__all__ = [
    "AnsiDialect",
    "DialectCapabilities",
    "DialectTag",
    "PostgresDialect",
    "get_dialect",
    "TranslationOptions",
    "EvaluationContext",
    "Translator",
    "col",
    "fixed",
    "func",
    "sql",
    "insert_statement",
    "upsert_statement",
    "explain_statement",
    "TranslationError",
    "UnknownFunctionError",
    "UnsupportedArgumentError",
    "InvalidArgumentError",
    "TranslationAmbiguityError",
    "RegistryFrozenError",
    "DialectConfigurationError",
]
