"""
Function translation: registries, rule helpers and the translator facade.
"""

from .base import base_aggregate, base_scalar, base_variant, base_window
from .builder import ExpressionBuilder, TranslationContext
from .host import FixedPattern, HostCall, HostColumn, col, fixed, func, sql
from .registry import EvaluationContext, Registry, SqlVariant, TranslationRule
from .translator import Translator

__all__ = [
    "EvaluationContext",
    "ExpressionBuilder",
    "FixedPattern",
    "HostCall",
    "HostColumn",
    "Registry",
    "SqlVariant",
    "TranslationContext",
    "TranslationRule",
    "Translator",
    "base_aggregate",
    "base_scalar",
    "base_variant",
    "base_window",
    "col",
    "fixed",
    "func",
    "sql",
]
