"""
Adapter error hierarchy for sqlvariant.
"""

from __future__ import annotations


class AdapterError(RuntimeError):
    """Base error for adapter-related failures."""


class AdapterConfigurationError(AdapterError):
    """Raised when configuration or required dependencies are invalid."""


class AdapterExecutionError(AdapterError):
    """Raised when an introspection query fails."""
