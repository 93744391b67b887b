"""
Utility helpers shared across sqlvariant packages.
"""

from .logging import (
    configure_logging,
    correlation_scope,
    get_correlation_id,
    get_logger,
    set_correlation_id,
    time_call,
)

__all__ = [
    "configure_logging",
    "correlation_scope",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
    "time_call",
]
