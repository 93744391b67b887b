"""
Database adapters used for live introspection.
"""

from .base import AdapterConfigurationError, AdapterError, AdapterExecutionError
from .postgres import PostgresAdapter

__all__ = [
    "AdapterError",
    "AdapterConfigurationError",
    "AdapterExecutionError",
    "PostgresAdapter",
]
