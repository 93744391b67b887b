"""
PostgreSQL introspection adapter built on psycopg.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..config import DEFAULT_OPTIONS, TranslationOptions
from ..dialects.postgres import PostgresDialect
from ..utils import correlation_scope, get_logger, time_call
from .base import AdapterConfigurationError, AdapterExecutionError

TYPE_NAME_SQL = "SELECT oid, typname FROM pg_catalog.pg_type WHERE oid = ANY(%s)"


def _load_driver():
    try:
        import psycopg

        return psycopg
    except ImportError:
        return None


class PostgresAdapter:
    """
    Column-type discovery against a caller-owned psycopg connection.

    The adapter never opens, commits or closes the connection.
    """

    def __init__(
        self,
        connection: Any,
        dialect: PostgresDialect | None = None,
        options: TranslationOptions | None = None,
    ) -> None:
        self.dialect = dialect or PostgresDialect()
        if not self.dialect.capabilities.column_type_probe:
            raise AdapterConfigurationError(
                f"{self.dialect.display_name} does not support column type discovery."
            )
        self.connection = connection
        self.options = options or DEFAULT_OPTIONS
        self.logger = get_logger("adapters.postgres")

    def column_types(self, table: str) -> Dict[str, str]:
        """
        Map each column of ``table`` to its PostgreSQL type name.

        Runs a zero-row ``SELECT`` so only the result description is read.
        Both queries of one lookup log under the same correlation id.
        """

        driver = _load_driver()
        if driver is None:
            raise AdapterConfigurationError("psycopg is required to use PostgresAdapter.")

        sql = f"SELECT * FROM {self.dialect.format_table(table)} LIMIT 0"
        try:
            with correlation_scope(), self.connection.cursor() as cursor:
                with time_call(
                    "postgres.column_types",
                    self.logger,
                    sql=sql,
                    threshold_ms=self.options.slow_query_ms,
                ):
                    cursor.execute(sql)
                columns = [(column.name, column.type_code) for column in cursor.description or ()]
                names = self._known_type_names(driver, [oid for _, oid in columns])
                missing = sorted({oid for _, oid in columns if oid not in names})
                if missing:
                    names.update(self._lookup_type_names(cursor, missing))
        except driver.Error as exc:
            raise AdapterExecutionError(f"Failed to read column types for '{table}'.") from exc

        unresolved = sorted({oid for _, oid in columns if oid not in names})
        if unresolved:
            raise AdapterExecutionError(f"Unknown type OIDs for '{table}': {unresolved}")
        return {name: names[oid] for name, oid in columns}

    def describe(self) -> str:
        """One-line connection summary: ``postgres <version> [user@host:port/db]``."""
        info = self.connection.info
        host = info.host or "localhost"
        version = _format_server_version(info.server_version)
        return f"postgres {version} [{info.user}@{host}:{info.port}/{info.dbname}]"

    # Helpers -----------------------------------------------------------
    def _known_type_names(self, driver: Any, oids: Sequence[int]) -> Dict[int, str]:
        adapters = getattr(self.connection, "adapters", None) or driver.adapters
        names: Dict[int, str] = {}
        for oid in oids:
            info = adapters.types.get(oid)
            if info is not None:
                names[oid] = info.name
        return names

    def _lookup_type_names(self, cursor: Any, oids: List[int]) -> Dict[int, str]:
        self.logger.debug("Resolving %d type OIDs through pg_type", len(oids))
        with time_call(
            "postgres.type_names",
            self.logger,
            sql=TYPE_NAME_SQL,
            params=oids,
            threshold_ms=self.options.slow_query_ms,
        ):
            cursor.execute(TYPE_NAME_SQL, (oids,))
        return {oid: name for oid, name in cursor.fetchall()}


def _format_server_version(version: Any) -> str:
    if not isinstance(version, int):
        return str(version)
    if version >= 100000:
        return f"{version // 10000}.{version % 10000}"
    return f"{version // 10000}.{version // 100 % 100}.{version % 100}"
