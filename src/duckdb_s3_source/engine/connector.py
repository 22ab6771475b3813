"""DuckDB session manager with S3 credential injection.

This module owns the lifecycle of one in-memory DuckDB database and the one
connection opened on it. The session is created lazily on first use, shared
by every dataset of a run, and torn down exactly once.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

import duckdb

from duckdb_s3_source.core.exceptions import ConfigurationError, redact
from duckdb_s3_source.models.connector import Credentials

if TYPE_CHECKING:
    from duckdb_s3_source.core.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_LIMIT = "1GB"
DEFAULT_THREADS = 4
DEFAULT_USER_AGENT = "duckdb-s3-source"
DEFAULT_SECRET_NAME = "storage_secret"
STORAGE_SECRET_TYPE = "S3"


def quote_literal(value: str) -> str:
    """Render a string as a SQL literal, doubling embedded quotes."""
    return "'" + value.replace("'", "''") + "'"


@dataclass(frozen=True)
class SessionHandle:
    """Open DuckDB session.

    Attributes:
        database: The in-memory database instance.
        connection: The single connection used for statements and cursors.
    """

    database: duckdb.DuckDBPyConnection
    connection: duckdb.DuckDBPyConnection


class DuckDBSession:
    """Lazily created, credential-scoped DuckDB session.

    ``acquire`` is idempotent within a run and ``release`` closes the
    connection and the database at most once.

    Attributes:
        credentials: Storage credentials registered as a DuckDB secret.
        memory_limit: DuckDB memory limit string (e.g., "1GB").
        threads: Number of DuckDB worker threads.
        user_agent: Custom user agent reported on remote requests.
        secret_name: Name of the registered storage secret.
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        settings: Settings | None = None,
        memory_limit: str | None = None,
        threads: int | None = None,
    ) -> None:
        """Initialize the session manager without touching DuckDB.

        Args:
            credentials: Storage credentials (defaults to settings, then anonymous).
            settings: Optional Settings instance for configuration.
            memory_limit: DuckDB memory limit (overrides settings).
            threads: Number of worker threads (overrides settings).
        """
        if settings:
            self.credentials = credentials or settings.credentials
            self.memory_limit = memory_limit or settings.DUCKDB_MEMORY_LIMIT
            self.threads = threads or settings.DUCKDB_THREADS
            self.user_agent = settings.DUCKDB_USER_AGENT
            self.secret_name = settings.SECRET_NAME
        else:
            self.credentials = credentials or Credentials()
            self.memory_limit = memory_limit or DEFAULT_MEMORY_LIMIT
            self.threads = threads or DEFAULT_THREADS
            self.user_agent = DEFAULT_USER_AGENT
            self.secret_name = DEFAULT_SECRET_NAME

        self._handle: SessionHandle | None = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def acquire(self) -> SessionHandle:
        """Return the session handle, creating the session on first call.

        Returns:
            The shared session handle.

        Raises:
            ConfigurationError: If the storage secret cannot be registered.
        """
        if self._handle is None:
            with self._lock:
                if self._handle is None:
                    self._handle = self._create_session()
        return self._handle

    def _create_session(self) -> SessionHandle:
        database = duckdb.connect(
            ":memory:",
            config={
                "access_mode": "READ_WRITE",
                "custom_user_agent": self.user_agent,
            },
        )
        try:
            database.execute(f"SET memory_limit = '{self.memory_limit}';")
            database.execute(f"SET threads = {self.threads};")
            connection = database.cursor()
            if self.credentials.is_anonymous:
                logger.debug("No storage credentials, skipping secret registration")
            else:
                self._register_secret(connection)
        except Exception:
            database.close()
            raise

        logger.info(
            "DuckDB session opened",
            extra={
                "memory_limit": self.memory_limit,
                "threads": self.threads,
                "authenticated": not self.credentials.is_anonymous,
                "region": self.credentials.region,
            },
        )
        return SessionHandle(database=database, connection=connection)

    def _register_secret(self, connection: duckdb.DuckDBPyConnection) -> None:
        """Register the credentials as a session-scoped S3 secret.

        Args:
            connection: Connection to run the statements on.
        """
        creds = self.credentials
        options = [
            f"TYPE {STORAGE_SECRET_TYPE}",
            f"KEY_ID {quote_literal(creds.access_key_id)}",
            f"SECRET {quote_literal(creds.secret_access_key.get_secret_value())}",
        ]
        if creds.region:
            options.append(f"REGION {quote_literal(creds.region)}")
        statement = f"CREATE SECRET {self.secret_name} ({', '.join(options)});"

        try:
            connection.execute("INSTALL httpfs;")
            connection.execute("LOAD httpfs;")
            connection.execute(statement)
        except duckdb.Error as e:
            # Not chained: the engine message can include the statement text.
            raise ConfigurationError(
                f"Failed to register storage secret: {redact(str(e), *creds.secret_values())}",
                config_key="credentials",
            ) from None

        logger.debug("Storage secret registered", extra={"secret_name": self.secret_name})

    def release(self) -> None:
        """Close the connection and the database. Safe to call repeatedly."""
        with self._lock:
            handle, self._handle = self._handle, None
        if handle is None:
            return
        handle.connection.close()
        handle.database.close()
        logger.debug("DuckDB session closed")

    def __enter__(self) -> DuckDBSession:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.release()
