"""Integration tests for the DuckDB session manager."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import duckdb
import pytest

from duckdb_s3_source.core.exceptions import ConfigurationError
from duckdb_s3_source.engine.connector import DuckDBSession, quote_literal
from duckdb_s3_source.models.connector import Credentials


class TestDuckDBSession:
    """Tests for DuckDBSession with a real in-memory database."""

    def test_acquire_opens_working_connection(self, session: DuckDBSession) -> None:
        handle = session.acquire()
        assert session.is_open
        assert handle.connection.execute("SELECT 42").fetchone() == (42,)

    def test_acquire_is_idempotent(self) -> None:
        session = DuckDBSession()
        with patch(
            "duckdb_s3_source.engine.connector.duckdb.connect", wraps=duckdb.connect
        ) as connect:
            handles = [session.acquire() for _ in range(5)]
            session.release()

        assert connect.call_count == 1
        assert all(h is handles[0] for h in handles)

    def test_limits_applied(self, session: DuckDBSession) -> None:
        handle = session.acquire()
        threads = handle.connection.execute("SELECT current_setting('threads')").fetchone()
        assert int(threads[0]) == 2

    def test_release_is_idempotent(self) -> None:
        session = DuckDBSession()
        handle = session.acquire()

        session.release()
        session.release()

        assert not session.is_open
        with pytest.raises(duckdb.Error):
            handle.connection.execute("SELECT 1")

    def test_release_without_acquire(self) -> None:
        session = DuckDBSession()
        session.release()
        assert not session.is_open

    def test_context_manager_releases(self) -> None:
        with DuckDBSession() as session:
            session.acquire()
            assert session.is_open
        assert not session.is_open

    def test_settings_are_used(self, mock_settings) -> None:
        session = DuckDBSession(settings=mock_settings)
        assert session.memory_limit == "256MB"
        assert session.threads == 2
        assert session.secret_name == mock_settings.SECRET_NAME
        assert session.credentials.is_anonymous


class TestSecretRegistration:
    """Tests for storage secret registration, with DuckDB mocked out."""

    @pytest.fixture
    def mock_database(self):
        database = MagicMock()
        connection = MagicMock()
        database.cursor.return_value = connection
        with patch(
            "duckdb_s3_source.engine.connector.duckdb.connect", return_value=database
        ) as connect:
            yield connect, database, connection

    def test_anonymous_session_registers_no_secret(self, mock_database) -> None:
        _, _, connection = mock_database

        DuckDBSession().acquire()

        connection.execute.assert_not_called()

    def test_creates_s3_secret(self, mock_database, credentials: Credentials) -> None:
        connect, _, connection = mock_database

        DuckDBSession(credentials=credentials).acquire()

        config = connect.call_args.kwargs["config"]
        assert config["access_mode"] == "READ_WRITE"
        statements = [c.args[0] for c in connection.execute.call_args_list]
        assert statements[:2] == ["INSTALL httpfs;", "LOAD httpfs;"]
        secret_sql = statements[2]
        assert secret_sql.startswith("CREATE SECRET storage_secret (TYPE S3")
        assert "KEY_ID 'AKIATESTKEY'" in secret_sql
        assert "SECRET 'super-secret-value'" in secret_sql
        assert "REGION 'eu-west-1'" in secret_sql

    def test_region_omitted_when_empty(self, mock_database) -> None:
        _, _, connection = mock_database

        DuckDBSession(credentials=Credentials(access_key_id="AKIA", secret_access_key="x")).acquire()

        secret_sql = connection.execute.call_args_list[-1].args[0]
        assert "REGION" not in secret_sql

    def test_quotes_are_escaped(self, mock_database) -> None:
        _, _, connection = mock_database

        DuckDBSession(credentials=Credentials(access_key_id="AK'IA", secret_access_key="x")).acquire()

        secret_sql = connection.execute.call_args_list[-1].args[0]
        assert "KEY_ID 'AK''IA'" in secret_sql

    def test_failure_is_configuration_error_without_secret(
        self, mock_database, credentials: Credentials
    ) -> None:
        _, database, connection = mock_database

        def execute(sql: str):
            if sql.startswith("CREATE SECRET"):
                raise duckdb.InvalidInputException(f"Invalid secret: {sql}")
            return connection

        connection.execute.side_effect = execute
        session = DuckDBSession(credentials=credentials)

        with pytest.raises(ConfigurationError) as exc_info:
            session.acquire()

        assert "super-secret-value" not in str(exc_info.value)
        assert exc_info.value.__cause__ is None
        assert exc_info.value.config_key == "credentials"
        database.close.assert_called_once()
        assert not session.is_open


class TestQuoteLiteral:
    """Tests for quote_literal."""

    def test_wraps_in_quotes(self) -> None:
        assert quote_literal("s3://bucket/file.parquet") == "'s3://bucket/file.parquet'"

    def test_doubles_embedded_quotes(self) -> None:
        assert quote_literal("it's") == "'it''s'"
