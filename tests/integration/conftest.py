"""Integration test fixtures."""

from __future__ import annotations

import duckdb
import pytest

from duckdb_s3_source.core.config import get_settings
from duckdb_s3_source.engine.connector import DuckDBSession


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Keep host AWS credentials out of integration tests."""
    for key in ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_REGION"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def connection():
    """Plain in-memory DuckDB connection."""
    conn = duckdb.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def session():
    """Anonymous DuckDB session, released after the test."""
    session = DuckDBSession(memory_limit="256MB", threads=2)
    yield session
    session.release()
