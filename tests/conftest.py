"""Pytest fixtures for the test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import duckdb
import pytest
import yaml

from duckdb_s3_source.core.config import Settings
from duckdb_s3_source.models.connector import Credentials


@pytest.fixture
def mock_settings() -> Settings:
    """Create settings for testing without reading any env file."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        BATCH_SIZE=4,
        DUCKDB_MEMORY_LIMIT="256MB",
        DUCKDB_THREADS=2,
    )


@pytest.fixture
def credentials() -> Credentials:
    """Non-empty storage credentials."""
    return Credentials(
        access_key_id="AKIATESTKEY",
        secret_access_key="super-secret-value",
        region="eu-west-1",
    )


@pytest.fixture
def dataset_factory(tmp_path: Path) -> Callable[[str, int], Path]:
    """Write a Parquet file with ``row_count`` rows of mixed column types."""

    def _make(name: str, row_count: int) -> Path:
        file_path = tmp_path / f"{name}.parquet"
        conn = duckdb.connect(":memory:")
        conn.execute(f"""
            COPY (
                SELECT
                    i AS id,
                    'row_' || CAST(i AS VARCHAR) AS label,
                    CAST(i AS DOUBLE) * 1.5 AS amount,
                    i % 2 = 0 AS flag,
                    DATE '2024-01-01' + CAST(i AS INTEGER) AS day
                FROM range({row_count}) t(i)
            ) TO '{file_path}' (FORMAT PARQUET)
        """)
        conn.close()
        return file_path

    return _make


@pytest.fixture
def descriptor_factory(tmp_path: Path) -> Callable[..., Path]:
    """Write a YAML descriptor listing ``(name, path)`` entries."""

    def _make(entries: list[tuple[str, str | Path]], filename: str = "sources.yaml") -> Path:
        path = tmp_path / filename
        files = [{"name": name, "path": str(location)} for name, location in entries]
        path.write_text(yaml.safe_dump({"files": files}), encoding="utf-8")
        return path

    return _make
