"""Host entry points for ad-hoc queries and connection tests.

Both run against a fresh DuckDB session of their own, independent of any
descriptor-driven run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from duckdb_s3_source.core.config import DEFAULT_BATCH_SIZE
from duckdb_s3_source.core.exceptions import SourceConnectorError, redact
from duckdb_s3_source.core.logging import get_logger
from duckdb_s3_source.engine.connector import DuckDBSession
from duckdb_s3_source.engine.prober import MetadataProber, clean_query, dataset_reference
from duckdb_s3_source.engine.streaming import BatchStream
from duckdb_s3_source.models.connector import ConnectionTestResult, Credentials
from duckdb_s3_source.models.results import QueryResult

if TYPE_CHECKING:
    from duckdb_s3_source.core.config import Settings

logger = get_logger(__name__)

CONNECTION_TEST_QUERY = "SELECT 1"


def run_query(
    query_text: str,
    batch_size: int | None = None,
    credentials: Credentials | None = None,
    settings: Settings | None = None,
) -> QueryResult:
    """Execute one query against a fresh session.

    The session is released when the returned stream is closed, which
    happens automatically once it has been read to the end.

    Args:
        query_text: SQL query to run.
        batch_size: Rows per batch (overrides settings).
        credentials: Storage credentials for the session.
        settings: Optional Settings for configuration.

    Returns:
        QueryResult with the batch stream and best-effort metadata.
    """
    query = clean_query(query_text)
    if not query:
        raise ValueError("Query text is empty")
    if batch_size is None:
        batch_size = settings.BATCH_SIZE if settings else DEFAULT_BATCH_SIZE

    session = DuckDBSession(credentials=credentials, settings=settings)
    handle = session.acquire()
    try:
        metadata = MetadataProber().probe(handle, query)
        stream = BatchStream(
            handle.connection,
            query,
            batch_size=batch_size,
            column_types=metadata.column_types.value,
            on_close=session.release,
        )
    except Exception:
        session.release()
        raise

    logger.info(
        "adhoc_query_prepared",
        schema_probed=metadata.column_types.ok,
        expected_row_count=metadata.expected_row_count.value,
    )
    return QueryResult(rows=stream, expected_row_count=metadata.expected_row_count.value)


def test_connection(
    credentials: Credentials | None = None,
    location: str | None = None,
    settings: Settings | None = None,
) -> ConnectionTestResult:
    """Check that a session can be opened and queried end to end.

    Never raises: every failure is returned as a ConnectionTestResult with a
    reason, and the session is always released.

    Args:
        credentials: Storage credentials to test.
        location: Optional dataset to read one row from instead of ``SELECT 1``.
        settings: Optional Settings for configuration.

    Returns:
        ConnectionTestResult describing the outcome.
    """
    session = DuckDBSession(credentials=credentials, settings=settings)
    secrets = session.credentials.secret_values()
    query = CONNECTION_TEST_QUERY
    if location:
        query = f"{dataset_reference(location)} LIMIT 1"

    try:
        handle = session.acquire()
        with BatchStream(handle.connection, query, batch_size=1, column_types=[]) as stream:
            for _ in stream:
                pass
    except SourceConnectorError as e:
        reason = redact(e.details.get("original_error") or e.message, *secrets)
        logger.warning("connection_test_failed", reason=reason)
        return ConnectionTestResult.failed(reason)
    except Exception as e:
        reason = redact(str(e) or "connection_test_failed", *secrets)
        logger.warning("connection_test_failed", reason=reason)
        return ConnectionTestResult.failed(reason)
    finally:
        session.release()

    return ConnectionTestResult.passed()
