"""DuckDB S3 source connector.

Streams tabular datasets stored in S3 (or any location DuckDB can read)
as row batches with semantic column types and estimated row counts.
"""

from duckdb_s3_source.core.config import CONNECTOR_OPTIONS, Settings, get_settings
from duckdb_s3_source.engine import (
    BatchStream,
    DatasetEnumerator,
    DuckDBSession,
    process_source,
    run_query,
    test_connection,
)
from duckdb_s3_source.models import (
    ColumnDefinition,
    ConnectionTestResult,
    Credentials,
    DatasetResult,
    QueryResult,
    SemanticType,
    TypeFidelity,
)

__version__ = "0.1.0"

__all__ = [
    "CONNECTOR_OPTIONS",
    "Settings",
    "get_settings",
    "Credentials",
    "DuckDBSession",
    "DatasetEnumerator",
    "BatchStream",
    "process_source",
    "run_query",
    "test_connection",
    "SemanticType",
    "TypeFidelity",
    "ColumnDefinition",
    "DatasetResult",
    "QueryResult",
    "ConnectionTestResult",
]
