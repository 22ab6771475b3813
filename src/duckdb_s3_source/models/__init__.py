"""Data models for credentials, descriptors, column types and results."""

from duckdb_s3_source.models.connector import (
    ConnectionTestResult,
    ConnectorOption,
    Credentials,
    DatasetRef,
    Descriptor,
)
from duckdb_s3_source.models.results import (
    DatasetMetadata,
    DatasetResult,
    ProbeResult,
    QueryResult,
)
from duckdb_s3_source.models.schema import (
    Batch,
    ColumnDefinition,
    Row,
    SemanticType,
    TypeFidelity,
)

__all__ = [
    # Inputs
    "Credentials",
    "DatasetRef",
    "Descriptor",
    "ConnectorOption",
    # Column types
    "SemanticType",
    "TypeFidelity",
    "ColumnDefinition",
    "Row",
    "Batch",
    # Results
    "ProbeResult",
    "DatasetMetadata",
    "DatasetResult",
    "QueryResult",
    "ConnectionTestResult",
]
