"""DuckDB engine layer: sessions, probes, batch streams and enumeration.

This package provides:
- Credential-scoped DuckDB session management
- Best-effort schema and row-count probes
- Lazily pulled, normalized row batches
- Descriptor-driven enumeration of datasets
"""

from duckdb_s3_source.engine.connector import DuckDBSession, SessionHandle
from duckdb_s3_source.engine.descriptor import (
    discover_descriptors,
    is_descriptor_file,
    load_descriptor,
)
from duckdb_s3_source.engine.enumerator import DatasetEnumerator, process_source
from duckdb_s3_source.engine.normalizer import normalize_row
from duckdb_s3_source.engine.prober import MetadataProber, clean_query, dataset_reference
from duckdb_s3_source.engine.query_runner import run_query, test_connection
from duckdb_s3_source.engine.streaming import BatchStream
from duckdb_s3_source.engine.type_mapping import (
    TypedValue,
    classify_physical_type,
    describe_to_column_types,
    infer_from_sample,
)

__all__ = [
    # Session
    "DuckDBSession",
    "SessionHandle",
    # Descriptors and enumeration
    "load_descriptor",
    "discover_descriptors",
    "is_descriptor_file",
    "DatasetEnumerator",
    "process_source",
    # Probing and streaming
    "MetadataProber",
    "dataset_reference",
    "clean_query",
    "BatchStream",
    "normalize_row",
    # Type mapping
    "classify_physical_type",
    "describe_to_column_types",
    "infer_from_sample",
    "TypedValue",
    # Host entry points
    "run_query",
    "test_connection",
]
