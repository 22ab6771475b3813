"""Core utilities: configuration, logging, exceptions."""

from duckdb_s3_source.core.config import CONNECTOR_OPTIONS, Settings, get_settings
from duckdb_s3_source.core.exceptions import (
    ConfigurationError,
    EmptyDatasetListError,
    MissingDescriptorError,
    SourceConnectorError,
    StreamError,
    UnsupportedValueTypeError,
    redact,
)
from duckdb_s3_source.core.logging import configure_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "CONNECTOR_OPTIONS",
    "configure_logging",
    "get_logger",
    "SourceConnectorError",
    "ConfigurationError",
    "MissingDescriptorError",
    "EmptyDatasetListError",
    "StreamError",
    "UnsupportedValueTypeError",
    "redact",
]
