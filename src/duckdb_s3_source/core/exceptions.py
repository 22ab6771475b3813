"""Custom exceptions for the DuckDB S3 source connector."""

from typing import Any

REDACTED = "[REDACTED]"


def redact(message: str, *secrets: str) -> str:
    """Remove every non-empty secret value from a message."""
    for secret in secrets:
        if secret:
            message = message.replace(secret, REDACTED)
    return message


class SourceConnectorError(Exception):
    """Base exception for all connector errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(SourceConnectorError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details={"config_key": config_key},
        )
        self.config_key = config_key


class MissingDescriptorError(ConfigurationError):
    """Raised when a descriptor file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(message=f"Descriptor not found: {path}", config_key="descriptor")
        self.error_code = "MISSING_DESCRIPTOR"
        self.details["path"] = path
        self.path = path


class EmptyDatasetListError(ConfigurationError):
    """Raised when a descriptor lists no datasets."""

    def __init__(self, path: str) -> None:
        super().__init__(message=f"Descriptor lists no datasets: {path}", config_key="files")
        self.error_code = "EMPTY_DATASET_LIST"
        self.details["path"] = path
        self.path = path


class StreamError(SourceConnectorError):
    """Raised when a dataset's row stream cannot be opened or read."""

    def __init__(
        self,
        message: str,
        dataset: str | None = None,
        original_error: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="STREAM_ERROR",
            details={"dataset": dataset, "original_error": original_error},
        )
        self.dataset = dataset
        self.original_error = original_error


class UnsupportedValueTypeError(SourceConnectorError):
    """Raised when a sampled value has no semantic type."""

    def __init__(
        self,
        value_type: str,
        column: str | None = None,
    ) -> None:
        where = f" in column '{column}'" if column else ""
        super().__init__(
            message=f"Unsupported value type{where}: {value_type}",
            error_code="UNSUPPORTED_VALUE_TYPE",
            details={"column": column, "value_type": value_type},
        )
        self.column = column
        self.value_type = value_type
