"""Descriptor file discovery and parsing.

A descriptor is a YAML file listing the datasets to load::

    files:
      - name: orders
        path: s3://my-bucket/orders.parquet
      - name: customers
        path: s3://my-bucket/customers/*.csv
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from duckdb_s3_source.core.exceptions import (
    ConfigurationError,
    EmptyDatasetListError,
    MissingDescriptorError,
)
from duckdb_s3_source.models.connector import DatasetRef, Descriptor

DESCRIPTOR_SUFFIXES = (".yaml", ".yml")


def is_descriptor_file(path: str | Path) -> bool:
    """Check whether a path looks like a descriptor file."""
    return Path(path).suffix.lower() in DESCRIPTOR_SUFFIXES


def discover_descriptors(source_dir: str | Path) -> list[Path]:
    """List descriptor files directly inside a source directory, sorted by name."""
    directory = Path(source_dir)
    if not directory.is_dir():
        raise MissingDescriptorError(str(directory))
    return sorted(p for p in directory.iterdir() if p.is_file() and is_descriptor_file(p))


def load_descriptor(path: str | Path) -> list[DatasetRef]:
    """Read the dataset list from a descriptor file.

    Args:
        path: Path to the YAML descriptor.

    Returns:
        Dataset references in file order.

    Raises:
        MissingDescriptorError: If the file does not exist.
        EmptyDatasetListError: If the file lists no datasets.
        ConfigurationError: If the file is not a valid descriptor.
    """
    path = Path(path)
    if not path.is_file():
        raise MissingDescriptorError(str(path))

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid descriptor YAML in {path}: {e}", config_key="descriptor") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Descriptor must be a mapping: {path}", config_key="descriptor")

    try:
        descriptor = Descriptor.model_validate({"files": data.get("files") or []})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid descriptor {path}: {e}", config_key="files") from e

    if not descriptor.files:
        raise EmptyDatasetListError(str(path))
    return descriptor.files
