"""Mapping of DuckDB column types and Python values to semantic types.

Two independent type systems feed the same taxonomy:

- DuckDB's physical column types, as reported by ``DESCRIBE``. These give
  PRECISE column definitions.
- Python values returned by the DuckDB client. These are only consulted when
  the schema probe failed, and give INFERRED column definitions.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from duckdb_s3_source.core.exceptions import UnsupportedValueTypeError
from duckdb_s3_source.models.schema import ColumnDefinition, SemanticType, TypeFidelity

DECIMAL_MARKER = "DECIMAL"

BOOLEAN_TYPES = frozenset({"BOOLEAN"})

DATE_TYPES = frozenset(
    {
        "DATE",
        "TIMESTAMP",
        "TIMESTAMP WITH TIME ZONE",
        "TIMESTAMP_S",
        "TIMESTAMP_MS",
        "TIMESTAMP_NS",
    }
)

NUMBER_TYPES = frozenset(
    {
        "TINYINT",
        "UTINYINT",
        "SMALLINT",
        "USMALLINT",
        "INTEGER",
        "UINTEGER",
        "BIGINT",
        "UBIGINT",
        "HUGEINT",
        "UHUGEINT",
        "FLOAT",
        "DOUBLE",
    }
)

# No portable time-of-day type exists on the host side.
TIME_TYPES = frozenset({"TIME", "TIME WITH TIME ZONE"})


def classify_physical_type(type_name: str) -> SemanticType:
    """Classify a DuckDB column type name.

    Matching is case-sensitive on DuckDB's canonical names. Unknown names,
    including nested types such as ``STRUCT(...)`` or ``INTEGER[]``, map to
    STRING.

    Args:
        type_name: Column type as reported by ``DESCRIBE``.

    Returns:
        The semantic type for the column.
    """
    if DECIMAL_MARKER in type_name:
        return SemanticType.NUMBER
    if type_name in TIME_TYPES:
        return SemanticType.STRING
    if type_name in BOOLEAN_TYPES:
        return SemanticType.BOOLEAN
    if type_name in DATE_TYPES:
        return SemanticType.DATE
    if type_name in NUMBER_TYPES:
        return SemanticType.NUMBER
    return SemanticType.STRING


def describe_to_column_types(describe_rows: Iterable[Mapping[str, Any]]) -> list[ColumnDefinition]:
    """Convert ``DESCRIBE`` output rows into PRECISE column definitions.

    Args:
        describe_rows: Rows with at least ``column_name`` and ``column_type``.

    Returns:
        Column definitions in the dataset's column order.
    """
    return [
        ColumnDefinition(
            name=row["column_name"],
            semantic_type=classify_physical_type(row["column_type"]),
            fidelity=TypeFidelity.PRECISE,
        )
        for row in describe_rows
    ]


@dataclass(frozen=True)
class TypedValue:
    """A runtime value tagged with its semantic type.

    The tag is fixed when the value is wrapped; ``None`` values carry no tag.
    """

    value: Any
    semantic_type: SemanticType | None

    @classmethod
    def of(cls, value: Any, column: str | None = None) -> TypedValue:
        """Wrap a value returned by the DuckDB client.

        Raises:
            UnsupportedValueTypeError: If the value has no semantic type.
        """
        if value is None:
            return cls(value, None)
        # bool is a subclass of int
        if isinstance(value, bool):
            return cls(value, SemanticType.BOOLEAN)
        if isinstance(value, int | float | Decimal):
            return cls(value, SemanticType.NUMBER)
        if isinstance(value, str):
            return cls(value, SemanticType.STRING)
        if isinstance(value, dt.date):
            return cls(value, SemanticType.DATE)
        raise UnsupportedValueTypeError(type(value).__name__, column=column)


def infer_from_sample(sample_row: Mapping[str, Any]) -> list[ColumnDefinition]:
    """Infer column definitions from the values of one row.

    Args:
        sample_row: First row of the first batch.

    Returns:
        One INFERRED column definition per field, in field order.

    Raises:
        UnsupportedValueTypeError: If a value cannot be represented.
    """
    columns = []
    for name, value in sample_row.items():
        typed = TypedValue.of(value, column=name)
        columns.append(
            ColumnDefinition(
                name=name,
                semantic_type=typed.semantic_type or SemanticType.STRING,
                fidelity=TypeFidelity.INFERRED,
            )
        )
    return columns
