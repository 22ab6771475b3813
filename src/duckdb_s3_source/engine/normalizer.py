"""Row normalization applied before rows leave the pipeline."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from duckdb_s3_source.models.schema import Row

# Largest integer the host's double-precision numbers hold exactly.
MAX_SAFE_INTEGER = 2**53 - 1


def normalize_value(value: Any) -> Any:
    """Narrow numbers the host cannot hold natively to float.

    Integers outside the safe range and every ``Decimal`` become ``float``.
    Everything else is returned unchanged.
    """
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, int) and not isinstance(value, bool):
        if abs(value) > MAX_SAFE_INTEGER:
            return float(value)
    return value


def normalize_row(row: Row) -> Row:
    """Return a copy of the row with wide numbers converted to float.

    The conversion is lossy beyond double precision but deterministic, and
    normalizing an already normalized row changes nothing.
    """
    return {key: normalize_value(value) for key, value in row.items()}
