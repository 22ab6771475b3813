"""Best-effort metadata probes for a dataset.

A probe is a read-only query issued only to learn the schema or the
approximate size of a dataset, without consuming the main row stream.
Probe failures are recorded, never raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import duckdb

from duckdb_s3_source.core.logging import get_logger
from duckdb_s3_source.engine.connector import quote_literal
from duckdb_s3_source.engine.type_mapping import describe_to_column_types
from duckdb_s3_source.models.results import DatasetMetadata, ProbeResult
from duckdb_s3_source.models.schema import ColumnDefinition

if TYPE_CHECKING:
    from duckdb_s3_source.engine.connector import SessionHandle

logger = get_logger(__name__)


def dataset_reference(location: str) -> str:
    """Build the read-only reference query for a dataset location."""
    return f"FROM {quote_literal(location)}"


def clean_query(query: str) -> str:
    """Strip surrounding whitespace and trailing semicolons."""
    return query.strip().rstrip(";").rstrip()


def count_query(reference: str) -> str:
    return f"WITH root AS ({reference}) SELECT COUNT(*) FROM root"


def describe_query(reference: str) -> str:
    return f"DESCRIBE ({reference})"


class MetadataProber:
    """Runs the row-count and schema probes for a reference query."""

    def probe(self, handle: SessionHandle, reference: str) -> DatasetMetadata:
        """Probe a dataset for its column types and row count.

        Both probes are independent: a failure in one does not affect the
        other.

        Args:
            handle: Open session to run the probes on.
            reference: Reference query selecting the whole dataset.

        Returns:
            DatasetMetadata with one ProbeResult per field.
        """
        return DatasetMetadata(
            column_types=self.probe_column_types(handle, reference),
            expected_row_count=self.probe_row_count(handle, reference),
        )

    def probe_row_count(self, handle: SessionHandle, reference: str) -> ProbeResult[int]:
        try:
            row = handle.connection.execute(count_query(reference)).fetchone()
        except duckdb.Error as e:
            logger.warning("probe_row_count_failed", error=str(e))
            return ProbeResult.failure(str(e))
        if row is None:
            return ProbeResult.failure("Row count probe returned no rows")
        return ProbeResult.success(int(row[0]))

    def probe_column_types(
        self, handle: SessionHandle, reference: str
    ) -> ProbeResult[list[ColumnDefinition]]:
        try:
            cursor = handle.connection.execute(describe_query(reference))
            names = [desc[0] for desc in cursor.description]
            describe_rows = [dict(zip(names, row, strict=True)) for row in cursor.fetchall()]
        except duckdb.Error as e:
            logger.warning("probe_schema_failed", error=str(e))
            return ProbeResult.failure(str(e))
        return ProbeResult.success(describe_to_column_types(describe_rows))
