"""Lazily pulled, bounded-size batch stream over a DuckDB cursor.

Rows are fetched from the engine only when the consumer asks for the next
batch. Each row is normalized before it is handed out, and column types are
inferred from the first batch when the schema probe did not provide them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

import duckdb

from duckdb_s3_source.core.config import DEFAULT_BATCH_SIZE
from duckdb_s3_source.core.exceptions import StreamError, UnsupportedValueTypeError
from duckdb_s3_source.core.logging import get_logger
from duckdb_s3_source.engine.normalizer import normalize_row
from duckdb_s3_source.engine.type_mapping import infer_from_sample
from duckdb_s3_source.models.schema import Batch, ColumnDefinition

if TYPE_CHECKING:
    from duckdb_s3_source.core.exceptions import SourceConnectorError

logger = get_logger(__name__)


class BatchStream(Iterator[Batch]):
    """Forward-only iterator of row batches for one query.

    Every batch holds exactly ``batch_size`` rows except the last one, and
    an empty result yields no batches at all. The stream opens its own
    cursor on the session connection at the first pull and closes it when
    the rows run out, on error, or on ``close()``.

    Attributes:
        query: Query whose rows are streamed.
        batch_size: Maximum rows per batch.
        label: Dataset name used in logs and errors.
        error: The failure that ended the stream, if any.
    """

    def __init__(
        self,
        connection: duckdb.DuckDBPyConnection,
        query: str,
        batch_size: int = DEFAULT_BATCH_SIZE,
        column_types: list[ColumnDefinition] | None = None,
        on_close: Callable[[], None] | None = None,
        on_infer: Callable[[list[ColumnDefinition]], None] | None = None,
        label: str | None = None,
    ) -> None:
        """Initialize the stream without running the query.

        Args:
            connection: Session connection to open the cursor on.
            query: Query whose rows are streamed.
            batch_size: Maximum rows per batch.
            column_types: Probed column types; inferred when None.
            on_close: Called once when the stream is closed.
            on_infer: Called with the column types inferred from the first batch.
            label: Dataset name used in logs and errors.
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")

        self.query = query
        self.batch_size = batch_size
        self.label = label or query
        self.error: SourceConnectorError | None = None

        self._connection = connection
        self._on_close = on_close
        self._on_infer = on_infer
        self._cursor: duckdb.DuckDBPyConnection | None = None
        self._columns: list[str] = []
        self._column_types = column_types
        self._needs_inference = column_types is None
        self._lookahead: Batch | None = None
        self._exhausted = False
        self._closed = False
        self.rows_read = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def column_types(self) -> list[ColumnDefinition] | None:
        """Column types for the stream.

        When the schema probe failed, reading this before iteration pulls
        the first batch ahead of time so its types can be inferred. The
        batch is kept and returned by the next pull. Stays None for an
        empty result.
        """
        if self._needs_inference and not self._closed:
            batch = self._read_batch()
            if batch:
                self._lookahead = batch
        return self._column_types

    def __iter__(self) -> BatchStream:
        return self

    def __next__(self) -> Batch:
        if self._lookahead is not None:
            batch, self._lookahead = self._lookahead, None
            return batch

        batch = self._read_batch() if not self._closed else []
        if not batch:
            self.close()
            raise StopIteration
        return batch

    def _open(self) -> duckdb.DuckDBPyConnection:
        if self._cursor is None:
            cursor = self._connection.cursor()
            self._cursor = cursor
            cursor.execute(self.query)
            self._columns = [desc[0] for desc in cursor.description or []]
            logger.debug("stream_cursor_opened", dataset=self.label)
        return self._cursor

    def _read_batch(self) -> Batch:
        """Read up to ``batch_size`` normalized rows from the cursor."""
        if self._exhausted:
            return []

        try:
            cursor = self._open()
            rows: Batch = []
            while len(rows) < self.batch_size:
                chunk = cursor.fetchmany(self.batch_size - len(rows))
                if not chunk:
                    self._exhausted = True
                    break
                rows.extend(
                    normalize_row(dict(zip(self._columns, values, strict=True)))
                    for values in chunk
                )
        except duckdb.Error as e:
            self._fail(
                StreamError(
                    f"Failed to stream dataset '{self.label}'",
                    dataset=self.label,
                    original_error=str(e),
                )
            )
            raise self.error from e

        self.rows_read += len(rows)
        if rows and self._needs_inference:
            self._infer_column_types(rows)
        return rows

    def _infer_column_types(self, batch: Batch) -> None:
        self._needs_inference = False
        try:
            self._column_types = infer_from_sample(batch[0])
        except UnsupportedValueTypeError as e:
            self._fail(e)
            raise
        logger.info(
            "stream_column_types_inferred",
            dataset=self.label,
            columns=len(self._column_types),
        )
        if self._on_infer is not None:
            self._on_infer(self._column_types)

    def _fail(self, error: SourceConnectorError) -> None:
        self.error = error
        logger.error("stream_failed", dataset=self.label, error=error.message)
        self.close()

    def close(self) -> None:
        """Release the cursor and run the close callback. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._lookahead = None
        self._needs_inference = False
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None
        logger.debug("stream_closed", dataset=self.label, rows_read=self.rows_read)
        if self._on_close is not None:
            self._on_close()

    def __enter__(self) -> BatchStream:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
