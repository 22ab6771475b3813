"""Dataset enumeration over descriptor files.

The enumerator walks the datasets listed in one or more descriptors, probes
each one on a shared DuckDB session, and yields a DatasetResult whose rows
are streamed on demand. Datasets are processed strictly one after another.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from duckdb_s3_source.core.config import DEFAULT_BATCH_SIZE
from duckdb_s3_source.core.exceptions import MissingDescriptorError, StreamError
from duckdb_s3_source.core.logging import get_logger
from duckdb_s3_source.engine.connector import DuckDBSession
from duckdb_s3_source.engine.descriptor import discover_descriptors, load_descriptor
from duckdb_s3_source.engine.prober import MetadataProber, dataset_reference
from duckdb_s3_source.engine.streaming import BatchStream
from duckdb_s3_source.models.results import DatasetResult

if TYPE_CHECKING:
    from duckdb_s3_source.core.config import Settings
    from duckdb_s3_source.models.connector import Credentials, DatasetRef

logger = get_logger(__name__)

StreamErrorPolicy = Literal["abort", "continue"]


class DatasetEnumerator:
    """Drives probing and streaming for every dataset of a run.

    The enumerator owns the run's DuckDBSession: it is created on the first
    dataset and released after the last dataset, on error, or when the
    consumer closes the generator early. Under the "abort" policy a failed
    stream releases it right away. Releasing is idempotent.

    Attributes:
        session: Shared DuckDB session manager.
        prober: Metadata prober used for each dataset.
        batch_size: Rows per batch for every dataset stream.
        stream_error_policy: "abort" stops the run after a failed stream,
            "continue" moves on to the next dataset.
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        settings: Settings | None = None,
        batch_size: int | None = None,
        session: DuckDBSession | None = None,
        prober: MetadataProber | None = None,
        stream_error_policy: StreamErrorPolicy | None = None,
    ) -> None:
        if settings:
            self.batch_size = batch_size or settings.BATCH_SIZE
            self.stream_error_policy = stream_error_policy or settings.STREAM_ERROR_POLICY
        else:
            self.batch_size = batch_size or DEFAULT_BATCH_SIZE
            self.stream_error_policy = stream_error_policy or "abort"

        self.session = session or DuckDBSession(credentials=credentials, settings=settings)
        self.prober = prober or MetadataProber()
        self._active_stream: BatchStream | None = None
        self._position: int | None = None

    def run(self, descriptor_path: str | Path) -> Iterator[DatasetResult]:
        """Enumerate the datasets of a single descriptor."""
        return self.run_all([descriptor_path])

    def run_all(self, descriptor_paths: Iterable[str | Path]) -> Iterator[DatasetResult]:
        """Enumerate the datasets of several descriptors in order.

        Every descriptor is read before any engine work starts, so
        configuration errors surface immediately.

        Args:
            descriptor_paths: Descriptor files to read.

        Returns:
            Lazy iterator of DatasetResult, one per listed dataset.

        Raises:
            MissingDescriptorError: If a descriptor does not exist.
            EmptyDatasetListError: If a descriptor lists no datasets.
        """
        refs = [ref for path in descriptor_paths for ref in load_descriptor(path)]
        return self._enumerate(refs)

    def _enumerate(self, refs: list[DatasetRef]) -> Iterator[DatasetResult]:
        try:
            for position, ref in enumerate(refs):
                self._finish_active_stream()
                self._position = position
                handle = self.session.acquire()

                reference = dataset_reference(ref.location)
                metadata = self.prober.probe(handle, reference)
                column_types = metadata.column_types.value

                logger.info(
                    "dataset_probed",
                    dataset=ref.name,
                    position=position + 1,
                    total=len(refs),
                    schema_probed=metadata.column_types.ok,
                    expected_row_count=metadata.expected_row_count.value,
                )
                yield DatasetResult(
                    title=ref.name,
                    content=reference,
                    opener=partial(self._open_stream, position),
                    column_types=column_types,
                    expected_row_count=metadata.expected_row_count.value,
                )
            self._finish_active_stream()
        finally:
            self._position = None
            self._close_active_stream()
            self.session.release()

    def _open_stream(self, position: int, result: DatasetResult) -> BatchStream:
        """Open a fresh stream for the current dataset, closing any previous one."""
        if position != self._position:
            raise StreamError(
                f"Rows of dataset '{result.title}' requested after enumeration moved on",
                dataset=result.title,
            )
        self._close_active_stream()
        handle = self.session.acquire()
        stream = BatchStream(
            handle.connection,
            result.content,
            batch_size=self.batch_size,
            column_types=result.column_types,
            on_close=self._release_after_failure,
            on_infer=result.attach_inferred_types,
            label=result.title,
        )
        self._active_stream = stream
        return stream

    def _release_after_failure(self) -> None:
        """Under the abort policy, free the session as soon as a stream fails."""
        stream = self._active_stream
        if stream is None or stream.error is None or self.stream_error_policy != "abort":
            return
        logger.warning("dataset_stream_failed_session_released", dataset=stream.label)
        self.session.release()

    def _close_active_stream(self) -> None:
        stream, self._active_stream = self._active_stream, None
        if stream is not None:
            stream.close()

    def _finish_active_stream(self) -> None:
        """Close the previous dataset's stream and apply the error policy."""
        stream = self._active_stream
        self._close_active_stream()
        if stream is None or stream.error is None:
            return
        if self.stream_error_policy == "abort":
            raise StreamError(
                f"Run aborted after dataset '{stream.label}' failed",
                dataset=stream.label,
                original_error=stream.error.message,
            )
        logger.warning(
            "dataset_stream_skipped",
            dataset=stream.label,
            error=stream.error.message,
        )


def process_source(
    source: str | Path,
    credentials: Credentials | None = None,
    settings: Settings | None = None,
    batch_size: int | None = None,
) -> Iterator[DatasetResult]:
    """Enumerate datasets from a descriptor file or a directory of descriptors.

    Args:
        source: Descriptor file, or directory holding descriptor files.
        credentials: Storage credentials for the run.
        settings: Optional Settings for configuration.
        batch_size: Rows per batch (overrides settings).

    Returns:
        Lazy iterator of DatasetResult.
    """
    source = Path(source)
    if source.is_dir():
        paths = discover_descriptors(source)
        if not paths:
            raise MissingDescriptorError(str(source))
    else:
        paths = [source]

    enumerator = DatasetEnumerator(credentials=credentials, settings=settings, batch_size=batch_size)
    return enumerator.run_all(paths)
