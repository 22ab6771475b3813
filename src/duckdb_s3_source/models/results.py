"""Result containers produced by the prober, the enumerator and ad-hoc queries."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from duckdb_s3_source.models.schema import ColumnDefinition

if TYPE_CHECKING:
    from duckdb_s3_source.engine.streaming import BatchStream

T = TypeVar("T")


@dataclass(frozen=True)
class ProbeResult(Generic[T]):
    """Outcome of one best-effort probe query.

    Attributes:
        value: Probed value, None when the probe failed.
        error: Engine error message when the probe failed.
    """

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> ProbeResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> ProbeResult[T]:
        return cls(error=error)


@dataclass(frozen=True)
class DatasetMetadata:
    """Schema and size estimate for one dataset."""

    column_types: ProbeResult[list[ColumnDefinition]] = field(default_factory=ProbeResult)
    expected_row_count: ProbeResult[int] = field(default_factory=ProbeResult)


@dataclass
class DatasetResult:
    """One dataset handed to the host.

    Attributes:
        title: Dataset display name.
        content: Reference query text, used by the host as a cache key only.
        opener: Opens a batch stream for this result, see ``rows``.
        column_types: Probed column types. When the schema probe failed,
            filled in with inferred types once the first batch is read.
            Stays None only if the probe failed and no rows exist.
        expected_row_count: Advisory row count, None if the count probe failed.
    """

    title: str
    content: str
    opener: Callable[[DatasetResult], BatchStream] = field(repr=False)
    column_types: list[ColumnDefinition] | None = None
    expected_row_count: int | None = None

    def rows(self) -> BatchStream:
        """Open a fresh batch stream over the dataset.

        Only valid while the enumeration that produced this result is still
        on this dataset. Once the enumerator has moved on, been exhausted or
        been closed, the call raises StreamError.
        """
        return self.opener(self)

    def attach_inferred_types(self, column_types: list[ColumnDefinition]) -> None:
        """Record types inferred by a stream when none were probed."""
        if self.column_types is None:
            self.column_types = column_types


@dataclass
class QueryResult:
    """Result of an ad-hoc query: a batch stream plus best-effort metadata."""

    rows: BatchStream
    expected_row_count: int | None = None

    @property
    def column_types(self) -> list[ColumnDefinition] | None:
        """Probed types, or types inferred from the first batch."""
        return self.rows.column_types
