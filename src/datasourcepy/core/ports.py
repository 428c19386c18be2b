"""Port interfaces for query handlers and metrics storage.

These protocols define the contracts that adapters must implement.
The core depends only on these interfaces, not concrete implementations.
"""

from collections.abc import AsyncIterable
from typing import Protocol, runtime_checkable

from datasourcepy.core.models import (
    Annotation,
    MetricSample,
    QueryArgs,
    TableResponse,
    TimeSeriesResponse,
)


@runtime_checkable
class MetricsStoragePort(Protocol):
    """Port for metrics storage operations.

    Adapters implementing this protocol can store and retrieve metric samples.
    Example: InMemoryMetricsStorage.
    """

    async def write(self, sample: MetricSample) -> None:
        """Write a metric sample to storage."""
        ...

    def read(self, since: float = 0) -> AsyncIterable[MetricSample]:
        """Read metric samples since the given timestamp.

        Args:
            since: Unix timestamp. Returns samples with timestamp > since.
                   Default 0 returns all samples.

        Returns:
            AsyncIterable of MetricSample objects, ordered by timestamp ascending.
        """
        ...


@runtime_checkable
class QueryHandler(Protocol):
    """Business logic behind one or more query targets.

    A handler that does not support a query type should raise
    NotImplementedError from the corresponding method.
    """

    async def query(self, target: str, args: QueryArgs) -> TimeSeriesResponse:
        """Answer a timeseries query for target."""
        ...

    async def table_query(self, target: str, args: QueryArgs) -> TableResponse:
        """Answer a table query for target."""
        ...


@runtime_checkable
class AnnotationsHandler(Protocol):
    """Optional handler capability: annotations for the dashboard's graphs."""

    async def annotations(
        self, name: str, query: str, args: QueryArgs
    ) -> list[Annotation]:
        """Return the annotations for an annotation query in args.range."""
        ...


@runtime_checkable
class TagsHandler(Protocol):
    """Optional handler capability: keys and values for ad hoc filters."""

    async def tag_keys(self) -> list[str]:
        """Return the keys that can be used in ad hoc filters."""
        ...

    async def tag_values(self, key: str) -> list[str]:
        """Return the possible values for a tag key."""
        ...
