"""In-memory storage adapter for metrics."""

from collections.abc import AsyncIterable

from datasourcepy.core.models import MetricSample


class InMemoryMetricsStorage:
    """In-memory implementation of MetricsStoragePort.

    Stores metric samples in a list. Suitable for testing and
    low-volume servers where persistence is not required.
    """

    def __init__(self) -> None:
        self._samples: list[MetricSample] = []

    async def write(self, sample: MetricSample) -> None:
        """Write a metric sample to storage."""
        self._samples.append(sample)

    async def read(self, since: float = 0) -> AsyncIterable[MetricSample]:
        """Read metric samples since the given timestamp.

        Returns samples with timestamp > since, ordered by timestamp ascending.
        """
        filtered = [s for s in self._samples if s.timestamp > since]
        for sample in sorted(filtered, key=lambda s: s.timestamp):
            yield sample
