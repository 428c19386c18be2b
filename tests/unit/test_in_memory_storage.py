"""Tests for the in-memory metrics storage adapter."""

import pytest

from datasourcepy.adapters.storage.in_memory import InMemoryMetricsStorage
from datasourcepy.core.models import MetricSample
from datasourcepy.core.ports import MetricsStoragePort


class TestInMemoryMetricsStorage:
    """Tests for InMemoryMetricsStorage adapter."""

    @pytest.mark.storage
    def test_implements_metrics_storage_port(self) -> None:
        """InMemoryMetricsStorage must satisfy MetricsStoragePort protocol."""
        assert isinstance(InMemoryMetricsStorage(), MetricsStoragePort)

    @pytest.mark.storage
    async def test_write_and_read(self) -> None:
        """Can write samples and read them back in timestamp order."""
        storage = InMemoryMetricsStorage()
        await storage.write(MetricSample(name="b", timestamp=2.0, value=1.0))
        await storage.write(MetricSample(name="a", timestamp=1.0, value=1.0))

        samples = [s async for s in storage.read()]

        assert [s.name for s in samples] == ["a", "b"]

    @pytest.mark.storage
    async def test_read_since(self) -> None:
        """Only samples newer than since are returned."""
        storage = InMemoryMetricsStorage()
        for ts in [1.0, 2.0, 3.0]:
            await storage.write(MetricSample(name="m", timestamp=ts, value=ts))

        samples = [s async for s in storage.read(since=2.0)]

        assert [s.timestamp for s in samples] == [3.0]
