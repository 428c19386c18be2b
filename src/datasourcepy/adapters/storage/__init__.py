"""Storage adapters implementing core ports."""

from datasourcepy.adapters.storage.in_memory import InMemoryMetricsStorage

__all__ = [
    "InMemoryMetricsStorage",
]
