"""Metric helper functions for creating MetricSample objects."""

import time

from datasourcepy.core.models import MetricSample


def counter(
    name: str,
    value: float = 1.0,
    labels: dict[str, str] | None = None,
) -> MetricSample:
    """Create a counter metric sample.

    Args:
        name: Metric name (e.g., "simplejson_query_failed_count")
        value: Increment value (default: 1.0)
        labels: Optional dimension labels

    Returns:
        MetricSample with current timestamp
    """
    return MetricSample(
        name=name,
        timestamp=time.time(),
        value=value,
        labels=labels or {},
    )


DEFAULT_HISTOGRAM_BUCKETS = [0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10]


def histogram(
    name: str,
    value: float,
    labels: dict[str, str] | None = None,
    buckets: list[float] | None = None,
) -> list[MetricSample]:
    """Create histogram metric samples for a single observation.

    Args:
        name: Metric name (e.g., "simplejson_query_duration_seconds")
        value: Observed value
        labels: Optional dimension labels
        buckets: Bucket boundaries (default: Prometheus standard buckets)

    Returns:
        List of MetricSample objects (bucket samples + sum + count)
    """
    timestamp = time.time()
    base_labels = labels or {}
    bucket_boundaries = buckets if buckets is not None else DEFAULT_HISTOGRAM_BUCKETS

    samples = [
        MetricSample(
            name=f"{name}_bucket",
            timestamp=timestamp,
            value=1.0 if value <= boundary else 0.0,
            labels={**base_labels, "le": str(boundary)},
        )
        for boundary in bucket_boundaries
    ]
    # +Inf always contains the observation
    samples.append(
        MetricSample(
            name=f"{name}_bucket",
            timestamp=timestamp,
            value=1.0,
            labels={**base_labels, "le": "+Inf"},
        )
    )
    samples.append(
        MetricSample(
            name=f"{name}_sum", timestamp=timestamp, value=value, labels=base_labels
        )
    )
    samples.append(
        MetricSample(
            name=f"{name}_count", timestamp=timestamp, value=1.0, labels=base_labels
        )
    )
    return samples


QUERY_DURATION = "simplejson_query_duration_seconds"
QUERY_FAILED = "simplejson_query_failed_count"


class QueryMetrics:
    """Query duration and failure metrics for one datasource server.

    Samples are built per instance; the caller writes them to whatever
    MetricsStoragePort the server was given.
    """

    def __init__(self, app: str, buckets: list[float] | None = None) -> None:
        self.app = app
        self.buckets = buckets

    def _labels(self, target: str, target_type: str) -> dict[str, str]:
        return {"app": self.app, "target": target, "type": target_type}

    def duration(
        self, target: str, target_type: str, seconds: float
    ) -> list[MetricSample]:
        """Return histogram samples for one query's duration."""
        return histogram(
            QUERY_DURATION,
            seconds,
            labels=self._labels(target, target_type),
            buckets=self.buckets,
        )

    def failure(self, target: str, target_type: str) -> MetricSample:
        """Return a counter sample for one failed query."""
        return counter(QUERY_FAILED, labels=self._labels(target, target_type))
