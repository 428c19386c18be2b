"""Tests for the Prometheus text metric encoder."""

import pytest

from datasourcepy.core.encoding.prometheus import encode_metrics
from datasourcepy.core.metrics import QUERY_FAILED, QueryMetrics, counter
from datasourcepy.core.models import MetricSample


class TestPrometheusEncoder:
    """Tests for Prometheus text encoding of metric samples."""

    @pytest.mark.encoding
    def test_encode_single_sample(self) -> None:
        """Single MetricSample encodes to one exposition line."""
        sample = MetricSample(
            name="simplejson_query_failed_count",
            timestamp=1702300000.0,
            value=1.0,
            labels={"target": "A", "app": "test"},
        )

        result = encode_metrics([sample])

        assert result == 'simplejson_query_failed_count{app="test",target="A"} 1.0\n'

    @pytest.mark.encoding
    def test_same_series_is_summed(self) -> None:
        """Increments of one series add up, other series stay separate."""
        samples = [
            counter(QUERY_FAILED, labels={"target": "A"}),
            counter(QUERY_FAILED, labels={"target": "A"}),
            counter(QUERY_FAILED, labels={"target": "B"}),
        ]

        lines = encode_metrics(samples).splitlines()

        assert lines == [
            f'{QUERY_FAILED}{{target="A"}} 2.0',
            f'{QUERY_FAILED}{{target="B"}} 1.0',
        ]

    @pytest.mark.encoding
    def test_sample_without_labels(self) -> None:
        samples = [MetricSample(name="up", timestamp=1.0, value=1.0)]
        assert encode_metrics(samples) == "up 1.0\n"

    @pytest.mark.encoding
    def test_histogram_buckets(self) -> None:
        """Histogram samples keep the le label last and render +Inf."""
        samples = QueryMetrics("test", buckets=[0.5]).duration("A", "table", 0.1)

        result = encode_metrics(samples)

        assert (
            'simplejson_query_duration_seconds_bucket{app="test",target="A",'
            'type="table",le="+Inf"} 1.0'
        ) in result
        assert 'type="table",le="0.5"} 1.0' in result
        assert result.endswith("\n")

    @pytest.mark.encoding
    def test_label_values_are_escaped(self) -> None:
        sample = MetricSample(
            name="m", timestamp=1.0, value=1.0, labels={"target": 'a"b\\c\nd'}
        )

        assert encode_metrics([sample]) == 'm{target="a\\"b\\\\c\\nd"} 1.0\n'

    @pytest.mark.encoding
    def test_encode_empty_iterable(self) -> None:
        """Empty input returns empty string."""
        assert encode_metrics([]) == ""
