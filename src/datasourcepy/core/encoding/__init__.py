"""Encoders for query responses and metrics."""

from datasourcepy.core.encoding.prometheus import (
    CONTENT_TYPE as PROMETHEUS_CONTENT_TYPE,
)
from datasourcepy.core.encoding.prometheus import encode_metrics
from datasourcepy.core.encoding.response import (
    ColumnLengthError,
    encode_annotation,
    encode_response,
    encode_responses,
    encode_table_response,
    encode_timeseries_response,
)

__all__ = [
    "PROMETHEUS_CONTENT_TYPE",
    "ColumnLengthError",
    "encode_annotation",
    "encode_metrics",
    "encode_response",
    "encode_responses",
    "encode_table_response",
    "encode_timeseries_response",
]
