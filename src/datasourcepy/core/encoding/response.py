"""JSON encoding of query responses.

Table responses are sent to the dashboard as:

    {"type": "table",
     "columns": [{"text": "timestamp", "type": "time"}, ...],
     "rows": [[<cell>, ...], ...]}

Timeseries responses are sent as:

    {"target": "A", "datapoints": [[<value>, <epoch millis>], ...]}

Annotations are sent as:

    {"annotation": {...}, "time": <epoch millis>,
     "title": "...", "text": "...", "tags": [...]}
"""

import json
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from datasourcepy.core.models import (
    Annotation,
    Column,
    DataPoint,
    NumberColumn,
    StringColumn,
    TableResponse,
    TimeColumn,
    TimeSeriesResponse,
)


class ColumnLengthError(ValueError):
    """Raised when the columns of a table response differ in length."""


def _column_type(column: Column) -> tuple[str, int]:
    if isinstance(column.data, TimeColumn):
        return "time", len(column.data)
    if isinstance(column.data, StringColumn):
        return "string", len(column.data)
    if isinstance(column.data, NumberColumn):
        return "number", len(column.data)
    return "", 0


def format_time(timestamp: datetime) -> str:
    """Format a datetime as RFC 3339 ("2020-01-01T00:00:00Z" for UTC).

    Naive datetimes are taken to be UTC.
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    text = timestamp.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def _epoch_millis(timestamp: datetime) -> int:
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return int(timestamp.timestamp() * 1000)


def _cell(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_time(value)
    return value


def encode_table_response(response: TableResponse) -> dict[str, Any]:
    """Convert a TableResponse to its JSON-ready representation.

    Raises:
        ColumnLengthError: If the columns do not all have the same number of
            rows.
    """
    col_types: list[str] = []
    row_count: int | None = None
    for column in response.columns:
        col_type, count = _column_type(column)
        col_types.append(col_type)
        if row_count is None:
            row_count = count
        elif count != row_count:
            raise ColumnLengthError(
                "error building table query output: "
                "all columns must have the same number of rows"
            )

    columns = [
        {"text": column.text, "type": col_type}
        for column, col_type in zip(response.columns, col_types, strict=True)
    ]
    cells = [column.data or [] for column in response.columns]
    rows = [[_cell(data[row]) for data in cells] for row in range(row_count or 0)]
    return {"type": "table", "columns": columns, "rows": rows}


def encode_datapoint(datapoint: DataPoint) -> list[float | int]:
    """Encode a DataPoint as [value, epoch milliseconds]."""
    return [datapoint.value, _epoch_millis(datapoint.timestamp)]


def encode_timeseries_response(response: TimeSeriesResponse) -> dict[str, Any]:
    """Convert a TimeSeriesResponse to its JSON-ready representation."""
    return {
        "target": response.target,
        "datapoints": [encode_datapoint(d) for d in response.datapoints],
    }


def encode_response(response: TableResponse | TimeSeriesResponse) -> dict[str, Any]:
    """Convert a table or timeseries response to its JSON-ready representation."""
    if isinstance(response, TableResponse):
        return encode_table_response(response)
    if isinstance(response, TimeSeriesResponse):
        return encode_timeseries_response(response)
    raise TypeError(f"unsupported response type: {type(response).__name__}")


def encode_responses(responses: Iterable[TableResponse | TimeSeriesResponse]) -> str:
    """Encode a list of query responses as a JSON array.

    Raises:
        ColumnLengthError: If any table response has columns of unequal length.
    """
    return json.dumps([encode_response(r) for r in responses])


def encode_annotation(annotation: Annotation) -> dict[str, Any]:
    """Convert an Annotation to its JSON-ready representation.

    The annotation's time is sent as epoch milliseconds.
    """
    request = annotation.request
    return {
        "annotation": {
            "name": request.name,
            "datasource": request.datasource,
            "enable": request.enable,
            "query": request.query,
        },
        "time": _epoch_millis(annotation.time),
        "title": annotation.title,
        "text": annotation.text,
        "tags": list(annotation.tags),
    }
