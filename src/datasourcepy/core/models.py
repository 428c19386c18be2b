"""Core domain models for datasource requests, responses and metrics."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

UNKNOWN_COLUMN = "(unknown)"


class TimeColumn(list[datetime]):
    """Column of datetime values (one per row)."""


class StringColumn(list[str]):
    """Column of string values (one per row)."""


class NumberColumn(list[float]):
    """Column of numeric values (one per row)."""


ColumnData = TimeColumn | StringColumn | NumberColumn


@dataclass
class Column:
    """A column of a table response.

    Attributes:
        text: The column header.
        data: The column's values. Should be a TimeColumn, StringColumn or
            NumberColumn; None for a column without values.
    """

    text: str
    data: ColumnData | None = None


@dataclass
class TableResponse:
    """Response to a table query: an ordered list of columns."""

    columns: list[Column] = field(default_factory=list)


@dataclass(frozen=True)
class DataPoint:
    """One value of a timeseries response."""

    timestamp: datetime
    value: float


@dataclass
class TimeSeriesResponse:
    """Response to a timeseries query.

    Attributes:
        target: Name of the target.
        datapoints: Values for the target.
    """

    target: str
    datapoints: list[DataPoint] = field(default_factory=list)


@dataclass(frozen=True)
class Range:
    """Time range of a query. A bound of None is unbounded on that side."""

    start: datetime | None = None
    end: datetime | None = None


@dataclass(frozen=True)
class AdHocFilter:
    """Ad hoc filter as sent by the dashboard."""

    key: str
    operator: str
    value: str
    condition: str = ""


@dataclass(frozen=True)
class QueryArgs:
    """Arguments passed to a query handler."""

    range: Range = field(default_factory=Range)
    max_data_points: int = 0
    adhoc_filters: tuple[AdHocFilter, ...] = ()


@dataclass(frozen=True)
class Target:
    """A requested target and its type ("timeserie", "" or "table")."""

    name: str
    type: str = ""


def _parse_time(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp. Naive timestamps are taken to be UTC."""
    if not value:
        return None
    if not isinstance(value, str):
        raise ValueError(f"invalid timestamp: {value!r}")
    # fromisoformat() only accepts a trailing "Z" from Python 3.11 on
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    timestamp = datetime.fromisoformat(value)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return timestamp


def _expect_object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be a JSON object")
    return value


def _expect_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{what} must be a JSON array")
    return value


def _parse_range(payload: dict[str, Any]) -> Range:
    raw_range = _expect_object(payload.get("range") or {}, "range")
    return Range(
        start=_parse_time(raw_range.get("from")),
        end=_parse_time(raw_range.get("to")),
    )


@dataclass(frozen=True)
class QueryRequest:
    """A /query request. Each target is queried with the same args."""

    targets: tuple[Target, ...] = ()
    args: QueryArgs = field(default_factory=QueryArgs)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "QueryRequest":
        """Build a request from its decoded JSON body.

        Raises:
            ValueError: If a timestamp cannot be parsed or the payload, its
                range, a target or a filter is not a JSON object.
            KeyError: If a target or filter misses a required field.
        """
        payload = _expect_object(payload, "query request")

        targets = tuple(
            Target(name=t["target"], type=t.get("type") or "")
            for t in (
                _expect_object(raw, "target")
                for raw in _expect_list(payload.get("targets"), "targets")
            )
        )
        filters = tuple(
            AdHocFilter(
                key=f["key"],
                operator=f["operator"],
                value=f["value"],
                condition=f.get("condition", ""),
            )
            for f in (
                _expect_object(raw, "ad hoc filter")
                for raw in _expect_list(payload.get("adhocFilters"), "adhocFilters")
            )
        )
        args = QueryArgs(
            range=_parse_range(payload),
            max_data_points=int(payload.get("maxDataPoints") or 0),
            adhoc_filters=filters,
        )
        return cls(targets=targets, args=args)


@dataclass(frozen=True)
class AnnotationDetails:
    """The annotation query as configured in the dashboard."""

    name: str = ""
    datasource: str = ""
    enable: bool = False
    query: str = ""


@dataclass(frozen=True)
class AnnotationRequest:
    """An /annotations request."""

    annotation: AnnotationDetails = field(default_factory=AnnotationDetails)
    args: QueryArgs = field(default_factory=QueryArgs)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "AnnotationRequest":
        """Build a request from its decoded JSON body.

        Raises:
            ValueError: If the payload, its range or its annotation is not a
                JSON object, or a timestamp cannot be parsed.
        """
        payload = _expect_object(payload, "annotation request")
        raw = _expect_object(payload.get("annotation") or {}, "annotation")
        details = AnnotationDetails(
            name=str(raw.get("name") or ""),
            datasource=str(raw.get("datasource") or ""),
            enable=bool(raw.get("enable", False)),
            query=str(raw.get("query") or ""),
        )
        return cls(annotation=details, args=QueryArgs(range=_parse_range(payload)))


@dataclass
class Annotation:
    """An event shown on the dashboard's graphs.

    Attributes:
        time: When the event happened.
        title: Short description.
        text: Longer description.
        tags: Tags shown with the annotation.
        request: The annotation query this annotation answers. Filled in by
            the server.
    """

    time: datetime
    title: str
    text: str = ""
    tags: list[str] = field(default_factory=list)
    request: AnnotationDetails = field(default_factory=AnnotationDetails)


@dataclass(frozen=True)
class MetricSample:
    """A single metric measurement.

    Attributes:
        name: Metric name (e.g., simplejson_query_duration_seconds).
        timestamp: Unix timestamp in seconds.
        value: The metric value.
        labels: Key-value pairs for metric dimensions.
    """

    name: str
    timestamp: float
    value: float
    labels: dict[str, str] = field(default_factory=dict)
