"""Rectangular, column-typed tables.

A Table is the counterpart of Dataset for data that already comes in
columns, e.g. the result of a database query. Its operations return new
tables and never modify the source.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from datasourcepy.core.models import (
    UNKNOWN_COLUMN,
    Column,
    ColumnData,
    NumberColumn,
    QueryArgs,
    StringColumn,
    TableResponse,
    TimeColumn,
)

V = TypeVar("V")


@dataclass(frozen=True)
class TableColumn:
    """A named column used to construct a Table."""

    name: str
    values: Sequence[Any]


class Table:
    """A list of named columns of equal length."""

    def __init__(self, *columns: TableColumn) -> None:
        self._names = [column.name for column in columns]
        self._fields = [list(column.values) for column in columns]

    def _field(self, column: str) -> list[Any] | None:
        try:
            return self._fields[self._names.index(column)]
        except ValueError:
            return None

    def _first_timestamp_column(self) -> int | None:
        for index, values in enumerate(self._fields):
            if values and isinstance(values[0], datetime):
                return index
        return None

    def _rebuild(self, fields: Iterable[tuple[str, list[Any]]]) -> "Table":
        return Table(*(TableColumn(name, values) for name, values in fields))

    def get_timestamps(self) -> list[datetime]:
        """Return the values of the first timestamp column."""
        index = self._first_timestamp_column()
        if index is None:
            return []
        return list(self._fields[index])

    def get_columns(self) -> list[str]:
        """Return the column names, in construction order."""
        return list(self._names)

    def get_values(self, column: str) -> tuple[list[Any], bool]:
        """Return (values, found) for a column."""
        values = self._field(column)
        if values is None:
            return [], False
        return list(values), True

    def _typed_values(
        self, column: str, kind: type[V]
    ) -> tuple[list[V], bool]:
        values = self._field(column)
        if values is None:
            return [], False
        for value in values:
            if not isinstance(value, kind) or isinstance(value, bool):
                raise TypeError(
                    f"column {column!r} holds {type(value).__name__}, "
                    f"not {kind.__name__}"
                )
        return list(values), True

    def get_time_values(self, column: str) -> tuple[list[datetime], bool]:
        """Return (values, found) for a timestamp column.

        Raises:
            TypeError: If the column holds anything other than datetimes.
        """
        return self._typed_values(column, datetime)

    def get_float_values(self, column: str) -> tuple[list[float], bool]:
        """Return (values, found) for a numeric column.

        Ints are accepted and returned as floats.

        Raises:
            TypeError: If the column holds non-numeric values.
        """
        values = self._field(column)
        if values is None:
            return [], False
        for value in values:
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise TypeError(
                    f"column {column!r} holds {type(value).__name__}, not float"
                )
        return [float(value) for value in values], True

    def get_string_values(self, column: str) -> tuple[list[str], bool]:
        """Return (values, found) for a string column.

        Raises:
            TypeError: If the column holds non-string values.
        """
        return self._typed_values(column, str)

    def filter(self, args: QueryArgs) -> "Table":
        """Return a table with the rows that fall within args.range.

        Only the first timestamp column is considered. Bounds are inclusive.

        Raises:
            ValueError: If the table has no timestamp column.
        """
        index = self._first_timestamp_column()
        if index is None:
            raise ValueError("unable to determine timestamp column")

        start, end = args.range.start, args.range.end
        keep = [
            row
            for row, timestamp in enumerate(self._fields[index])
            if not (start is not None and timestamp < start)
            and not (end is not None and timestamp > end)
        ]
        return self._rebuild(
            (name, [values[row] for row in keep])
            for name, values in zip(self._names, self._fields, strict=True)
        )

    def accumulate(self) -> "Table":
        """Return a table where numeric columns hold their running totals."""
        fields: list[tuple[str, list[Any]]] = []
        for name, values in zip(self._names, self._fields, strict=True):
            if values and _is_number(values[0]):
                total = 0.0
                running: list[Any] = []
                for value in values:
                    total += value
                    running.append(total)
                fields.append((name, running))
            else:
                fields.append((name, list(values)))
        return self._rebuild(fields)

    def delete_column(self, *columns: str) -> "Table":
        """Return a table without the listed columns."""
        drop = set(columns)
        return self._rebuild(
            (name, values)
            for name, values in zip(self._names, self._fields, strict=True)
            if name not in drop
        )

    def create_table_response(self) -> TableResponse:
        """Create a TableResponse from the table.

        The column type is taken from the column's first value. Empty
        columns carry no data.
        """
        return TableResponse(
            columns=[
                Column(text=name or UNKNOWN_COLUMN, data=_make_column_data(values))
                for name, values in zip(self._names, self._fields, strict=True)
            ]
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _make_column_data(values: list[Any]) -> ColumnData | None:
    if not values:
        return None
    first = values[0]
    if isinstance(first, datetime):
        return TimeColumn(values)
    if isinstance(first, str):
        return StringColumn(values)
    if _is_number(first):
        return NumberColumn(float(value) for value in values)
    return None
