"""Sparse, time-indexed dataset used to build table responses.

Use a Dataset when values arrive for a range of (possibly out of order)
timestamps and columns. Cells that were never set read as 0.
"""

from collections.abc import Callable
from datetime import datetime

from datasourcepy.core.indexer import (
    Indexer,
    make_string_indexer,
    make_time_indexer,
)
from datasourcepy.core.models import (
    UNKNOWN_COLUMN,
    Column,
    NumberColumn,
    TableResponse,
    TimeColumn,
)


class Dataset:
    """A row x column matrix of floats addressed by (timestamp, column name).

    Rows are stored in the order their timestamp was first seen. Every read
    accessor presents them sorted by timestamp, and columns sorted by name.

    Example:
        ```python
        ds = Dataset()
        ds.add(datetime(2022, 1, 2, tzinfo=UTC), "A", 1.0)
        ds.add(datetime(2022, 1, 1, tzinfo=UTC), "A", 2.0)
        ds.get_values("A")  # ([2.0, 1.0], True)
        ```

    A Dataset is not safe for concurrent mutation.
    """

    def __init__(self) -> None:
        self._rows: list[list[float]] = []
        self._timestamps: Indexer[datetime] = make_time_indexer()
        self._columns: Indexer[str] = make_string_indexer()

    def add(self, timestamp: datetime, column: str, value: float) -> None:
        """Add a value for a timestamp and column.

        If the cell already holds a value, the new value is added to it.
        """
        self._ensure_column_exists(column)

        row, added = self._timestamps.add(timestamp)
        if added:
            self._rows.append([0.0] * self._columns.count())
        col, _ = self._columns.get_index(column)
        self._rows[row][col] += value

    def _ensure_column_exists(self, column: str) -> None:
        _, added = self._columns.add(column)
        if not added:
            return
        for row in self._rows:
            row.append(0.0)

    def size(self) -> int:
        """Return the number of rows (distinct timestamps)."""
        return self._timestamps.count()

    def __len__(self) -> int:
        return self.size()

    def add_column(
        self, column: str, processor: Callable[[dict[str, float]], float]
    ) -> None:
        """Add a column computed from the existing columns of each row.

        Args:
            column: Name of the new column.
            processor: Called once per row with a mapping of the existing
                column names to that row's values. Its return value becomes
                the new column's value for the row.

        Adding a column that already exists does nothing.
        """
        if column in self._columns:
            return
        columns = self._columns.list()
        for row in self._rows:
            row.append(processor(self._row_values(row, columns)))
        self._columns.add(column)

    def _row_values(self, row: list[float], columns: list[str]) -> dict[str, float]:
        values: dict[str, float] = {}
        for column in columns:
            index, _ = self._columns.get_index(column)
            values[column] = row[index]
        return values

    def get_timestamps(self) -> list[datetime]:
        """Return the sorted list of timestamps."""
        return self._timestamps.list()

    def get_columns(self) -> list[str]:
        """Return the sorted list of column names."""
        return self._columns.list()

    def get_values(self, column: str) -> tuple[list[float], bool]:
        """Return the column's value for each timestamp, sorted by timestamp.

        Returns:
            Tuple of (values, found). found is False if the column does not
            exist, in which case values is empty.
        """
        index, found = self._columns.get_index(column)
        if not found:
            return [], False

        values: list[float] = []
        for timestamp in self._timestamps.list():
            row, _ = self._timestamps.get_index(timestamp)
            values.append(self._rows[row][index])
        return values, True

    def filter_by_range(
        self, start: datetime | None = None, end: datetime | None = None
    ) -> None:
        """Remove all rows outside the [start, end] range.

        Both bounds are inclusive. A bound of None is ignored.
        """
        keep: list[datetime] = []
        removed = False
        for timestamp in self._timestamps.list():
            if (start is not None and timestamp < start) or (
                end is not None and timestamp > end
            ):
                removed = True
                continue
            keep.append(timestamp)

        if not removed:
            return

        rows: list[list[float]] = []
        timestamps = make_time_indexer()
        for timestamp in keep:
            index, _ = self._timestamps.get_index(timestamp)
            rows.append(self._rows[index])
            timestamps.add(timestamp)
        self._rows = rows
        self._timestamps = timestamps

    def accumulate(self) -> None:
        """Replace each column's values by their running total over time.

        E.g. values 1, 1, 1, 1 become 1, 2, 3, 4.
        """
        totals = [0.0] * self._columns.count()
        for timestamp in self._timestamps.list():
            index, _ = self._timestamps.get_index(timestamp)
            row = self._rows[index]
            for col, value in enumerate(row):
                totals[col] += value
            row[:] = totals

    def copy(self) -> "Dataset":
        """Return a deep copy of the dataset."""
        clone = Dataset()
        clone._rows = [list(row) for row in self._rows]
        clone._timestamps = self._timestamps.copy()
        clone._columns = self._columns.copy()
        return clone

    def generate_table_response(self) -> TableResponse:
        """Create a TableResponse for the dataset.

        The first column holds the timestamps, followed by one number column
        per dataset column, sorted by name.
        """
        response = TableResponse(
            columns=[Column(text="timestamp", data=TimeColumn(self.get_timestamps()))]
        )
        for column in self.get_columns():
            values, _ = self.get_values(column)
            response.columns.append(
                Column(text=column or UNKNOWN_COLUMN, data=NumberColumn(values))
            )
        return response
