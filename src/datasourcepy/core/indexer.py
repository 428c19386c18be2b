"""Ordered set of unique values with stable insertion-assigned indices."""

from datetime import datetime
from typing import Any, Generic, Protocol, TypeVar


class _Comparable(Protocol):
    def __lt__(self, other: Any, /) -> bool: ...


T = TypeVar("T", bound=_Comparable)


class Indexer(Generic[T]):
    """Holds a unique set of values and records the order in which they were added.

    Each value is assigned the next free integer when it is first added. That
    index never changes, even after list() sorts the values for presentation,
    so callers can use it to address rows or columns in a matrix.

    Typical key types are datetime (rows) and str (columns). Datetimes are
    compared by instant, so two aware datetimes for the same moment in
    different time zones are the same key.

    Example:
        ```python
        idx: Indexer[str] = Indexer()
        idx.add("b")   # (0, True)
        idx.add("a")   # (1, True)
        idx.list()     # ["a", "b"]
        idx.get_index("b")  # (0, True)
        ```
    """

    def __init__(self) -> None:
        self._values: list[T] = []
        self._indices: dict[T, int] = {}
        self._in_order = True

    def add(self, value: T) -> tuple[int, bool]:
        """Add a value.

        Returns:
            Tuple of (index, added). If the value was already present, its
            existing index is returned and added is False.
        """
        index = self._indices.get(value)
        if index is not None:
            return index, False

        index = len(self._values)
        self._indices[value] = index
        if self._in_order and index > 0:
            self._in_order = not value < self._values[index - 1]
        self._values.append(value)
        return index, True

    def get_index(self, value: T) -> tuple[int, bool]:
        """Return (index, found) for a value. Does not sort."""
        index = self._indices.get(value)
        if index is None:
            return 0, False
        return index, True

    def count(self) -> int:
        """Return the number of values in the indexer."""
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._indices

    def list(self) -> list[T]:
        """Return the values, sorted ascending.

        The values are only sorted if something was added out of order since
        the last call. Indices returned by get_index() are unaffected.
        """
        if not self._in_order:
            self._values.sort()
            self._in_order = True
        return list(self._values)

    def copy(self) -> "Indexer[T]":
        """Return an independent copy of the indexer.

        The copy does not trust the source's order flag and sorts on its
        first list() call.
        """
        clone: Indexer[T] = Indexer()
        clone._values = list(self._values)
        clone._indices = dict(self._indices)
        clone._in_order = False
        return clone

    def __repr__(self) -> str:
        return f"Indexer({self._values!r})"


def make_time_indexer() -> Indexer[datetime]:
    """Return an empty indexer for row timestamps."""
    return Indexer()


def make_string_indexer() -> Indexer[str]:
    """Return an empty indexer for column names."""
    return Indexer()
