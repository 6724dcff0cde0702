from __future__ import annotations
from typing import Any, Generic, Iterator, Tuple, TypeVar

from sparse_nd.structures.backing_store import StoreCursor

T = TypeVar("T")


class CellRecord(tuple):
    """
    A flattened `(coord_0, ..., coord_{N-1}, value)` record for one stored cell.

    Unpacks like a plain tuple (`for x, y, value in matrix`) and also exposes
    `coords` and `value`.
    """
    __slots__ = ()

    def __new__(cls, key: Tuple[int, ...], value: Any) -> "CellRecord":
        return super().__new__(cls, (*key, value))

    @property
    def coords(self) -> Tuple[int, ...]:
        return tuple(self[:-1])

    @property
    def value(self) -> Any:
        return self[-1]


class CellIterator(Generic[T]):
    """
    Read-only bidirectional iterator over the stored cells of a matrix.

    Wraps one backing-store cursor and projects each `(key, value)` entry into
    a `CellRecord`. Two iterators are equal when their store positions are
    equal. The iterator is also a Python iterator: `next()` returns the record
    at the current position and steps forward, stopping at the end.

    Validity follows the backing store: see `OrderedBackingStore` and
    `HashBackingStore` for which mutations invalidate a live cursor.
    """
    __slots__ = ("_cursor",)

    def __init__(self, cursor: StoreCursor[Tuple[int, ...], T]):
        self._cursor = cursor

    def base(self) -> StoreCursor[Tuple[int, ...], T]:
        """Returns the wrapped backing-store cursor."""
        return self._cursor

    @property
    def at_end(self) -> bool:
        return self._cursor.at_end

    def advance(self) -> "CellIterator[T]":
        """Steps to the next entry in store order."""
        self._cursor.advance()
        return self

    def retreat(self) -> "CellIterator[T]":
        """Steps to the previous entry in store order."""
        self._cursor.retreat()
        return self

    def deref(self) -> CellRecord:
        key, value = self._cursor.entry()
        return CellRecord(key, value)

    @property
    def key(self) -> Tuple[int, ...]:
        return self._cursor.entry()[0]

    @property
    def value(self) -> T:
        return self._cursor.entry()[1]

    def copy(self) -> "CellIterator[T]":
        return CellIterator(self._cursor.copy())

    def __iter__(self) -> Iterator[CellRecord]:
        return self

    def __next__(self) -> CellRecord:
        if self._cursor.at_end:
            raise StopIteration
        record = self.deref()
        self._cursor.advance()
        return record

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CellIterator):
            return NotImplemented
        return self._cursor == other._cursor

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"CellIterator({self._cursor!r})"
