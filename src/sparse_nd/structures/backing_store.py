"""
Associative containers the sparse matrix can store its cells in.

A backing store maps coordinate keys to element values and offers a
bidirectional cursor over its entries. Two stores are provided:

- `OrderedBackingStore` keeps keys in lexicographic order, like a tree map.
  Its cursors address a key, so they stay valid across inserts and erases of
  other keys. Erasing the addressed key invalidates the cursor.
- `HashBackingStore` hashes keys with `tuple_hash` and traverses them in
  insertion order. Any structural change (inserting a new key, erasing,
  clearing) invalidates every outstanding cursor, mirroring a rehash.

Using an invalidated cursor raises `StaleIteratorError`.
"""
from __future__ import annotations
from bisect import bisect_left, bisect_right, insort
from enum import Enum
from typing import (Any, Callable, Dict, Generic, Hashable, Iterable, Iterator, List, Mapping, Optional, Protocol,
                    Tuple, TypeVar, Union, runtime_checkable)

from sparse_nd.structures.errors import IteratorRangeError, StaleIteratorError
from sparse_nd.utils.tuple_utils import tuple_hash

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class _Missing(Enum):
    """Sentinel returned by `find` for absent keys."""
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing.MISSING


class _End(Enum):
    END = "END"


_END = _End.END


class StoreCursor(Protocol[K, V]):
    """A bidirectional position inside a backing store."""

    @property
    def at_end(self) -> bool: ...

    def advance(self) -> None: ...

    def retreat(self) -> None: ...

    def entry(self) -> Tuple[K, V]: ...

    def copy(self) -> "StoreCursor[K, V]": ...


@runtime_checkable
class BackingStore(Protocol[K, V]):
    """
    Capability set a sparse matrix requires from its storage.

    Any container exposing these methods can back a `SparseMatrix`; the
    matrix never touches the store through anything else.
    """

    def insert_or_overwrite(self, key: K, value: V) -> None: ...

    def find(self, key: K) -> Union[V, _Missing]: ...

    def erase(self, key: K) -> bool: ...

    def size(self) -> int: ...

    def empty(self) -> bool: ...

    def clear(self) -> None: ...

    def begin(self) -> StoreCursor[K, V]: ...

    def end(self) -> StoreCursor[K, V]: ...

    def __iter__(self) -> Iterator[Tuple[K, V]]: ...

    def __len__(self) -> int: ...


# ---------------------------------------------------------------------------
# Ordered store
# ---------------------------------------------------------------------------
class OrderedBackingStore(Generic[K, V]):
    """
    A key-ordered store built on a sorted key list plus a dictionary.

    Lookups go through the dictionary; the sorted list gives ordered,
    bidirectional traversal. Keys must be mutually comparable (coordinate
    tuples compare lexicographically, i.e. in row-major order).

    Inserting a new key is a `bisect.insort` into a Python list, so it costs
    O(n) in the number of stored cells and filling n cells costs O(n^2).
    Prefer `HashBackingStore` for large fills where key order is not needed.

    Parameters
    ----------
    entries : Mapping[K, V] | Iterable[Tuple[K, V]] | None, optional
        Initial contents, inserted in any order.
    """
    __slots__ = ("_keys", "_data")

    def __init__(self, entries: Optional[Union[Mapping[K, V], Iterable[Tuple[K, V]]]] = None):
        self._keys: List[K] = []
        self._data: Dict[K, V] = {}
        if entries is not None:
            pairs = entries.items() if isinstance(entries, Mapping) else entries
            for key, value in pairs:
                self.insert_or_overwrite(key, value)

    def insert_or_overwrite(self, key: K, value: V) -> None:
        if key not in self._data:
            insort(self._keys, key)
        self._data[key] = value

    def find(self, key: K) -> Union[V, _Missing]:
        return self._data.get(key, MISSING)

    def erase(self, key: K) -> bool:
        if key not in self._data:
            return False
        del self._data[key]
        del self._keys[bisect_left(self._keys, key)]
        return True

    def size(self) -> int:
        return len(self._data)

    def empty(self) -> bool:
        return not self._data

    def clear(self) -> None:
        self._keys.clear()
        self._data.clear()

    def begin(self) -> "OrderedCursor[K, V]":
        return OrderedCursor(self, self._keys[0] if self._keys else _END)

    def end(self) -> "OrderedCursor[K, V]":
        return OrderedCursor(self, _END)

    def __iter__(self) -> Iterator[Tuple[K, V]]:
        # Resume after the last yielded key, so erasing or inserting cells
        # mid-traversal neither skips nor repeats the remaining entries.
        if not self._keys:
            return
        key = self._keys[0]
        while True:
            yield key, self._data[key]
            idx = bisect_right(self._keys, key)
            if idx == len(self._keys):
                return
            key = self._keys[idx]

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"OrderedBackingStore(size={len(self._data)})"


class OrderedCursor(Generic[K, V]):
    """Cursor into an `OrderedBackingStore`, addressing one key (or the end position)."""
    __slots__ = ("_store", "_key")

    def __init__(self, store: OrderedBackingStore[K, V], key: Union[K, _End]):
        self._store = store
        self._key = key

    @property
    def at_end(self) -> bool:
        return self._key is _END

    def _check_valid(self) -> None:
        if self._key is not _END and self._key not in self._store._data:
            raise StaleIteratorError("OrderedBackingStore", f"key {self._key!r} was erased")

    def advance(self) -> None:
        if self._key is _END:
            raise IteratorRangeError("advance past end()")
        self._check_valid()
        keys = self._store._keys
        idx = bisect_right(keys, self._key)
        self._key = keys[idx] if idx < len(keys) else _END

    def retreat(self) -> None:
        self._check_valid()
        keys = self._store._keys
        idx = len(keys) if self._key is _END else bisect_left(keys, self._key)
        if idx == 0:
            raise IteratorRangeError("retreat before begin()")
        self._key = keys[idx - 1]

    def entry(self) -> Tuple[K, V]:
        if self._key is _END:
            raise IteratorRangeError("dereference end()")
        self._check_valid()
        return self._key, self._store._data[self._key]

    def copy(self) -> "OrderedCursor[K, V]":
        return OrderedCursor(self._store, self._key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderedCursor):
            return NotImplemented
        return self._store is other._store and self._key == other._key

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"OrderedCursor({'end' if self._key is _END else self._key!r})"


# ---------------------------------------------------------------------------
# Hash store
# ---------------------------------------------------------------------------
class _HashedKey:
    """Wraps a key so the dictionary uses the store's hasher instead of `hash()`."""
    __slots__ = ("key", "_hash")

    def __init__(self, key: Any, hasher: Callable[[Any], int]):
        self.key = key
        self._hash = hasher(key)

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _HashedKey):
            return NotImplemented
        return self.key == other.key


class HashBackingStore(Generic[K, V]):
    """
    A hash-map store keyed through a configurable tuple hasher.

    Parameters
    ----------
    capacity : int | None, optional
        Expected number of entries. Python dictionaries size themselves, so
        this is kept as a hint and reported by `capacity`.
    hasher : Callable[[K], int], optional
        Hash function applied to every key, by default `tuple_hash`.

    Notes
    -----
    Traversal follows insertion order. The key order list used by cursors is
    rebuilt lazily after each structural change.
    """
    __slots__ = ("_data", "_hasher", "_capacity", "_version", "_order", "_order_version")

    def __init__(self, capacity: Optional[int] = None, hasher: Callable[[K], int] = tuple_hash):
        if capacity is not None and (isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0):
            raise ValueError(f"capacity must be a non-negative integer, got {capacity!r}")
        self._data: Dict[_HashedKey, V] = {}
        self._hasher = hasher
        self._capacity = capacity
        self._version = 0
        self._order: List[_HashedKey] = []
        self._order_version = 0

    @property
    def capacity(self) -> Optional[int]:
        """The preallocation hint given at construction."""
        return self._capacity

    @property
    def hasher(self) -> Callable[[K], int]:
        return self._hasher

    def _wrap(self, key: K) -> _HashedKey:
        return _HashedKey(key, self._hasher)

    def _ordered_keys(self) -> List[_HashedKey]:
        if self._order_version != self._version:
            self._order = list(self._data)
            self._order_version = self._version
        return self._order

    def insert_or_overwrite(self, key: K, value: V) -> None:
        hashed = self._wrap(key)
        if hashed not in self._data:
            self._version += 1
        self._data[hashed] = value

    def find(self, key: K) -> Union[V, _Missing]:
        return self._data.get(self._wrap(key), MISSING)

    def erase(self, key: K) -> bool:
        hashed = self._wrap(key)
        if hashed not in self._data:
            return False
        del self._data[hashed]
        self._version += 1
        return True

    def size(self) -> int:
        return len(self._data)

    def empty(self) -> bool:
        return not self._data

    def clear(self) -> None:
        self._data.clear()
        self._version += 1

    def begin(self) -> "HashCursor[K, V]":
        return HashCursor(self, 0)

    def end(self) -> "HashCursor[K, V]":
        return HashCursor(self, len(self._data))

    def __iter__(self) -> Iterator[Tuple[K, V]]:
        for hashed, value in self._data.items():
            yield hashed.key, value

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"HashBackingStore(size={len(self._data)}, capacity={self._capacity})"


class HashCursor(Generic[K, V]):
    """Cursor into a `HashBackingStore`, addressing a position in insertion order."""
    __slots__ = ("_store", "_index", "_version")

    def __init__(self, store: HashBackingStore[K, V], index: int, version: Optional[int] = None):
        self._store = store
        self._index = index
        self._version = store._version if version is None else version

    @property
    def at_end(self) -> bool:
        self._check_valid()
        return self._index >= len(self._store._data)

    def _check_valid(self) -> None:
        if self._version != self._store._version:
            raise StaleIteratorError("HashBackingStore", "the store was structurally modified")

    def advance(self) -> None:
        self._check_valid()
        if self._index >= len(self._store._data):
            raise IteratorRangeError("advance past end()")
        self._index += 1

    def retreat(self) -> None:
        self._check_valid()
        if self._index == 0:
            raise IteratorRangeError("retreat before begin()")
        self._index -= 1

    def entry(self) -> Tuple[K, V]:
        self._check_valid()
        keys = self._store._ordered_keys()
        if self._index >= len(keys):
            raise IteratorRangeError("dereference end()")
        hashed = keys[self._index]
        return hashed.key, self._store._data[hashed]

    def copy(self) -> "HashCursor[K, V]":
        return HashCursor(self._store, self._index, self._version)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashCursor):
            return NotImplemented
        return (self._store is other._store and self._version == other._version
                and self._index == other._index)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"HashCursor(index={self._index})"
