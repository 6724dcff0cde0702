from __future__ import annotations
import logging
from typing import (Any, Callable, Generic, Iterable, Iterator, Mapping, Optional, Sequence, Tuple, TypeVar,
                    Union)

import numpy as np

from sparse_nd.structures.backing_store import MISSING, BackingStore, OrderedBackingStore
from sparse_nd.structures.cell_iterator import CellIterator, CellRecord
from sparse_nd.structures.errors import ArityMismatchError, InvalidCoordinateError
from sparse_nd.structures.index_proxy import IndexChainProxy
from sparse_nd.structures.value_handle import EMPTY, Cell, Present, ValueHandle
from sparse_nd.utils.tuple_utils import normalize_component, normalize_coordinates

logger = logging.getLogger(__name__)

T = TypeVar("T")
Coordinate = Tuple[int, ...]
StoreFactory = Callable[..., BackingStore[Coordinate, T]]


class SparseMatrix(Generic[T]):
    """
    An N-dimensional matrix that stores only cells differing from a default value.

    Every coordinate that was never assigned reads as `default`. Assigning the
    default through a `ValueHandle` (or `m[...] = value`) erases the cell, so
    the backing store never holds a default-valued entry and `size()` is
    exactly the number of "interesting" cells.

    Parameters
    ----------
    default : T
        The value every absent cell reads as.
    dims : int, optional
        The number of coordinate components per cell, by default 2.
    store_type : Callable[..., BackingStore], optional
        Factory for the backing store, by default `OrderedBackingStore`.
    *store_args, **store_kwargs
        Forwarded verbatim to `store_type`, e.g. `capacity=2048` for a
        `HashBackingStore`. Cells a store is seeded with (`entries` of an
        `OrderedBackingStore`) are validated like ordinary writes, and
        default-valued ones are dropped.

    Examples
    --------
    >>> m = SparseMatrix(default=0, dims=3)
    >>> m[0][1][2] = 222
    >>> m.at(0, 1, 2) == 222
    True
    >>> m[0, 1, 2] = 0
    >>> m.size()
    0

    Notes
    -----
    Not thread-safe. Handles, proxies and iterators hold plain references to
    the matrix; iterator validity under mutation is whatever the backing store
    guarantees.
    """
    __slots__ = ("_default", "_dims", "_store", "_store_type", "_store_args", "_store_kwargs")

    def __init__(self, default: T, dims: int = 2, store_type: StoreFactory = OrderedBackingStore,
                 *store_args: Any, **store_kwargs: Any):
        if isinstance(dims, bool) or not isinstance(dims, int) or dims < 1:
            raise ValueError(f"dims must be a positive integer, got {dims!r}")

        store = store_type(*store_args, **store_kwargs)
        if not isinstance(store, BackingStore):
            raise TypeError(f"{type(store).__name__} does not implement the BackingStore interface")

        self._default = default
        self._dims = dims
        self._store = store
        self._store_type = store_type
        self._store_args = store_args
        self._store_kwargs = store_kwargs
        if not store.empty():
            self._admit_seeded_cells()
        logger.debug(f"Created {dims}-D sparse matrix (default={default!r}, store={type(store).__name__})")

    # --- Properties ---
    @property
    def default(self) -> T:
        return self._default

    @property
    def dims(self) -> int:
        return self._dims

    @property
    def store(self) -> BackingStore[Coordinate, T]:
        """The backing store. Writing to it directly bypasses erase-on-default."""
        return self._store

    def _key(self, positions: Tuple[Any, ...]) -> Coordinate:
        return normalize_coordinates(positions, self._dims)

    def _admit_seeded_cells(self) -> None:
        """Re-validates cells the store factory was seeded with; default-valued ones are dropped."""
        seeded = list(self._store)
        self._store.clear()
        for key, value in seeded:
            coords = self._key(tuple(key))
            if not value == self._default:
                self._store.insert_or_overwrite(coords, value)
        logger.debug(f"Admitted {self._store.size()} of {len(seeded)} seeded cell(s)")

    # --- Size ---
    def size(self) -> int:
        """Returns the number of stored (non-default) cells."""
        return self._store.size()

    def empty(self) -> bool:
        return self._store.empty()

    def __len__(self) -> int:
        return self._store.size()

    # --- Indexing ---
    def index(self, i: Any) -> Union[IndexChainProxy[T], ValueHandle[T]]:
        """
        Starts a chained index expression `m[i][j]...`.

        Parameters
        ----------
        i : int
            The first coordinate component.

        Returns
        -------
        IndexChainProxy[T] | ValueHandle[T]
            A handle bound to `(i,)` for a 1-D matrix, otherwise a proxy
            waiting for the remaining `dims - 1` components.
        """
        component = normalize_component(0, i)
        if self._dims == 1:
            return ValueHandle(self, (component,))
        return IndexChainProxy(self, (component,), self._dims - 1)

    def at(self, *pos: Any) -> ValueHandle[T]:
        """
        Returns a handle bound to the full coordinate `pos`.

        Raises
        ------
        ArityMismatchError
            If `len(pos) != dims`.
        InvalidCoordinateError
            If any component is not a non-negative integer.
        """
        return ValueHandle(self, self._key(pos))

    def __getitem__(self, key: Any) -> Union[IndexChainProxy[T], ValueHandle[T]]:
        if isinstance(key, tuple):
            return self.at(*key)
        return self.index(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        self._handle_for_write(key).assign(value)

    def __delitem__(self, key: Any) -> None:
        self._store.erase(self._handle_for_write(key).key)

    def _handle_for_write(self, key: Any) -> ValueHandle[T]:
        if isinstance(key, tuple):
            return self.at(*key)
        if self._dims != 1:
            raise ArityMismatchError(self._dims, 1)
        return self.at(key)

    # --- Primitive cell operations ---
    def set(self, value: T, *pos: Any) -> None:
        """
        Inserts or overwrites the cell at `pos` with `value`, unconditionally.

        This is the low-level primitive: it stores `value` even if it equals
        the default. Use `at(*pos).assign(value)` or `m[pos] = value` to keep
        default-valued cells out of storage.
        """
        self._store.insert_or_overwrite(self._key(pos), value)

    def get_or_default(self, *pos: Any) -> T:
        """Returns the value stored at `pos`, or the default if the cell is absent."""
        value = self._store.find(self._key(pos))
        return self._default if value is MISSING else value

    def lookup(self, *pos: Any) -> Cell:
        """Returns `Present(value)` if `pos` is stored, otherwise `EMPTY`."""
        value = self._store.find(self._key(pos))
        return EMPTY if value is MISSING else Present(value)

    def erase(self, *pos: Any) -> None:
        """Removes the cell at `pos`. Erasing an absent cell is a no-op."""
        self._store.erase(self._key(pos))

    def __contains__(self, pos: Any) -> bool:
        positions = pos if isinstance(pos, tuple) else (pos,)
        try:
            key = self._key(positions)
        except (ArityMismatchError, InvalidCoordinateError):
            return False
        return self._store.find(key) is not MISSING

    # --- Iteration ---
    def begin(self) -> CellIterator[T]:
        return CellIterator(self._store.begin())

    def end(self) -> CellIterator[T]:
        return CellIterator(self._store.end())

    cbegin = begin
    cend = end

    def __iter__(self) -> Iterator[CellRecord]:
        return self.begin()

    def __reversed__(self) -> Iterator[CellRecord]:
        it = self.end()
        first = self.begin()
        while it != first:
            yield it.retreat().deref()

    def items(self) -> Iterator[Tuple[Coordinate, T]]:
        """Yields `(coordinate, value)` pairs in store order."""
        yield from self._store

    def keys(self) -> Iterator[Coordinate]:
        for key, _ in self._store:
            yield key

    def values(self) -> Iterator[T]:
        for _, value in self._store:
            yield value

    # --- Bulk operations ---
    def clear(self) -> None:
        """Removes all stored cells."""
        logger.debug(f"Clearing {self._store.size()} cell(s)")
        self._store.clear()

    def update(self, cells: Union[Mapping[Sequence[int], T], Iterable[Tuple[Sequence[int], T]]]) -> None:
        """
        Assigns many cells at once with erase-on-default semantics.

        Parameters
        ----------
        cells : Mapping | Iterable[Tuple[Sequence[int], T]]
            Coordinates mapped to values, or `(coordinates, value)` pairs.
        """
        pairs = cells.items() if isinstance(cells, Mapping) else cells
        count = 0
        for coords, value in pairs:
            self.at(*coords).assign(value)
            count += 1
        logger.debug(f"Bulk-assigned {count} cell(s); {self.size()} stored")

    def copy(self) -> "SparseMatrix[T]":
        """Returns an independent matrix with the same default, dims, store type and cells."""
        result = SparseMatrix(self._default, self._dims, self._store_type, *self._store_args, **self._store_kwargs)
        result._store.clear()
        for key, value in self._store:
            result._store.insert_or_overwrite(key, value)
        return result

    def view(self) -> "MatrixView[T]":
        """Returns a read-only view that shares this matrix's storage."""
        return MatrixView(self)

    # --- Dense conversion ---
    def bounding_shape(self) -> Coordinate:
        """Returns the smallest shape containing every stored cell (zeros if empty)."""
        shape = [0] * self._dims
        for key in self.keys():
            for axis, component in enumerate(key):
                shape[axis] = max(shape[axis], component + 1)
        return tuple(shape)

    def to_dense(self, shape: Optional[Sequence[int]] = None, dtype: Any = None) -> np.ndarray:
        """
        Materializes the matrix as a dense NumPy array.

        Parameters
        ----------
        shape : Sequence[int] | None, optional
            The array shape. Defaults to `bounding_shape()`.
        dtype : Any, optional
            The array dtype. Inferred from the default and stored values if None.

        Returns
        -------
        np.ndarray
            An array filled with the default, with every stored cell written in.

        Raises
        ------
        ArityMismatchError
            If `len(shape) != dims`.
        IndexError
            If a stored cell lies outside `shape`.
        """
        shape = self.bounding_shape() if shape is None else tuple(shape)
        if len(shape) != self._dims:
            raise ArityMismatchError(self._dims, len(shape))
        if dtype is None:
            dtype = np.asarray([self._default, *self.values()]).dtype

        dense = np.full(shape, self._default, dtype=dtype)
        for key, value in self._store:
            if any(component >= extent for component, extent in zip(key, shape)):
                raise IndexError(f"Cell {key} lies outside shape {shape}")
            dense[key] = value
        logger.debug(f"Materialized {self._store.size()} cell(s) into dense array of shape {shape}")
        return dense

    @classmethod
    def from_dense(cls, array: Any, default: T, store_type: StoreFactory = OrderedBackingStore,
                   *store_args: Any, **store_kwargs: Any) -> "SparseMatrix[T]":
        """
        Builds a sparse matrix from every element of `array` that differs from `default`.

        The dimensionality is taken from `array.ndim`; store arguments are
        forwarded as in the constructor.
        """
        dense = np.asarray(array)
        matrix = cls(default, dense.ndim, store_type, *store_args, **store_kwargs)
        for idx in zip(*np.nonzero(dense != default)):
            element = dense[idx]
            value = element.item() if isinstance(element, np.generic) else element
            matrix._store.insert_or_overwrite(tuple(int(i) for i in idx), value)
        logger.debug(f"Built sparse matrix with {matrix.size()} cell(s) from dense shape {dense.shape}")
        return matrix

    # --- Comparison & display ---
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SparseMatrix):
            return NotImplemented
        return (self._dims == other._dims and self._default == other._default
                and dict(self.items()) == dict(other.items()))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        cells = ", ".join(f"{k}: {v!r}" for k, v in sorted(self.items()))
        return f"SparseMatrix(dims={self._dims}, default={self._default!r}, {{{cells}}})"


class MatrixView(Generic[T]):
    """
    A read-only facade over a `SparseMatrix`.

    Reads, chained indexing and iteration behave exactly as on the matrix and
    reflect its current contents. Handles obtained through the view raise
    `ReadOnlyMatrixError` on assignment.
    """
    __slots__ = ("_matrix",)

    def __init__(self, matrix: SparseMatrix[T]):
        self._matrix = matrix

    @property
    def default(self) -> T:
        return self._matrix.default

    @property
    def dims(self) -> int:
        return self._matrix.dims

    def size(self) -> int:
        return self._matrix.size()

    def empty(self) -> bool:
        return self._matrix.empty()

    def __len__(self) -> int:
        return self._matrix.size()

    def index(self, i: Any) -> Union[IndexChainProxy[T], ValueHandle[T]]:
        component = normalize_component(0, i)
        if self._matrix.dims == 1:
            return ValueHandle(self, (component,), writable=False)
        return IndexChainProxy(self, (component,), self._matrix.dims - 1)

    def at(self, *pos: Any) -> ValueHandle[T]:
        return ValueHandle(self, self._matrix._key(pos), writable=False)

    def __getitem__(self, key: Any) -> Union[IndexChainProxy[T], ValueHandle[T]]:
        if isinstance(key, tuple):
            return self.at(*key)
        return self.index(key)

    def get_or_default(self, *pos: Any) -> T:
        return self._matrix.get_or_default(*pos)

    def lookup(self, *pos: Any) -> Cell:
        return self._matrix.lookup(*pos)

    def __contains__(self, pos: Any) -> bool:
        return pos in self._matrix

    def begin(self) -> CellIterator[T]:
        return self._matrix.begin()

    def end(self) -> CellIterator[T]:
        return self._matrix.end()

    cbegin = begin
    cend = end

    def __iter__(self) -> Iterator[CellRecord]:
        return iter(self._matrix)

    def __reversed__(self) -> Iterator[CellRecord]:
        return reversed(self._matrix)

    def items(self) -> Iterator[Tuple[Coordinate, T]]:
        return self._matrix.items()

    def to_dense(self, shape: Optional[Sequence[int]] = None, dtype: Any = None) -> np.ndarray:
        return self._matrix.to_dense(shape, dtype)

    def __repr__(self) -> str:
        return f"MatrixView({self._matrix!r})"
