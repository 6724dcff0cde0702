from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, Tuple, TypeVar, Union

from sparse_nd.structures.errors import ReadOnlyMatrixError

if TYPE_CHECKING:
    from sparse_nd.structures.sparse_matrix import MatrixView, SparseMatrix

T = TypeVar("T")
Coordinate = Tuple[int, ...]


@dataclass(frozen=True, slots=True)
class Present(Generic[T]):
    """A cell that holds a stored, non-default value."""
    value: T


class _EmptyCell(Enum):
    """A cell with no stored entry; reads resolve to the matrix default."""
    EMPTY = "EMPTY"

    def __repr__(self) -> str:
        return "EMPTY"


EMPTY = _EmptyCell.EMPTY

Cell = Union[Present[T], _EmptyCell]


class ValueHandle(Generic[T]):
    """
    A deferred accessor bound to one full coordinate of a sparse matrix.

    Creating a handle touches no storage. Every read goes to the matrix
    (`get_or_default`) and every write goes through `assign`, which erases the
    cell instead of storing the default value. Handles cache nothing, so two
    handles on the same coordinate always observe each other's writes.

    Parameters
    ----------
    matrix : SparseMatrix[T] | MatrixView[T]
        The matrix the handle reads from and writes to. Not owned.
    key : Tuple[int, ...]
        The already-validated coordinate.
    writable : bool, optional
        False for handles obtained from a read-only `MatrixView`.

    Examples
    --------
    >>> m = SparseMatrix(default=0, dims=2)
    >>> cell = m.at(1, 2)
    >>> _ = cell.assign(5)
    >>> cell == 5
    True
    >>> _ = cell.assign(0)  # erases (1, 2)
    >>> m.size()
    0
    """
    __slots__ = ("_matrix", "_key", "_writable")

    def __init__(self, matrix: Union[SparseMatrix[T], MatrixView[T]], key: Coordinate, writable: bool = True):
        self._matrix = matrix
        self._key = key
        self._writable = writable

    @property
    def matrix(self) -> Union[SparseMatrix[T], MatrixView[T]]:
        return self._matrix

    @property
    def key(self) -> Coordinate:
        return self._key

    @property
    def writable(self) -> bool:
        return self._writable

    def get(self) -> T:
        """Returns the stored value, or the matrix default if the cell is absent."""
        return self._matrix.get_or_default(*self._key)

    def lookup(self) -> Cell:
        """
        Reads the cell as a sum type.

        Returns
        -------
        Present[T] | EMPTY
            `Present(value)` if the cell is stored, otherwise `EMPTY`.
        """
        return self._matrix.lookup(*self._key)

    @property
    def is_set(self) -> bool:
        """True if the cell currently has a stored entry."""
        return self._matrix.lookup(*self._key) is not EMPTY

    def assign(self, value: Union[T, "ValueHandle[T]"]) -> "ValueHandle[T]":
        """
        Writes `value` to the bound cell, erasing it if `value` equals the default.

        Assigning another handle copies that handle's current value; no live
        binding between the two cells is created.

        Parameters
        ----------
        value : T | ValueHandle[T]
            The new value, or a handle to read it from.

        Returns
        -------
        ValueHandle[T]
            This handle, to allow chained reads.

        Raises
        ------
        ReadOnlyMatrixError
            If the handle came from a read-only view.
        """
        if not self._writable:
            raise ReadOnlyMatrixError(self._key)
        if isinstance(value, ValueHandle):
            value = value.get()
        if value == self._matrix.default:
            self._matrix.erase(*self._key)
        else:
            self._matrix.set(value, *self._key)
        return self

    @property
    def value(self) -> T:
        return self.get()

    @value.setter
    def value(self, new_value: T) -> None:
        self.assign(new_value)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ValueHandle):
            other = other.get()
        return self.get() == other

    def __ne__(self, other: Any) -> bool:
        return not self.__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __int__(self) -> int:
        return int(self.get())

    def __float__(self) -> float:
        return float(self.get())

    def __bool__(self) -> bool:
        return bool(self.get())

    def __copy__(self) -> "ValueHandle[T]":
        return ValueHandle(self._matrix, self._key, self._writable)

    def __repr__(self) -> str:
        return f"ValueHandle(key={self._key}, value={self.get()!r})"
