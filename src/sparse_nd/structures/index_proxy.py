from __future__ import annotations
from typing import TYPE_CHECKING, Any, Generic, Tuple, TypeVar, Union

from sparse_nd.structures.errors import ArityMismatchError
from sparse_nd.structures.value_handle import ValueHandle
from sparse_nd.utils.tuple_utils import normalize_component

if TYPE_CHECKING:
    from sparse_nd.structures.sparse_matrix import MatrixView, SparseMatrix

T = TypeVar("T")


class IndexChainProxy(Generic[T]):
    """
    A partially specified coordinate produced by chained indexing.

    `m[i]` on a matrix with more than one dimension returns a proxy holding
    `(i,)` and the number of dimensions still to be supplied. Each further
    `[k]` either appends a component (returning a new proxy) or, on the last
    dimension, completes the coordinate and returns a `ValueHandle`. No
    storage is accessed until that handle is read or assigned.

    Attributes
    ----------
    prefix : Tuple[int, ...]
        The coordinate components supplied so far.
    order : int
        The number of dimensions still missing, always at least 1.
    """
    __slots__ = ("_matrix", "_prefix", "_order")

    def __init__(self, matrix: Union[SparseMatrix[T], MatrixView[T]], prefix: Tuple[int, ...], order: int):
        self._matrix = matrix
        self._prefix = prefix
        self._order = order

    @property
    def prefix(self) -> Tuple[int, ...]:
        return self._prefix

    @property
    def order(self) -> int:
        return self._order

    def index(self, next_index: Any) -> Union["IndexChainProxy[T]", ValueHandle[T]]:
        """
        Supplies the next coordinate component.

        Parameters
        ----------
        next_index : int
            A non-negative integer for the next dimension.

        Returns
        -------
        IndexChainProxy[T] | ValueHandle[T]
            A handle if this completed the coordinate, otherwise a proxy with
            one dimension fewer left to fill.
        """
        component = normalize_component(len(self._prefix), next_index)
        if self._order == 1:
            return self._matrix.at(*self._prefix, component)
        return IndexChainProxy(self._matrix, self._prefix + (component,), self._order - 1)

    def __getitem__(self, next_index: Any) -> Union["IndexChainProxy[T]", ValueHandle[T]]:
        return self.index(next_index)

    def __setitem__(self, next_index: Any, value: Any) -> None:
        self._complete(next_index).assign(value)

    def __delitem__(self, next_index: Any) -> None:
        self._complete(next_index).assign(self._matrix.default)

    def _complete(self, next_index: Any) -> ValueHandle[T]:
        # Writing through a proxy is only possible on the final dimension.
        if self._order != 1:
            raise ArityMismatchError(len(self._prefix) + self._order, len(self._prefix) + 1)
        return self.index(next_index)

    def __repr__(self) -> str:
        return f"IndexChainProxy(prefix={self._prefix}, remaining={self._order})"
