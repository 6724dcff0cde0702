from sparse_nd.structures.backing_store import (MISSING, BackingStore, HashBackingStore, OrderedBackingStore,
                                                StoreCursor)
from sparse_nd.structures.cell_iterator import CellIterator, CellRecord
from sparse_nd.structures.errors import (ArityMismatchError, InvalidCoordinateError, IteratorRangeError,
                                         ReadOnlyMatrixError, SparseMatrixError, StaleIteratorError)
from sparse_nd.structures.index_proxy import IndexChainProxy
from sparse_nd.structures.sparse_matrix import MatrixView, SparseMatrix
from sparse_nd.structures.value_handle import EMPTY, Present, ValueHandle

__all__ = [
    "SparseMatrix",
    "MatrixView",
    "IndexChainProxy",
    "ValueHandle",
    "Present",
    "EMPTY",
    "CellIterator",
    "CellRecord",
    "BackingStore",
    "StoreCursor",
    "OrderedBackingStore",
    "HashBackingStore",
    "MISSING",
    "SparseMatrixError",
    "ArityMismatchError",
    "InvalidCoordinateError",
    "StaleIteratorError",
    "IteratorRangeError",
    "ReadOnlyMatrixError",
]
