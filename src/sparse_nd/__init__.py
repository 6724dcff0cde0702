"""
Sparse N-dimensional matrices with a fixed default value.

Only cells that differ from the default are stored; assigning the default
erases a cell, and reading an absent cell yields the default.
"""

__version__ = "0.1.0"

from sparse_nd.structures import (EMPTY, ArityMismatchError, HashBackingStore, InvalidCoordinateError,
                                  MatrixView, OrderedBackingStore, Present, ReadOnlyMatrixError, SparseMatrix,
                                  SparseMatrixError, StaleIteratorError, ValueHandle)
from sparse_nd.utils.tuple_utils import tuple_hash, tuple_n

__all__ = [
    "SparseMatrix",
    "MatrixView",
    "ValueHandle",
    "Present",
    "EMPTY",
    "OrderedBackingStore",
    "HashBackingStore",
    "SparseMatrixError",
    "ArityMismatchError",
    "InvalidCoordinateError",
    "StaleIteratorError",
    "ReadOnlyMatrixError",
    "tuple_hash",
    "tuple_n",
]
