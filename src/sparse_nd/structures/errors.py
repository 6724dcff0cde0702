from __future__ import annotations
from typing import Any, Tuple


class SparseMatrixError(Exception):
    """Base class for sparse matrix contract violations."""
    pass


class ArityMismatchError(SparseMatrixError, ValueError):
    """Raised when the number of coordinate components does not match the matrix dimensionality."""

    def __init__(self, expected: int, received: int):
        self.expected = expected
        self.received = received
        message = f"Expected {expected} coordinate component(s), got {received}"
        super().__init__(message)


class InvalidCoordinateError(SparseMatrixError, IndexError):
    """Raised when a coordinate component is not a non-negative integer."""

    def __init__(self, position: int, component: Any):
        self.position = position
        self.component = component
        message = (
            f"Coordinate component {position} must be a non-negative integer, "
            f"got {component!r}"
        )
        super().__init__(message)


class StaleIteratorError(SparseMatrixError, RuntimeError):
    """Raised when a cursor is used after the backing store invalidated it."""

    def __init__(self, store_name: str, reason: str):
        self.store_name = store_name
        self.reason = reason
        message = f"{store_name} cursor is no longer valid: {reason}"
        super().__init__(message)


class IteratorRangeError(SparseMatrixError, IndexError):
    """Raised when a cursor is stepped past end() or before begin(), or end() is dereferenced."""

    def __init__(self, operation: str):
        self.operation = operation
        message = f"Cannot {operation}: cursor is outside the stored range"
        super().__init__(message)


class ReadOnlyMatrixError(SparseMatrixError, TypeError):
    """Raised when a write is attempted through a read-only matrix view."""

    def __init__(self, key: Tuple[int, ...]):
        self.key = key
        message = f"Cannot assign cell {key}: matrix view is read-only"
        super().__init__(message)
