"""
Unit tests for `ValueHandle`, the deferred accessor returned by full indexing.

A handle is only a `(matrix, coordinate)` pair: it caches nothing, so every
read reflects the latest matrix state, and every write goes through the
default-aware assignment path.
"""
import copy

import pytest

from sparse_nd.structures import EMPTY, Present, ReadOnlyMatrixError, SparseMatrix, ValueHandle

DEFAULT_VALUE = 42


@pytest.fixture
def matrix():
    return SparseMatrix(DEFAULT_VALUE, 2)


def test_read_absent_then_assign(matrix):
    """A handle on an absent cell reads the default; assigning stores the value."""
    handle = matrix[0][0]
    assert handle == DEFAULT_VALUE
    assert matrix.size() == 0

    handle.assign(1)
    assert handle == 1
    assert handle.get() == 1
    assert matrix.size() == 1


def test_assigning_default_erases(matrix):
    """Assigning the default value through a handle removes the stored cell."""
    matrix[0][0] = 1
    handle = matrix[0][0]
    assert handle == 1

    handle.assign(DEFAULT_VALUE)
    assert handle == DEFAULT_VALUE
    assert matrix.size() == 0


def test_handles_on_same_coordinate_alias(matrix):
    """Writes through one handle are visible through another on the same cell."""
    matrix[0][0] = 2
    first_ref = matrix[0][0]
    second_ref = matrix.at(0, 0)

    first_ref.assign(4)
    assert second_ref == 4

    second_ref.value = 5
    assert first_ref.value == 5


def test_handle_does_not_cache(matrix):
    """A handle created before a direct `set` observes the new value."""
    handle = matrix.at(3, 3)
    matrix.set(7, 3, 3)
    assert handle == 7
    matrix.erase(3, 3)
    assert handle == DEFAULT_VALUE


def test_conversions(matrix):
    """Handles convert to the element value on demand."""
    matrix[1, 1] = 3
    handle = matrix[1][1]
    assert int(handle) == 3
    assert float(handle) == 3.0
    assert bool(handle) is True
    assert int(matrix[0][0]) == DEFAULT_VALUE


def test_assigning_handle_copies_value_not_binding(matrix):
    """Assigning one handle to another copies its current value only."""
    source = matrix[0][1]
    source.assign(0)

    target = matrix[0][0]
    target.assign(source)
    assert target == 0
    assert matrix.size() == 2

    # Later changes to the source do not propagate to the target.
    source.assign(9)
    assert target == 0


def test_copying_a_handle_copies_the_binding(matrix):
    """A shallow copy is bound to the same cell and sees the same value."""
    handle = matrix.at(2, 2)
    duplicate = copy.copy(handle)
    assert duplicate is not handle
    assert duplicate.key == handle.key == (2, 2)
    assert duplicate.matrix is matrix

    handle.assign(8)
    assert duplicate == 8


def test_handles_compare_by_value(matrix):
    """Two handles are equal when the cells they address hold equal values."""
    matrix[0, 0] = 5
    matrix[1, 1] = 5
    assert matrix[0, 0] == matrix[1, 1]
    assert matrix[0, 0] != matrix[2, 2]


def test_handles_are_unhashable(matrix):
    """Handles compare by value, so they cannot be dictionary keys."""
    with pytest.raises(TypeError):
        hash(matrix.at(0, 0))


def test_lookup_returns_present_or_empty(matrix):
    """`lookup` distinguishes a stored cell from an absent one."""
    handle = matrix.at(4, 5)
    assert handle.lookup() is EMPTY
    assert not handle.is_set

    handle.assign(6)
    assert handle.lookup() == Present(6)
    assert handle.is_set


def test_max_with_handle_values(matrix):
    """Handle values work with ordinary Python built-ins."""
    matrix[0, 0] = 1
    matrix[0, 1] = 2
    handles = [matrix.at(0, 0), matrix.at(0, 1), matrix.at(0, 2)]
    assert max(h.get() for h in handles) == DEFAULT_VALUE


def test_view_handles_are_read_only(matrix):
    """Handles obtained through a read-only view refuse assignment."""
    matrix[0, 0] = 1
    view = matrix.view()

    handle = view[0][0]
    assert isinstance(handle, ValueHandle)
    assert handle == 1
    assert not handle.writable

    with pytest.raises(ReadOnlyMatrixError):
        handle.assign(2)
    with pytest.raises(TypeError):
        view[0][0] = 2
    assert matrix[0, 0] == 1


def test_view_reflects_later_writes(matrix):
    """A view shares storage with its matrix."""
    view = matrix.view()
    assert view.at(1, 1) == DEFAULT_VALUE
    matrix[1, 1] = 3
    assert view.at(1, 1) == 3
    assert view.size() == 1
    assert list(view) == [(1, 1, 3)]


def test_repr_shows_key_and_value(matrix):
    matrix[0, 1] = 7
    assert repr(matrix.at(0, 1)) == "ValueHandle(key=(0, 1), value=7)"
