"""
Unit tests for `IndexChainProxy`, the cursor behind `m[i][j]...[k]`.

Chained indexing must address exactly the same cells as direct
full-coordinate access for any dimensionality, without touching storage until
the final handle is used.
"""
import itertools

import pytest

from sparse_nd.structures import (
    ArityMismatchError,
    HashBackingStore,
    IndexChainProxy,
    InvalidCoordinateError,
    SparseMatrix,
    ValueHandle,
)


def test_partial_index_returns_proxy_with_remaining_order():
    """Each partial index step appends a component and decrements the remaining order."""
    matrix = SparseMatrix(0, 4)

    first = matrix[1]
    assert isinstance(first, IndexChainProxy)
    assert first.prefix == (1,)
    assert first.order == 3

    second = first[2]
    assert second.prefix == (1, 2)
    assert second.order == 2

    handle = second[3][4]
    assert isinstance(handle, ValueHandle)
    assert handle.key == (1, 2, 3, 4)


def test_proxy_construction_does_not_touch_storage():
    """Building proxies and handles never inserts anything."""
    matrix = SparseMatrix(0, 3)
    _ = matrix[5][6][7]
    _ = matrix.index(1).index(2)
    assert matrix.size() == 0


@pytest.mark.parametrize("dims", [2, 3])
def test_chained_and_direct_access_agree(dims):
    """Writes through the chain are read back by `at` and vice versa."""
    matrix = SparseMatrix(0, dims, HashBackingStore)

    for value, coords in enumerate(itertools.product(range(3), repeat=dims), start=1):
        proxy = matrix
        for component in coords[:-1]:
            proxy = proxy[component]
        proxy[coords[-1]] = value
        assert matrix.at(*coords) == value

    for coords in itertools.product(range(3), repeat=dims):
        chained = matrix
        for component in coords:
            chained = chained[component]
        assert chained == matrix.get_or_default(*coords)

    assert matrix.size() == 3 ** dims


def test_setitem_on_last_dimension_applies_erase_on_default():
    """`m[i][j] = default` erases just like a handle assignment."""
    matrix = SparseMatrix(-1, 2)
    matrix[0][1] = 5
    assert matrix.size() == 1
    matrix[0][1] = -1
    assert matrix.size() == 0


def test_delitem_on_last_dimension_erases():
    matrix = SparseMatrix(0, 3)
    matrix[1][2][3] = 4
    del matrix[1][2][3]
    assert matrix.empty()


def test_setitem_before_last_dimension_is_arity_error():
    """Assigning through a proxy that still misses dimensions is rejected."""
    matrix = SparseMatrix(0, 3)
    with pytest.raises(ArityMismatchError) as excinfo:
        matrix[0][1] = 5
    assert excinfo.value.expected == 3
    assert excinfo.value.received == 2
    assert matrix.size() == 0


def test_invalid_component_fails_at_offending_step():
    """A bad component is reported when it is supplied, not when the handle is used."""
    matrix = SparseMatrix(0, 3)
    proxy = matrix[0]
    with pytest.raises(InvalidCoordinateError) as excinfo:
        proxy[-2]
    assert excinfo.value.position == 1

    with pytest.raises(InvalidCoordinateError):
        matrix["a"]


def test_view_proxy_returns_read_only_handle():
    """Chaining through a view yields read-only handles."""
    matrix = SparseMatrix(0, 3)
    matrix[0][0][1] = 3
    handle = matrix.view()[0][0][1]
    assert handle == 3
    assert not handle.writable


def test_repr_shows_prefix_and_remaining():
    matrix = SparseMatrix(0, 3)
    assert repr(matrix[4]) == "IndexChainProxy(prefix=(4,), remaining=2)"
