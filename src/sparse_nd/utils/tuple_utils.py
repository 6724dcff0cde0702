from __future__ import annotations
import operator
from typing import Any, Iterable, Tuple

from sparse_nd.structures.errors import ArityMismatchError, InvalidCoordinateError

HASH_MASK = (1 << 64) - 1
GOLDEN_RATIO = 0x9E3779B9


def tuple_n(elem_type: Any, n: int) -> Any:
    """
    Builds the homogeneous tuple type `Tuple[elem_type, ..., elem_type]` of size `n`.

    Parameters
    ----------
    elem_type : Any
        The element type repeated in every position.
    n : int
        The number of positions. Must be at least 1.

    Returns
    -------
    Any
        The parameterized `typing.Tuple` alias, e.g. `Tuple[int, int, int]` for `n = 3`.

    Raises
    ------
    ValueError
        If `n` is smaller than 1.
    """
    if n < 1:
        raise ValueError(f"Tuple size must be at least 1, got {n}")
    return Tuple[(elem_type,) * n]


def tuple_hash(key: Iterable[Any], seed: int = 0) -> int:
    """
    Hashes a tuple of arbitrary arity with an order-sensitive combine.

    Each element hash is folded into a running seed using the
    `seed ^= h + 0x9e3779b9 + (seed << 6) + (seed >> 2)` mix, kept to 64 bits.
    Unlike a plain XOR of element hashes, swapping two components changes the
    result and repeated components do not cancel out.

    Parameters
    ----------
    key : Iterable[Any]
        The hashable components, in dimension order.
    seed : int, optional
        Starting value of the running hash, by default 0.

    Returns
    -------
    int
        A non-negative 64-bit hash value.
    """
    for component in key:
        element_hash = hash(component) & HASH_MASK
        seed ^= (element_hash + GOLDEN_RATIO + (seed << 6) + (seed >> 2)) & HASH_MASK
    return seed & HASH_MASK


def normalize_coordinates(positions: Tuple[Any, ...], dims: int) -> Tuple[int, ...]:
    """
    Validates raw coordinate components and converts them to a plain `tuple[int, ...]`.

    Parameters
    ----------
    positions : Tuple[Any, ...]
        The coordinate components as supplied by the caller.
    dims : int
        The dimensionality the coordinate must have.

    Returns
    -------
    Tuple[int, ...]
        The coordinate key.

    Raises
    ------
    ArityMismatchError
        If `len(positions) != dims`.
    InvalidCoordinateError
        If a component is not an integer (bools and floats are rejected) or is negative.
    """
    if len(positions) != dims:
        raise ArityMismatchError(dims, len(positions))
    return tuple(normalize_component(position, component) for position, component in enumerate(positions))


def normalize_component(position: int, component: Any) -> int:
    """Converts a single coordinate component to a non-negative `int`."""
    if isinstance(component, bool):
        raise InvalidCoordinateError(position, component)
    try:
        value = operator.index(component)
    except TypeError:
        raise InvalidCoordinateError(position, component) from None
    if value < 0:
        raise InvalidCoordinateError(position, component)
    return value
