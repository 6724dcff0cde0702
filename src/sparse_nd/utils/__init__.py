from sparse_nd.utils.tuple_utils import normalize_coordinates, tuple_hash, tuple_n

__all__ = [
    "normalize_coordinates",
    "tuple_hash",
    "tuple_n",
]
