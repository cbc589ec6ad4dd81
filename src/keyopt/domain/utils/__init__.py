from ._size_checks import check_same_dimensionality, check_same_sizes

__all__ = [
    check_same_sizes.__name__,
    check_same_dimensionality.__name__,
]
