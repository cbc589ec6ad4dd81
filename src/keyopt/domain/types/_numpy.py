"""
Domain-level structural typing for NumPy-like arrays.

This module defines :class:`NDArrayLike`, a backend-agnostic Protocol for the
points, gradients and curvature matrices exchanged between an optimizer and
a finite-sum objective, without importing NumPy in the domain layer.

Only the members the optimizer contracts actually rely on are modeled:
shape inspection, flattening, copying and NumPy interoperability through
``__array__``. Typical implementers are ``numpy.ndarray`` and array types
that emulate it.
"""

from __future__ import annotations

from typing import Any, Protocol, Tuple, runtime_checkable


@runtime_checkable
class NDArrayLike(Protocol):
    """
    Structural interface for objects that behave like NumPy ndarrays.

    Notes
    -----
    - This is a *Protocol*, not a concrete base class.
    - View vs copy semantics are backend-defined; optimizers always take
      their own float64 copies of anything they cache.
    """

    @property
    def shape(self) -> Tuple[int, ...]:
        """Size of each dimension."""
        ...

    @property
    def ndim(self) -> int:
        """Number of dimensions."""
        ...

    @property
    def size(self) -> int:
        """Total number of elements (product of `shape`)."""
        ...

    @property
    def dtype(self) -> Any:
        """Backend-defined element type descriptor."""
        ...

    def reshape(self, *shape: int) -> NDArrayLike:
        """Return an array with a new shape and the same elements."""
        ...

    def ravel(self) -> NDArrayLike:
        """Return a flattened 1D view when possible."""
        ...

    def copy(self) -> NDArrayLike:
        """Return a copy of the array."""
        ...

    def __array__(self, dtype: Any = ...) -> Any:
        """
        Return a backend-native array, enabling ``np.asarray(obj)``.
        """
        ...

    def __getitem__(self, key: Any) -> Any: ...

    def __setitem__(self, key: Any, value: Any) -> None: ...
