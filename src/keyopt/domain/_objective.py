"""
Domain-level finite-sum objective contract for KeyOpt.

This module defines the `IFiniteSumObjective` protocol, which specifies the
minimal interface an objective must expose to be minimized by incremental
optimizers such as IQN.

A finite-sum objective has the form

    F(x) = (1/m) * sum_i f_i(x),    i = 0, ..., m - 1

where every component ``f_i`` shares the same parameter vector ``x``.

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations; points and gradients are typed as
  `NDArrayLike`.
- `gradient()` and `evaluate()` are expected to be deterministic, side-effect
  free functions of ``(point, index)``.
- The number of component functions must stay constant for the duration of
  one optimization run.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .types._numpy import NDArrayLike


@runtime_checkable
class IFiniteSumObjective(Protocol):
    """
    Finite-sum (empirical risk) objective contract.

    Required methods
    ----------------
    - `num_functions()` returns the number of component functions ``m``.
    - `gradient(point, index)` returns the gradient of component ``index``.
    - `evaluate(point, index)` returns the value of component ``index``.
    """

    def num_functions(self) -> int:
        """
        Return the number of component functions ``m``.
        """
        ...

    def gradient(self, point: NDArrayLike, index: int) -> NDArrayLike:
        """
        Return the gradient of component ``index`` at ``point``.

        The returned array must contain as many elements as ``point``.
        Implementations should return a new array rather than a view into
        internal storage, since the optimizer caches the result.
        """
        ...

    def evaluate(self, point: NDArrayLike, index: int) -> float:
        """
        Return the value of component ``index`` at ``point``.
        """
        ...
