"""
Domain-level optimizer contracts for KeyOpt.

This module defines the `IFiniteSumOptimizer` protocol, which specifies the
minimal interface required for optimizers that minimize a finite-sum
objective (e.g., IQN).

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations.
- Optimizers own all of their internal state for the duration of a run. The
  caller's iterate is overwritten in place with the final point, mirroring
  how parameter-updating optimizers mutate the parameters they manage.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ._objective import IFiniteSumObjective
from ._result import OptimizationResult
from .types._numpy import NDArrayLike


@runtime_checkable
class IFiniteSumOptimizer(Protocol):
    """
    Finite-sum optimizer interface contract.

    Required methods
    ----------------
    - `optimize()` runs the optimizer and returns the final mean objective.
    - `minimize()` runs the optimizer and returns the full result record.
    """

    def optimize(self, function: IFiniteSumObjective, iterate: NDArrayLike) -> float:
        """
        Minimize ``function`` starting from the optimizer's start point.

        The final point is written into ``iterate`` in place.

        Returns
        -------
        float
            Mean objective after the last completed sweep. May be NaN or
            infinite when the run diverged.
        """
        ...

    def minimize(
        self, function: IFiniteSumObjective, iterate: NDArrayLike
    ) -> OptimizationResult:
        """
        Minimize ``function`` and report how the run terminated.

        Implementations must write the final point into ``iterate`` in place
        and must not raise on numerical divergence.
        """
        ...
