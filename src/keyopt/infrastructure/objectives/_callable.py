"""
Adapter turning plain Python callables into a finite-sum objective.
"""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np


class CallableFiniteSum:
    """
    Finite-sum objective backed by parallel lists of callables.

    Parameters
    ----------
    functions : Sequence[Callable[[np.ndarray], float]]
        Component values ``f_i(x)``.
    gradients : Sequence[Callable[[np.ndarray], np.ndarray]]
        Component gradients ``grad f_i(x)``, one per function.

    Examples
    --------
    >>> objective = CallableFiniteSum(
    ...     [lambda x: float((x[0] - 1) ** 2), lambda x: float((x[0] + 1) ** 2)],
    ...     [lambda x: 2 * (x - 1), lambda x: 2 * (x + 1)],
    ... )
    >>> objective.num_functions()
    2
    """

    def __init__(
        self,
        functions: Sequence[Callable[[np.ndarray], float]],
        gradients: Sequence[Callable[[np.ndarray], np.ndarray]],
    ) -> None:
        self.functions = list(functions)
        self.gradients = list(gradients)
        if len(self.functions) != len(self.gradients):
            raise ValueError(
                f"got {len(self.functions)} functions but "
                f"{len(self.gradients)} gradients"
            )

    def num_functions(self) -> int:
        return len(self.functions)

    def evaluate(self, point: np.ndarray, index: int) -> float:
        return float(self.functions[index](point))

    def gradient(self, point: np.ndarray, index: int) -> np.ndarray:
        return np.asarray(self.gradients[index](point), dtype=np.float64)
