"""
Linear least-squares regression as a finite-sum objective.

Data follows the column-major convention: ``predictors`` has one point per
column, so ``predictors.shape == (n, m)`` and component ``i`` is

    f_i(x) = (a_i^T x - b_i)^2,    a_i = predictors[:, i].
"""

from __future__ import annotations

import numpy as np

from ...domain.utils._size_checks import check_same_dimensionality, check_same_sizes


class LeastSquaresFunction:
    """
    Squared residual of one data point per component.

    Parameters
    ----------
    predictors : np.ndarray
        Data matrix of shape ``(n, m)``, one point per column.
    responses : np.ndarray
        Targets of shape ``(m,)``.
    """

    def __init__(self, predictors: np.ndarray, responses: np.ndarray) -> None:
        predictors = np.asarray(predictors, dtype=np.float64)
        if predictors.ndim != 2:
            raise ValueError(
                f"predictors must be a 2D (n, m) matrix, got shape {predictors.shape}"
            )
        responses = np.asarray(responses, dtype=np.float64).reshape(-1)
        check_same_sizes(
            responses, int(predictors.shape[1]), "LeastSquaresFunction", "responses"
        )

        self.predictors = predictors
        self.responses = responses

    def num_functions(self) -> int:
        return int(self.predictors.shape[1])

    def _residual(self, point: np.ndarray, index: int) -> float:
        x = np.asarray(point, dtype=np.float64).reshape(-1)
        check_same_dimensionality(
            self.predictors, x.size, "LeastSquaresFunction", "predictors"
        )
        return float(self.predictors[:, index] @ x - self.responses[index])

    def evaluate(self, point: np.ndarray, index: int) -> float:
        r = self._residual(point, index)
        return r * r

    def gradient(self, point: np.ndarray, index: int) -> np.ndarray:
        r = self._residual(point, index)
        shape = np.shape(point)
        return (2.0 * r * self.predictors[:, index]).reshape(shape)

    def minimizer(self) -> np.ndarray:
        """Return the ordinary least-squares solution."""
        return np.linalg.lstsq(self.predictors.T, self.responses, rcond=None)[0]
