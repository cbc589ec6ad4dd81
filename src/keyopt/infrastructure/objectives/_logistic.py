"""
L2-regularized logistic regression as a finite-sum objective.

Parameters are laid out as ``[intercept, w_1, ..., w_n]``. For a point
``a_i`` with label ``b_i`` in ``{0, 1}`` and ``z_i = x_0 + w^T a_i``:

    f_i(x) = -b_i log s(z_i) - (1 - b_i) log(1 - s(z_i)) + lambda / (2 m) ||w||^2

where ``s`` is the logistic sigmoid. The intercept is not regularized, so
the mean objective carries exactly ``lambda / 2 ||w||^2``.
"""

from __future__ import annotations

import numpy as np

from ...domain.utils._size_checks import check_same_dimensionality, check_same_sizes


def _sigmoid(z: np.ndarray) -> np.ndarray:
    # tanh form avoids overflow in exp for large |z|
    return 0.5 * (1.0 + np.tanh(0.5 * z))


class LogisticRegressionFunction:
    """
    Negative log-likelihood of one labeled point per component.

    Parameters
    ----------
    predictors : np.ndarray
        Data matrix of shape ``(n, m)``, one point per column.
    responses : np.ndarray
        Labels in ``{0, 1}``, shape ``(m,)``.
    lambda_ : float, optional
        L2 regularization strength. Must be >= 0. Defaults to 0.0.
    """

    def __init__(
        self, predictors: np.ndarray, responses: np.ndarray, lambda_: float = 0.0
    ) -> None:
        predictors = np.asarray(predictors, dtype=np.float64)
        if predictors.ndim != 2:
            raise ValueError(
                f"predictors must be a 2D (n, m) matrix, got shape {predictors.shape}"
            )
        responses = np.asarray(responses, dtype=np.float64).reshape(-1)
        check_same_sizes(
            responses,
            int(predictors.shape[1]),
            "LogisticRegressionFunction",
            "labels",
        )
        if not np.all((responses == 0.0) | (responses == 1.0)):
            raise ValueError("responses must contain only 0 and 1 labels")
        if lambda_ < 0.0:
            raise ValueError(f"lambda_ must be >= 0, got {lambda_}")

        self.predictors = predictors
        self.responses = responses
        self.lambda_ = float(lambda_)

    def num_functions(self) -> int:
        return int(self.predictors.shape[1])

    def _split(self, point: np.ndarray):
        x = np.asarray(point, dtype=np.float64).reshape(-1)
        check_same_dimensionality(
            self.predictors, x.size - 1, "LogisticRegressionFunction", "predictors"
        )
        return x[0], x[1:]

    def evaluate(self, point: np.ndarray, index: int) -> float:
        intercept, w = self._split(point)
        z = intercept + w @ self.predictors[:, index]
        b = self.responses[index]
        nll = b * np.logaddexp(0.0, -z) + (1.0 - b) * np.logaddexp(0.0, z)
        reg = 0.5 * self.lambda_ * (w @ w) / self.num_functions()
        return float(nll + reg)

    def gradient(self, point: np.ndarray, index: int) -> np.ndarray:
        intercept, w = self._split(point)
        a = self.predictors[:, index]
        err = _sigmoid(intercept + w @ a) - self.responses[index]

        grad = np.empty(w.size + 1)
        grad[0] = err
        grad[1:] = err * a + (self.lambda_ / self.num_functions()) * w
        return grad.reshape(np.shape(point))

    def classify(self, point: np.ndarray, threshold: float = 0.5) -> np.ndarray:
        """
        Predict 0/1 labels for every column of ``predictors``.
        """
        intercept, w = self._split(point)
        probs = _sigmoid(intercept + w @ self.predictors)
        return (probs >= threshold).astype(np.float64)
