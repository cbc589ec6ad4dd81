"""
Finite sum of convex quadratics.

    f_i(x) = 1/2 (x - c_i)^T A_i (x - c_i) + d_i

With symmetric positive definite ``A_i`` the mean objective is strictly
convex and its unique minimizer solves ``(sum_i A_i) x = sum_i A_i c_i``.
Quadratics are the natural benchmark for quasi-Newton methods: the secant
pairs are exact, so the local curvature models recover ``A_i``.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ...domain.utils._size_checks import check_same_sizes


class QuadraticFiniteSum:
    """
    Finite-sum objective made of shifted quadratic forms.

    Parameters
    ----------
    matrices : np.ndarray
        Component matrices ``A_i``, shape ``(m, n, n)``. They are
        symmetrized on construction.
    centers : np.ndarray
        Component centers ``c_i``, shape ``(m, n)``.
    offsets : np.ndarray, optional
        Constant terms ``d_i``, shape ``(m,)``. Defaults to zeros.
    """

    def __init__(
        self,
        matrices: np.ndarray,
        centers: np.ndarray,
        offsets: Optional[np.ndarray] = None,
    ) -> None:
        matrices = np.asarray(matrices, dtype=np.float64)
        centers = np.asarray(centers, dtype=np.float64)
        if matrices.ndim != 3 or matrices.shape[1] != matrices.shape[2]:
            raise ValueError(
                f"matrices must have shape (m, n, n), got {matrices.shape}"
            )
        m, n = matrices.shape[0], matrices.shape[1]
        check_same_sizes(centers, m * n, "QuadraticFiniteSum", "center elements")
        centers = centers.reshape(m, n)

        if offsets is None:
            offsets = np.zeros(m)
        offsets = np.asarray(offsets, dtype=np.float64).reshape(-1)
        check_same_sizes(offsets, m, "QuadraticFiniteSum", "offsets")

        self.matrices = 0.5 * (matrices + np.transpose(matrices, (0, 2, 1)))
        self.centers = centers
        self.offsets = offsets

    def num_functions(self) -> int:
        return int(self.matrices.shape[0])

    def evaluate(self, point: np.ndarray, index: int) -> float:
        d = np.asarray(point, dtype=np.float64).reshape(-1) - self.centers[index]
        return float(0.5 * d @ self.matrices[index] @ d + self.offsets[index])

    def gradient(self, point: np.ndarray, index: int) -> np.ndarray:
        point = np.asarray(point, dtype=np.float64)
        d = point.reshape(-1) - self.centers[index]
        return (self.matrices[index] @ d).reshape(point.shape)

    def minimizer(self) -> np.ndarray:
        """Return the unique minimizer of the mean objective."""
        A = self.matrices.sum(axis=0)
        b = np.einsum("ijk,ik->j", self.matrices, self.centers)
        return np.linalg.solve(A, b)

    def mean(self, point: np.ndarray) -> float:
        """Return the mean objective at ``point``."""
        m = self.num_functions()
        return sum(self.evaluate(point, i) for i in range(m)) / m

    @classmethod
    def random(
        cls,
        num_functions: int,
        dim: int,
        *,
        rng: Optional[np.random.Generator] = None,
        min_eig: float = 1.0,
        max_eig: float = 3.0,
    ) -> "QuadraticFiniteSum":
        """
        Draw a well-conditioned instance.

        Every ``A_i`` is ``V diag(e) V^T`` with a random orthogonal ``V`` and
        eigenvalues ``e`` uniform in ``[min_eig, max_eig]``; centers are
        standard normal.
        """
        rng = np.random.default_rng(rng)
        matrices = np.empty((num_functions, dim, dim))
        for i in range(num_functions):
            V, _ = np.linalg.qr(rng.standard_normal((dim, dim)))
            e = rng.uniform(min_eig, max_eig, size=dim)
            matrices[i] = (V * e) @ V.T
        centers = rng.standard_normal((num_functions, dim))
        return cls(matrices, centers)
