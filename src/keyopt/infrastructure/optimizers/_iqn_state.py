"""
Per-component memory and aggregate model of the IQN optimizer.

IQN keeps, for every component function ``f_i``, the last point ``t_i`` at
which the component was evaluated, the gradient ``y_i`` observed there, and a
local curvature approximation ``Q_i``. Their averages form a quadratic
aggregate model whose minimizer drives the next iterate:

    B = (1/m) sum_i Q_i
    u = (1/m) sum_i Q_i t_i
    g = (1/m) sum_i y_i
    x_new = B^{-1} (u - g)

Storage layout
--------------
- `ComponentTable` stores all triples in three contiguous float64 arrays
  (``points``: ``(m, n)``, ``gradients``: ``(m, n)``, ``curvatures``:
  ``(m, n, n)``) indexed by component.
- `AggregateState` stores ``B``, ``u`` and ``g``. It is updated with exact
  deltas in the same step as the table row it summarizes and is never
  recomputed from the table inside the optimization loop.
  `AggregateState.from_table` exists for verification only.
- `IncrementalModel` owns one table, one aggregate and the working iterate,
  and implements a single component visit.

All vectors are stored flattened; the caller's iterate shape is restored
only at the objective boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Tuple

import numpy as np

from ...domain._errors import IllConditionedUpdateError, InvalidConfigurationError
from ...domain._objective import IFiniteSumObjective
from ...domain.utils._size_checks import check_same_sizes


CONDITIONING_POLICIES: Tuple[str, ...] = ("skip", "raise", "ignore")


class ComponentRecord(NamedTuple):
    """
    Read-only view of one component's cached triple.

    Attributes
    ----------
    point : np.ndarray
        Cached evaluation point ``t_i``, shape ``(n,)``.
    gradient : np.ndarray
        Cached gradient ``y_i``, shape ``(n,)``.
    curvature : np.ndarray
        Local curvature approximation ``Q_i``, shape ``(n, n)``.
    """

    point: np.ndarray
    gradient: np.ndarray
    curvature: np.ndarray


@dataclass
class ComponentTable:
    """
    Indexed arena holding the per-component memory of IQN.

    Attributes
    ----------
    points : np.ndarray
        Cached points, shape ``(m, n)``.
    gradients : np.ndarray
        Cached gradients, shape ``(m, n)``.
    curvatures : np.ndarray
        Local curvature matrices, shape ``(m, n, n)``. Every slice is
        symmetric.
    """

    points: np.ndarray
    gradients: np.ndarray
    curvatures: np.ndarray

    @classmethod
    def initialize(cls, x0: np.ndarray, gradients: np.ndarray) -> "ComponentTable":
        """
        Seed every component at the same point with identity curvature.

        Parameters
        ----------
        x0 : np.ndarray
            Shared initial point, shape ``(n,)``.
        gradients : np.ndarray
            Component gradients at ``x0``, shape ``(m, n)``.

        Returns
        -------
        ComponentTable
            A table with ``t_i = x0``, ``y_i = gradients[i]``, ``Q_i = I``.
        """
        x0 = np.asarray(x0, dtype=np.float64).ravel()
        gradients = np.asarray(gradients, dtype=np.float64)
        m, n = gradients.shape

        points = np.tile(x0, (m, 1))
        curvatures = np.tile(np.eye(n), (m, 1, 1))
        return cls(points=points, gradients=gradients.copy(), curvatures=curvatures)

    @property
    def num_functions(self) -> int:
        return int(self.points.shape[0])

    @property
    def dim(self) -> int:
        return int(self.points.shape[1])

    def record(self, index: int) -> ComponentRecord:
        """
        Return views onto the triple stored for component ``index``.

        Notes
        -----
        The views alias table storage: they observe any later `commit()` to
        the same index. Read everything needed before committing.
        """
        return ComponentRecord(
            self.points[index],
            self.gradients[index],
            self.curvatures[index],
        )

    def commit(
        self,
        index: int,
        point: np.ndarray,
        gradient: np.ndarray,
        curvature: np.ndarray,
    ) -> None:
        """
        Overwrite the triple stored for component ``index``.
        """
        self.points[index] = point
        self.gradients[index] = gradient
        self.curvatures[index] = curvature


@dataclass
class AggregateState:
    """
    Running averages over the component table.

    Attributes
    ----------
    B : np.ndarray
        Average curvature ``(1/m) sum_i Q_i``, shape ``(n, n)``.
    u : np.ndarray
        Average curvature-weighted point ``(1/m) sum_i Q_i t_i``, shape ``(n,)``.
    g : np.ndarray
        Average gradient ``(1/m) sum_i y_i``, shape ``(n,)``.
    """

    B: np.ndarray
    u: np.ndarray
    g: np.ndarray

    @classmethod
    def initialize(cls, table: ComponentTable) -> "AggregateState":
        """
        Build the aggregate of a freshly seeded table.

        A seeded table has ``Q_i = I`` and ``t_i = x0`` for every component,
        so ``B = I`` and ``u = t_0`` hold exactly without summing.
        """
        return cls(
            B=np.eye(table.dim),
            u=table.points[0].copy(),
            g=table.gradients.sum(axis=0) / table.num_functions,
        )

    @classmethod
    def from_table(cls, table: ComponentTable) -> "AggregateState":
        """
        Recompute all three averages from scratch.

        Used to verify that the incrementally maintained aggregate has not
        drifted from the table it summarizes.
        """
        m = table.num_functions
        return cls(
            B=table.curvatures.sum(axis=0) / m,
            u=np.einsum("ijk,ik->j", table.curvatures, table.points) / m,
            g=table.gradients.sum(axis=0) / m,
        )

    def apply_delta(
        self,
        inv_m: float,
        old: ComponentRecord,
        new: ComponentRecord,
    ) -> None:
        """
        Replace one component's contribution to all three averages.

        Parameters
        ----------
        inv_m : float
            ``1 / m``.
        old : ComponentRecord
            The component's triple before the update.
        new : ComponentRecord
            The component's triple after the update.
        """
        self.B += inv_m * (new.curvature - old.curvature)
        self.u += inv_m * (new.curvature @ new.point - old.curvature @ old.point)
        self.g += inv_m * (new.gradient - old.gradient)

    def allclose(
        self, other: "AggregateState", *, rtol: float = 1e-7, atol: float = 1e-9
    ) -> bool:
        return (
            np.allclose(self.B, other.B, rtol=rtol, atol=atol)
            and np.allclose(self.u, other.u, rtol=rtol, atol=atol)
            and np.allclose(self.g, other.g, rtol=rtol, atol=atol)
        )


class IncrementalModel:
    """
    Mutable IQN state: component table, aggregate model and working iterate.

    The model is created once per optimization run and mutated in place by
    `visit()`. It is not safe to share between threads: every visit reads
    and then immediately writes the aggregate and the iterate.

    Parameters
    ----------
    table : ComponentTable
        Per-component memory.
    aggregate : AggregateState
        Averages consistent with ``table``.
    iterate : np.ndarray
        Working iterate (flattened copy is stored).
    shape : Tuple[int, ...]
        Shape of points as seen by the objective.
    step_size : float
        Damping factor ``alpha`` of the Newton step.
    conditioning : str, optional
        Policy for unsafe curvature denominators and singular aggregates:
        ``"skip"`` (default), ``"raise"`` or ``"ignore"``.
    curvature_eps : float, optional
        Relative threshold of the curvature condition
        ``y^T s > curvature_eps * ||s|| * ||y||``. Defaults to 1e-10.
    """

    def __init__(
        self,
        table: ComponentTable,
        aggregate: AggregateState,
        iterate: np.ndarray,
        shape: Tuple[int, ...],
        *,
        step_size: float,
        conditioning: str = "skip",
        curvature_eps: float = 1e-10,
    ) -> None:
        if conditioning not in CONDITIONING_POLICIES:
            raise ValueError(
                f"conditioning must be one of {CONDITIONING_POLICIES}, "
                f"got {conditioning!r}"
            )
        self.table = table
        self.aggregate = aggregate
        self.x = np.array(iterate, dtype=np.float64).ravel()
        self.shape = tuple(shape)
        self.step_size = float(step_size)
        self.conditioning = conditioning
        self.curvature_eps = float(curvature_eps)
        self.inv_m = 1.0 / table.num_functions

    @classmethod
    def initialize(
        cls,
        function: IFiniteSumObjective,
        x0: np.ndarray,
        iterate: np.ndarray,
        *,
        step_size: float,
        conditioning: str = "skip",
        curvature_eps: float = 1e-10,
    ) -> "IncrementalModel":
        """
        Seed the component memory at ``x0`` and start the iterate at ``iterate``.

        Every component is evaluated once at ``x0``. If the working iterate
        coincides with ``x0``, every first visit would see a zero
        displacement, so one damped step against the seeded model is taken
        right away (with ``B = I`` this is a damped gradient step).

        Parameters
        ----------
        function : IFiniteSumObjective
            Objective supplying the component gradients.
        x0 : np.ndarray
            Shared seed point for the component memory.
        iterate : np.ndarray
            Caller's iterate; its shape is the point shape seen by
            ``function``.
        """
        shape = tuple(np.shape(iterate))
        n = int(np.size(iterate))
        m = int(function.num_functions())
        if m < 1:
            raise InvalidConfigurationError("num_functions", m, "must be >= 1")

        x0 = np.asarray(x0, dtype=np.float64).reshape(-1)
        check_same_sizes(x0, n, "IQN", "iterate elements")

        point = x0.reshape(shape)
        gradients = np.empty((m, n), dtype=np.float64)
        for i in range(m):
            gradients[i] = _flat_gradient(function, point, i, n)

        table = ComponentTable.initialize(x0, gradients)
        model = cls(
            table,
            AggregateState.initialize(table),
            iterate,
            shape,
            step_size=step_size,
            conditioning=conditioning,
            curvature_eps=curvature_eps,
        )
        if not np.linalg.norm(model.x - x0) > 0.0:
            model.x = model._damped_newton_step()
        return model

    @property
    def num_functions(self) -> int:
        return self.table.num_functions

    def point(self) -> np.ndarray:
        """Return the working iterate in the objective's point shape."""
        return self.x.reshape(self.shape)

    def visit(self, function: IFiniteSumObjective, index: int) -> bool:
        """
        Visit component ``index``: refresh its local model and step.

        Steps
        -----
        1. Skip if the iterate equals the cached point ``t_i`` (zero
           displacement makes the secant equation degenerate).
        2. Evaluate the component gradient at the iterate.
        3. Form the secant pair ``s = x - t_i``, ``yy = grad - y_i`` and the
           BFGS candidate ``Q_new``.
        4. Apply the matching deltas to ``B``, ``u`` and ``g``.
        5. Commit ``(x, grad, Q_new)`` to the table.
        6. Move the iterate: ``x <- alpha * B^{-1}(u - g) + (1 - alpha) * x``.

        Returns
        -------
        bool
            True if the component was updated, False for a no-op visit.
        """
        old = self.table.record(index)
        x = self.x
        s = x - old.point

        # NaN displacement compares False as well.
        if not np.linalg.norm(s) > 0.0:
            return False

        gradient = _flat_gradient(function, self.point(), index, x.size)
        yy = gradient - old.gradient
        curvature = self._secant_update(index, old.curvature, s, yy)

        new = ComponentRecord(x, gradient, curvature)
        self.aggregate.apply_delta(self.inv_m, old, new)
        self.table.commit(index, x, gradient, curvature)

        self.x = self._damped_newton_step()
        return True

    def sweep(self, function: IFiniteSumObjective) -> int:
        """
        Visit every component once in cyclic order.

        Returns
        -------
        int
            Number of visits that applied an update.
        """
        updated = 0
        for index in range(self.num_functions):
            if self.visit(function, index):
                updated += 1
        return updated

    def objective(self, function: IFiniteSumObjective) -> float:
        """
        Return the mean objective ``(1/m) sum_i f_i(x)`` at the iterate.
        """
        point = self.point()
        total = 0.0
        for i in range(self.num_functions):
            total += float(function.evaluate(point, i))
        return total / self.num_functions

    def _secant_update(
        self, index: int, Q: np.ndarray, s: np.ndarray, yy: np.ndarray
    ) -> np.ndarray:
        """
        Return the BFGS update of ``Q`` for the secant pair ``(s, yy)``.

        ``Q_new = Q + yy yy^T / (yy^T s) - Q s s^T Q / (s^T Q s)``

        Both rank-one terms are exact outer products of a vector with
        itself, so ``Q_new`` is symmetric whenever ``Q`` is.
        """
        Qs = Q @ s
        ys = float(yy @ s)
        sQs = float(s @ Qs)

        if self.conditioning != "ignore":
            if not (np.isfinite(ys) and np.isfinite(sQs)):
                return Q.copy()

            threshold = self.curvature_eps * np.linalg.norm(s) * np.linalg.norm(yy)
            if sQs <= 0.0 or ys <= threshold:
                if self.conditioning == "raise":
                    if sQs <= 0.0:
                        raise IllConditionedUpdateError(index, "s^T Q s", sQs)
                    raise IllConditionedUpdateError(index, "y^T s", ys)
                return Q.copy()

        return Q + np.outer(yy, yy) / ys - np.outer(Qs, Qs) / sQs

    def _damped_newton_step(self) -> np.ndarray:
        """
        Blend the minimizer of the aggregate model with the current iterate.

        Solves ``B z = u - g`` directly instead of forming ``B^{-1}``. A
        singular ``B`` raises under the ``"raise"`` policy and otherwise
        falls back to the least-squares solution.
        """
        B = self.aggregate.B
        rhs = self.aggregate.u - self.aggregate.g
        try:
            z = np.linalg.solve(B, rhs)
        except np.linalg.LinAlgError as e:
            if self.conditioning == "raise":
                raise IllConditionedUpdateError(None, "B", float("nan")) from e
            z = np.linalg.lstsq(B, rhs, rcond=None)[0]

        alpha = self.step_size
        return alpha * z + (1.0 - alpha) * self.x


def _flat_gradient(
    function: IFiniteSumObjective, point: np.ndarray, index: int, n: int
) -> np.ndarray:
    """Evaluate one component gradient as a fresh, validated float64 vector."""
    gradient = np.array(function.gradient(point, index), dtype=np.float64)
    check_same_sizes(gradient, n, "IQN", "iterate elements")
    return gradient.reshape(-1)
