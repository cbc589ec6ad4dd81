"""
Incremental Quasi-Newton (IQN) optimizer implementation.

This module provides IQN, an incremental quasi-Newton method with local
superlinear convergence for finite-sum objectives

    F(x) = (1/m) * sum_i f_i(x).

The optimizer visits the component functions one at a time in a fixed cyclic
order. Each visit refreshes the visited component's local BFGS curvature
model, folds the change into an aggregate quadratic model with exact deltas,
and moves the iterate towards the minimizer of that aggregate model.

Design notes
------------
- Objectives are duck-typed against `IFiniteSumObjective`: only
  `num_functions()`, `gradient(point, i)` and `evaluate(point, i)` are used.
- The per-component memory and the aggregate live in `IncrementalModel`
  (see `._iqn_state`); this module owns configuration, start-point
  selection, the sweep loop and the stopping rules.
- Progress is reported through an injected `ISweepReporter`; the default is
  a no-op, so the optimizer itself writes nothing to global log streams.
- Divergence (a NaN or infinite objective) is a normal result with status
  `DIVERGED`, not an exception.
- The caller's iterate is overwritten in place on every exit path.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Integral
from typing import Callable, Optional, Union

import numpy as np

from ...domain._errors import InvalidConfigurationError
from ...domain._objective import IFiniteSumObjective
from ...domain._reporter import ISweepReporter
from ...domain._result import OptimizationResult, OptimizationStatus
from ..reporters._reporters import NullReporter
from ..utils.start_point import StartPointInitializer
from ._iqn_state import CONDITIONING_POLICIES, IncrementalModel


@dataclass
class IQN:
    """
    Incremental Quasi-Newton optimizer.

    Update rule
    -----------
    For a visited component ``i`` whose cached point ``t_i`` differs from the
    iterate ``x``:

    - ``s <- x - t_i``, ``yy <- grad f_i(x) - y_i``
    - ``Q_new <- Q_i + yy yy^T / (yy^T s) - Q_i s s^T Q_i / (s^T Q_i s)``
    - ``B``, ``u``, ``g`` receive the matching ``1/m``-scaled deltas
    - ``(t_i, y_i, Q_i) <- (x, grad f_i(x), Q_new)``
    - ``x <- step_size * B^{-1}(u - g) + (1 - step_size) * x``

    After every sweep the mean objective is evaluated and the run stops on
    divergence, on ``objective < tolerance``, or when the sweep budget is
    exhausted.

    Parameters
    ----------
    step_size : float, optional
        Damping factor of the Newton step, in ``(0, 1]``. ``1`` takes the
        undamped aggregate Newton step. Defaults to 0.01.
    max_iterations : int, optional
        Maximum number of sweeps over all component functions. ``0`` means
        no limit. Defaults to 100000.
    tolerance : float, optional
        The run converges once the mean objective is strictly below this
        value. Defaults to 1e-5.
    start_point : str, optional
        Registered `StartPointInitializer` name producing the seed point of
        the component memory. Defaults to ``"randn"``.
    rng : None, int or np.random.Generator, optional
        Source of randomness for the start point (a seed or a generator).
    conditioning : str, optional
        Policy for unsafe curvature denominators and singular aggregates:
        ``"skip"`` keeps the old local curvature, ``"raise"`` raises
        `IllConditionedUpdateError`, ``"ignore"`` divides anyway.
        Defaults to ``"skip"``.
    curvature_eps : float, optional
        Relative threshold of the curvature condition. Defaults to 1e-10.
    reporter : ISweepReporter, optional
        Progress observer. Defaults to `NullReporter`.

    Notes
    -----
    - The working iterate starts at the caller's iterate, while every
      component's memory is seeded at the start point. With
      ``start_point="iterate"`` the two coincide and the model takes one
      damped step before the first sweep.
    - Memory use is ``O(m * n^2)``: one ``n x n`` curvature matrix per
      component.
    """

    step_size: float = 0.01
    max_iterations: int = 100000
    tolerance: float = 1e-5
    start_point: str = "randn"
    conditioning: str = "skip"
    curvature_eps: float = 1e-10
    reporter: ISweepReporter = field(default_factory=NullReporter)

    def __init__(
        self,
        step_size: float = 0.01,
        max_iterations: int = 100000,
        tolerance: float = 1e-5,
        *,
        start_point: str = "randn",
        rng: Union[None, int, np.random.Generator] = None,
        conditioning: str = "skip",
        curvature_eps: float = 1e-10,
        reporter: Optional[ISweepReporter] = None,
    ) -> None:
        """
        Construct an IQN optimizer.

        Raises
        ------
        InvalidConfigurationError
            If ``step_size`` is not in ``(0, 1]``, ``max_iterations`` is not
            a non-negative integer, ``tolerance`` is NaN, ``curvature_eps`` is
            negative, or ``conditioning`` is unknown.
        ValueError
            If ``start_point`` is not a registered initializer name.
        """
        self.step_size = float(step_size)
        self.tolerance = float(tolerance)
        self.curvature_eps = float(curvature_eps)
        self.conditioning = conditioning
        self.start_point = start_point

        if not (0.0 < self.step_size <= 1.0):
            raise InvalidConfigurationError(
                "step_size", step_size, "must be in (0, 1]"
            )
        if (
            isinstance(max_iterations, bool)
            or not isinstance(max_iterations, Integral)
            or max_iterations < 0
        ):
            raise InvalidConfigurationError(
                "max_iterations", max_iterations, "must be a non-negative integer"
            )
        if math.isnan(self.tolerance):
            raise InvalidConfigurationError("tolerance", tolerance, "must not be NaN")
        if not self.curvature_eps >= 0.0:
            raise InvalidConfigurationError(
                "curvature_eps", curvature_eps, "must be >= 0"
            )
        if conditioning not in CONDITIONING_POLICIES:
            raise InvalidConfigurationError(
                "conditioning", conditioning, f"must be one of {CONDITIONING_POLICIES}"
            )

        self.max_iterations = int(max_iterations)
        self.reporter = reporter if reporter is not None else NullReporter()
        self._initializer = StartPointInitializer(start_point)
        self._rng = np.random.default_rng(rng)

        self.model: Optional[IncrementalModel] = None
        self.last_result: Optional[OptimizationResult] = None

    def optimize(self, function: IFiniteSumObjective, iterate: np.ndarray) -> float:
        """
        Minimize ``function`` and return the final mean objective.

        The optimized point is written into ``iterate`` in place. Use
        `minimize()` to also learn whether the run converged, diverged or ran
        out of sweeps.
        """
        return self.minimize(function, iterate).objective

    def minimize(
        self,
        function: IFiniteSumObjective,
        iterate: np.ndarray,
        *,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> OptimizationResult:
        """
        Minimize ``function`` and report how the run terminated.

        Parameters
        ----------
        function : IFiniteSumObjective
            Finite-sum objective with at least one component.
        iterate : np.ndarray
            Writable floating-point array. Its shape is the point shape passed
            to ``function``; it is overwritten with the final point.
        should_stop : Callable[[], bool], optional
            Cooperative cancellation flag (e.g. ``threading.Event.is_set``),
            polled between sweeps only so that the aggregate model is never
            left partially updated.

        Returns
        -------
        OptimizationResult
            Final objective, terminal status and number of completed sweeps.

        Raises
        ------
        TypeError
            If ``iterate`` is not a writable floating-point NumPy array.
        InvalidConfigurationError
            If the iterate is empty or ``function`` has no components.
        DimensionMismatchError
            If a gradient's size differs from the iterate's.
        IllConditionedUpdateError
            Only under ``conditioning="raise"``.
        """
        self._check_iterate(iterate)
        num_functions = int(function.num_functions())
        if num_functions < 1:
            raise InvalidConfigurationError(
                "num_functions", num_functions, "must be >= 1"
            )

        x0 = self._initializer(iterate, self._rng)
        model = IncrementalModel.initialize(
            function,
            x0,
            iterate,
            step_size=self.step_size,
            conditioning=self.conditioning,
            curvature_eps=self.curvature_eps,
        )
        self.model = model

        objective = float("nan")
        sweeps = 0
        try:
            while self.max_iterations == 0 or sweeps < self.max_iterations:
                if should_stop is not None and should_stop():
                    status = OptimizationStatus.CANCELLED
                    break

                model.sweep(function)
                sweeps += 1

                objective = model.objective(function)
                self.reporter.on_sweep(sweeps, objective)

                if not math.isfinite(objective):
                    status = OptimizationStatus.DIVERGED
                    break
                if objective < self.tolerance:
                    status = OptimizationStatus.CONVERGED
                    break
            else:
                status = OptimizationStatus.MAX_ITERATIONS
        finally:
            iterate[...] = model.point()

        result = OptimizationResult(
            objective=objective,
            status=status,
            sweeps=sweeps,
            num_functions=num_functions,
        )
        self.last_result = result
        self.reporter.on_finish(result)
        return result

    @staticmethod
    def _check_iterate(iterate: np.ndarray) -> None:
        if not isinstance(iterate, np.ndarray):
            raise TypeError(
                "iterate must be a numpy.ndarray (it is overwritten in place), "
                f"got {type(iterate).__name__}"
            )
        if not np.issubdtype(iterate.dtype, np.floating):
            raise TypeError(f"iterate must have a floating dtype, got {iterate.dtype}")
        if not iterate.flags.writeable:
            raise TypeError("iterate must be writeable")
        if iterate.size == 0:
            raise InvalidConfigurationError("iterate.size", iterate.size, "must be >= 1")
