"""
Progress reporters for incremental optimizers.

Every reporter satisfies `ISweepReporter`: `on_sweep(sweep, objective)` is
called once per completed sweep and `on_finish(result)` once when the run
terminates.

Provided reporters
------------------
- `NullReporter`: discards everything (the optimizer default).
- `PrintReporter`: prints one line per sweep, like `Model.fit(verbose=1)`.
- `LoggingReporter`: forwards progress to a standard-library logger.
- `HistoryReporter`: records every sweep into a `SweepHistory`.
- `CompositeReporter`: fans events out to several reporters.
"""

from __future__ import annotations

import logging
from typing import Optional

from ...domain._reporter import ISweepReporter
from ...domain._result import OptimizationResult, OptimizationStatus
from ._history import SweepHistory


class NullReporter:
    """Reporter that ignores all events."""

    def on_sweep(self, sweep: int, objective: float) -> None:
        pass

    def on_finish(self, result: OptimizationResult) -> None:
        pass


class PrintReporter:
    """
    Print progress to stdout.

    Parameters
    ----------
    verbose : int, optional
        ``0`` prints nothing, ``1`` prints every sweep and the final status.
        Larger values print only every ``verbose``-th sweep (plus the final
        status). Defaults to 1.
    max_iterations : int, optional
        Sweep budget shown as ``Sweep i/N``. ``0`` (default) omits it.
    """

    def __init__(self, verbose: int = 1, *, max_iterations: int = 0) -> None:
        self.verbose = int(verbose)
        self.max_iterations = int(max_iterations)

    def on_sweep(self, sweep: int, objective: float) -> None:
        if not self.verbose:
            return
        if self.verbose > 1 and sweep % self.verbose != 0:
            return

        head = f"Sweep {sweep}"
        if self.max_iterations:
            head += f"/{self.max_iterations}"
        print(f"{head} - objective: {objective:.6f}")

    def on_finish(self, result: OptimizationResult) -> None:
        if not self.verbose:
            return
        print(
            f"Finished - status: {result.status.value} - "
            f"objective: {result.objective:.6f} - sweeps: {result.sweeps}"
        )


class LoggingReporter:
    """
    Forward progress to a standard-library logger.

    Per-sweep progress is logged at ``level``; divergence is logged as a
    warning suggesting a smaller step size.

    Parameters
    ----------
    logger : logging.Logger, optional
        Target logger. Defaults to ``logging.getLogger("keyopt.iqn")``.
    level : int, optional
        Level for progress messages. Defaults to ``logging.INFO``.
    tolerance : float, optional
        Tolerance mentioned in the convergence message, if known.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        level: int = logging.INFO,
        *,
        tolerance: Optional[float] = None,
    ) -> None:
        self.logger = logger if logger is not None else logging.getLogger("keyopt.iqn")
        self.level = level
        self.tolerance = tolerance

    def on_sweep(self, sweep: int, objective: float) -> None:
        self.logger.log(self.level, "IQN: iteration %d, objective %s.", sweep, objective)

    def on_finish(self, result: OptimizationResult) -> None:
        if result.status is OptimizationStatus.DIVERGED:
            self.logger.warning(
                "IQN: converged to %s; terminating with failure.  "
                "Try a smaller step size?",
                result.objective,
            )
        elif result.status is OptimizationStatus.CONVERGED:
            if self.tolerance is None:
                self.logger.log(
                    self.level,
                    "IQN: minimized within tolerance; terminating optimization.",
                )
            else:
                self.logger.log(
                    self.level,
                    "IQN: minimized within tolerance %s; terminating optimization.",
                    self.tolerance,
                )
        elif result.status is OptimizationStatus.MAX_ITERATIONS:
            self.logger.log(
                self.level,
                "IQN: maximum iterations (%d) reached; terminating optimization.",
                result.sweeps,
            )
        else:
            self.logger.log(
                self.level, "IQN: cancelled after %d sweeps.", result.sweeps
            )


class HistoryReporter:
    """
    Record every sweep into a `SweepHistory`.

    Attributes
    ----------
    history : SweepHistory
        Recorded per-sweep objectives.
    result : Optional[OptimizationResult]
        Result of the last finished run, if any.
    """

    def __init__(self, history: Optional[SweepHistory] = None) -> None:
        self.history = history if history is not None else SweepHistory()
        self.result: Optional[OptimizationResult] = None

    def on_sweep(self, sweep: int, objective: float) -> None:
        self.history.append_sweep(sweep, objective)

    def on_finish(self, result: OptimizationResult) -> None:
        self.result = result


class CompositeReporter:
    """Dispatch every event to each wrapped reporter, in order."""

    def __init__(self, *reporters: ISweepReporter) -> None:
        self.reporters = list(reporters)

    def on_sweep(self, sweep: int, objective: float) -> None:
        for reporter in self.reporters:
            reporter.on_sweep(sweep, objective)

    def on_finish(self, result: OptimizationResult) -> None:
        for reporter in self.reporters:
            reporter.on_finish(result)
