"""
Optimization outcome value types.

A run of an incremental optimizer terminates in exactly one of a small set
of states. Numerical divergence is one of them: it is reported through
`OptimizationResult` rather than raised, so callers can tell "converged",
"diverged" and "budget exhausted" apart without using exceptions for
control flow.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OptimizationStatus(Enum):
    """
    Terminal state of an optimization run.

    Members
    -------
    CONVERGED
        The mean objective dropped below the configured tolerance.
    DIVERGED
        The mean objective became NaN or infinite after a sweep.
    MAX_ITERATIONS
        The sweep budget was exhausted without meeting the tolerance.
    CANCELLED
        A cooperative stop request was observed between sweeps.
    """

    CONVERGED = "converged"
    DIVERGED = "diverged"
    MAX_ITERATIONS = "max_iterations"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class OptimizationResult:
    """
    Immutable summary of a finished optimization run.

    Attributes
    ----------
    objective : float
        Mean objective after the last completed sweep. Non-finite when the
        run diverged. NaN when the run was cancelled before any sweep.
    status : OptimizationStatus
        Terminal state of the run.
    sweeps : int
        Number of completed sweeps over all component functions.
    num_functions : int
        Number of component functions of the minimized objective.
    """

    objective: float
    status: OptimizationStatus
    sweeps: int
    num_functions: int

    @property
    def converged(self) -> bool:
        """Whether the tolerance was met."""
        return self.status is OptimizationStatus.CONVERGED

    @property
    def success(self) -> bool:
        """
        Whether the run ended in a non-fatal state.

        Budget exhaustion counts as success (a best-effort result); divergence
        and cancellation do not.
        """
        return self.status in (
            OptimizationStatus.CONVERGED,
            OptimizationStatus.MAX_ITERATIONS,
        )
