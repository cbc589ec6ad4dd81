"""
Domain-level progress reporting contract.

Incremental optimizers run for many sweeps, and operators monitoring long runs
expect per-sweep progress. Rather than writing to ambient global log streams
from inside the optimization loop, optimizers receive an `ISweepReporter`
capability and invoke it at well-defined points:

- once after every completed sweep, with the sweep index and mean objective
- once when the run terminates, with the final result

Reporters are informational only. They must not mutate optimizer state, and
an optimizer's numerical behavior must not depend on which reporter is used.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ._result import OptimizationResult


@runtime_checkable
class ISweepReporter(Protocol):
    """
    Observer invoked by an optimizer during a run.
    """

    def on_sweep(self, sweep: int, objective: float) -> None:
        """
        Report a completed sweep.

        Parameters
        ----------
        sweep : int
            One-based index of the completed sweep.
        objective : float
            Mean objective evaluated after the sweep.
        """
        ...

    def on_finish(self, result: OptimizationResult) -> None:
        """
        Report the terminal result of a run.
        """
        ...
