"""
Optimization history utilities.

This module defines a lightweight container recording the mean objective of
every completed sweep of an incremental optimizer, in a manner similar to
Keras' `History` object.

Design goals
------------
- Minimal surface area: no dependency on NumPy or optimizer internals
- Deterministic ordering and explicit sweep indexing
- Human-readable and debugger-friendly representation
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


Number = Union[int, float]


@dataclass
class SweepHistory:
    """
    Container for per-sweep objective values.

    Attributes
    ----------
    sweep : List[int]
        One-based sweep indices, in the order they were recorded.
    objective : List[float]
        Mean objective after each recorded sweep.

    Notes
    -----
    - Values are stored as Python `float`, including NaN and infinities
      reported by a diverging run.
    - This object is intentionally passive: it performs no aggregation logic
      beyond appending values supplied by the optimizer.
    """

    sweep: List[int] = field(default_factory=list)
    objective: List[float] = field(default_factory=list)

    def append_sweep(self, sweep_idx: int, objective: Number) -> None:
        """
        Append the objective of a completed sweep.

        Parameters
        ----------
        sweep_idx : int
            One-based index of the completed sweep.
        objective : Number
            Mean objective evaluated after the sweep.
        """
        self.sweep.append(int(sweep_idx))
        self.objective.append(float(objective))

    def last(self) -> Optional[float]:
        """
        Return the objective of the most recent sweep, or None if empty.
        """
        if not self.objective:
            return None
        return self.objective[-1]

    def as_dict(self) -> Dict[str, List[Number]]:
        return {"sweep": list(self.sweep), "objective": list(self.objective)}

    def __len__(self) -> int:
        return len(self.sweep)
