"""
KeyOpt: incremental quasi-Newton optimization for finite-sum objectives.

Public API
----------
- `IQN`: the incremental quasi-Newton optimizer.
- Objective contract `IFiniteSumObjective` and reference objectives
  (`QuadraticFiniteSum`, `LeastSquaresFunction`,
  `LogisticRegressionFunction`, `CallableFiniteSum`).
- Result types `OptimizationResult` / `OptimizationStatus`.
- Reporters for progress output and history recording.
"""

from .domain import (
    DimensionMismatchError,
    IFiniteSumObjective,
    IFiniteSumOptimizer,
    IllConditionedUpdateError,
    InvalidConfigurationError,
    ISweepReporter,
    OptimizationResult,
    OptimizationStatus,
)
from .infrastructure.objectives import (
    CallableFiniteSum,
    LeastSquaresFunction,
    LogisticRegressionFunction,
    QuadraticFiniteSum,
)
from .infrastructure.optimizers import IQN
from .infrastructure.reporters import (
    CompositeReporter,
    HistoryReporter,
    LoggingReporter,
    NullReporter,
    PrintReporter,
    SweepHistory,
)
from .infrastructure.utils.start_point import StartPointInitializer

__version__ = "0.1.0"

__all__ = [
    "IQN",
    "IFiniteSumObjective",
    "IFiniteSumOptimizer",
    "ISweepReporter",
    "OptimizationResult",
    "OptimizationStatus",
    "InvalidConfigurationError",
    "DimensionMismatchError",
    "IllConditionedUpdateError",
    "QuadraticFiniteSum",
    "LeastSquaresFunction",
    "LogisticRegressionFunction",
    "CallableFiniteSum",
    "NullReporter",
    "PrintReporter",
    "LoggingReporter",
    "HistoryReporter",
    "CompositeReporter",
    "SweepHistory",
    "StartPointInitializer",
]
