from ._errors import (
    DimensionMismatchError,
    IllConditionedUpdateError,
    InvalidConfigurationError,
)
from ._objective import IFiniteSumObjective
from ._optimizers import IFiniteSumOptimizer
from ._reporter import ISweepReporter
from ._result import OptimizationResult, OptimizationStatus

__all__ = [
    IFiniteSumObjective.__name__,
    IFiniteSumOptimizer.__name__,
    ISweepReporter.__name__,
    OptimizationResult.__name__,
    OptimizationStatus.__name__,
    InvalidConfigurationError.__name__,
    DimensionMismatchError.__name__,
    IllConditionedUpdateError.__name__,
]
