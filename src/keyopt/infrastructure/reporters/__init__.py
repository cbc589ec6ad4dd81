from ._history import SweepHistory
from ._reporters import (
    CompositeReporter,
    HistoryReporter,
    LoggingReporter,
    NullReporter,
    PrintReporter,
)

__all__ = [
    SweepHistory.__name__,
    NullReporter.__name__,
    PrintReporter.__name__,
    LoggingReporter.__name__,
    HistoryReporter.__name__,
    CompositeReporter.__name__,
]
