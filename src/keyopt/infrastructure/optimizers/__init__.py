from ._iqn import IQN
from ._iqn_state import AggregateState, ComponentRecord, ComponentTable, IncrementalModel

__all__ = [
    IQN.__name__,
    IncrementalModel.__name__,
    ComponentTable.__name__,
    ComponentRecord.__name__,
    AggregateState.__name__,
]
