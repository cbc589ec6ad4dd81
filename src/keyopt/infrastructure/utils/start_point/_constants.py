"""
Deterministic start-point initializers.

Provided initializers
---------------------
- ``zeros``:
    Start every component at the origin.
- ``iterate``:
    Start every component at a copy of the caller-supplied iterate. Use this
    to warm-start an optimization or to make tests independent of random
    draws.
"""

import numpy as np

from ._base import StartPointInitializer


@StartPointInitializer.register_initializer("zeros")
def zeros(iterate: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """
    Return an all-zero start point with the iterate's shape.
    """
    return np.zeros(iterate.shape, dtype=np.float64)


@StartPointInitializer.register_initializer("iterate")
def from_iterate(iterate: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """
    Return a float64 copy of the caller-supplied iterate.
    """
    return np.array(iterate, dtype=np.float64, copy=True)
