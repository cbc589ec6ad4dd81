"""
Random start-point initializers.

Provided initializers
---------------------
- ``randn``:
    Standard normal draw, ``x0 ~ N(0, I)``. This is the default start point
    of the IQN optimizer.
- ``uniform``:
    Uniform draw, ``x0 ~ U(-1, 1)``.

Both draw exclusively from the generator passed in by the optimizer, never
from NumPy's global random state.
"""

import numpy as np

from ._base import StartPointInitializer


@StartPointInitializer.register_initializer("randn")
def randn(iterate: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """
    Draw a start point from a standard normal distribution.

    Parameters
    ----------
    iterate:
        The caller's iterate; only its shape is used.
    rng:
        Source of randomness.

    Returns
    -------
    np.ndarray
        A new float64 array with ``iterate.shape``.
    """
    return rng.standard_normal(iterate.shape)


@StartPointInitializer.register_initializer("uniform")
def uniform(iterate: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """
    Draw a start point uniformly from ``[-1, 1)``.
    """
    return rng.uniform(-1.0, 1.0, size=iterate.shape)
