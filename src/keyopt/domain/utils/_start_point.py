"""
Abstract interface for start-point initialization.

Incremental optimizers seed every component's cached point with the same
initial point ``x0``. How ``x0`` is obtained (a random draw, zeros, or the
caller's own iterate) is a policy decision kept out of the optimizer: this
module defines the dispatcher contract, while the concrete registry and the
built-in strategies live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC
from typing import Any, Callable, Dict, TypeVar

from ..types._numpy import NDArrayLike


T = TypeVar("T", bound=Callable[..., NDArrayLike])


class _StartPointInitializer(ABC):
    """
    Abstract base class for start-point initializer dispatchers.

    Design notes
    ------------
    - Initializers are identified by string names.
    - Each initializer is a callable ``fn(iterate, rng) -> array`` that
      returns a *new* array with the iterate's shape and never mutates the
      iterate itself.
    - Randomness is always drawn from the supplied generator so that runs
      can be made deterministic by the caller.
    """

    INITIALIZERS: Dict[str, Callable] = {}

    def __init__(self, initializer_name: str) -> None:
        """
        Construct a start-point initializer dispatcher.

        Parameters
        ----------
        initializer_name:
            The string key identifying a registered initializer.
        """
        ...

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Register a start-point initializer under a given name.

        Returns
        -------
        Callable
            A decorator that registers the initializer function.
        """
        ...

    @classmethod
    def available(cls) -> tuple[str, ...]:
        """
        Return the names of all registered initializers.
        """
        ...

    def __call__(self, iterate: NDArrayLike, rng: Any) -> NDArrayLike:
        """
        Produce a start point for ``iterate`` using generator ``rng``.
        """
        ...
