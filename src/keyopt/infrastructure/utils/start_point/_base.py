"""
Start-point initializer registry and dispatch utilities.

This module defines the concrete `StartPointInitializer` used by optimizers to
obtain the initial point ``x0`` shared by every component function.

Design
------
- Initializers are registered by string name via a decorator-based registry.
- Each initializer is a callable ``fn(iterate, rng)`` returning a fresh
  float64 NumPy array with the iterate's shape.
- The dispatcher resolves an initializer by name at construction time and
  invokes it via `__call__`.

Usage example
-------------
Registering an initializer:

    @StartPointInitializer.register_initializer("ones")
    def ones(iterate: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        return np.ones(iterate.shape, dtype=np.float64)

Applying an initializer:

    init = StartPointInitializer("randn")
    x0 = init(iterate, np.random.default_rng(0))
"""

from __future__ import annotations

from typing import Callable, ClassVar, Dict, TypeVar

import numpy as np

from ....domain.utils._size_checks import check_same_sizes
from ....domain.utils._start_point import _StartPointInitializer

T = TypeVar("T", bound=Callable[..., np.ndarray])


class StartPointInitializer(_StartPointInitializer):
    """
    Registry-backed start-point dispatcher.

    Notes
    -----
    - Initializers are stored by string name in a class-level registry.
    - The returned array is always float64 with ``iterate.shape``; the
      dispatcher enforces this so that individual initializers stay small.
    """

    INITIALIZERS: ClassVar[Dict[str, Callable[..., np.ndarray]]] = {}

    def __init__(self, initializer_name: str) -> None:
        try:
            self._initializer: Callable[..., np.ndarray] = self.INITIALIZERS[
                initializer_name
            ]
        except KeyError as e:
            available = ", ".join(sorted(self.INITIALIZERS)) or "<none>"
            raise ValueError(
                f"Unsupported start point: {initializer_name!r}. "
                f"Available: {available}"
            ) from e
        self.name = initializer_name

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Decorator to register a start-point initializer under `name`.

        Parameters
        ----------
        name:
            Registry key used to retrieve the initializer later.
        overwrite:
            If False (default), raises if `name` is already registered.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Initializer name must be a non-empty string")

        def decorator(func: T) -> T:
            if not overwrite and name in cls.INITIALIZERS:
                raise ValueError(f"Initializer already registered: {name!r}")
            cls.INITIALIZERS[name] = func
            return func

        return decorator

    @classmethod
    def available(cls) -> tuple[str, ...]:
        """Return registered initializer names (sorted)."""
        return tuple(sorted(cls.INITIALIZERS))

    @classmethod
    def get(cls, name: str) -> Callable[..., np.ndarray]:
        """Get a registered initializer callable by name."""
        return cls.INITIALIZERS[name]

    def __call__(self, iterate: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        iterate = np.asarray(iterate)
        x0 = np.asarray(self._initializer(iterate, rng), dtype=np.float64)
        check_same_sizes(x0, iterate, "StartPointInitializer", "iterate elements")
        if x0.shape != iterate.shape:
            x0 = x0.reshape(iterate.shape)
        return x0
