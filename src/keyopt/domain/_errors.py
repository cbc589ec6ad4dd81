"""
Configuration- and numerics-related exceptions for KeyOpt.

This module defines custom errors used to signal invalid optimizer
configuration, shape disagreements between an iterate and the quantities
returned by an objective, and ill-conditioned quasi-Newton updates. These
exceptions allow the optimizer to fail fast and clearly *before* any
per-component state is created, instead of proceeding into undefined
numerical territory.

Numerical divergence (a non-finite objective after a sweep) is deliberately
NOT represented here: it is reported as a normal result value carrying a
failure status, so callers can distinguish outcomes without exceptions.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple, Union


class InvalidConfigurationError(ValueError):
    """
    Raised when an optimizer hyperparameter or run precondition is invalid.

    Typical triggers are a non-positive step size, a negative iteration
    budget, a NaN tolerance, or an objective that reports zero component
    functions.

    Attributes
    ----------
    name : str
        Name of the offending setting (e.g., "step_size", "num_functions").
    value : Any
        The rejected value.
    """

    def __init__(self, name: str, value: Any, reason: str) -> None:
        """
        Initialize the InvalidConfigurationError.

        Parameters
        ----------
        name : str
            Name of the offending setting.
        value : Any
            The rejected value.
        reason : str
            Human-readable description of the violated constraint
            (e.g., "must be in (0, 1]").
        """
        super().__init__(f"{name} {reason}, got {value!r}")
        self.name = name
        self.value = value


class DimensionMismatchError(ValueError):
    """
    Raised when an array's size or shape disagrees with the expected one.

    This is used when an objective returns a gradient whose number of
    elements differs from the iterate, or when a caller-supplied start point
    does not match the iterate.

    Attributes
    ----------
    expected : int or Tuple[int, ...]
        The expected size or shape.
    actual : int or Tuple[int, ...]
        The observed size or shape.
    """

    def __init__(
        self,
        message: str,
        *,
        expected: Union[int, Tuple[int, ...]],
        actual: Union[int, Tuple[int, ...]],
    ) -> None:
        """
        Initialize the DimensionMismatchError.

        Parameters
        ----------
        message : str
            Full error message.
        expected : int or Tuple[int, ...]
            The expected size or shape.
        actual : int or Tuple[int, ...]
            The observed size or shape.
        """
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class IllConditionedUpdateError(ArithmeticError):
    """
    Raised when a quasi-Newton update would divide by an unsafe scalar.

    Only raised when the optimizer runs with the ``"raise"`` conditioning
    policy. The default policy skips the offending curvature update instead.

    Attributes
    ----------
    component : Optional[int]
        Index of the component whose secant pair failed the curvature
        condition, or ``None`` when the aggregate curvature matrix itself
        could not be solved against.
    quantity : str
        Name of the offending quantity (e.g., "y^T s", "s^T Q s", "B").
    """

    def __init__(self, component: Optional[int], quantity: str, value: float) -> None:
        """
        Initialize the IllConditionedUpdateError.

        Parameters
        ----------
        component : Optional[int]
            Component index, or ``None`` for the aggregate solve.
        quantity : str
            Name of the offending quantity.
        value : float
            The offending value (NaN when not applicable).
        """
        where = "aggregate model" if component is None else f"component {component}"
        super().__init__(
            f"Ill-conditioned update for {where}: {quantity} = {value!r}. "
            "Try a smaller step size or the 'skip' conditioning policy."
        )
        self.component = component
        self.quantity = quantity
        self.value = value
