"""
Size and dimensionality checks shared by optimizers and objectives.

These helpers raise `DimensionMismatchError` with a message that names the
caller, so that a malformed gradient or dataset is reported at the point
where it enters the optimizer rather than as an obscure broadcasting error
deep inside the update math.

Both helpers rely only on the ``size`` / ``shape`` attributes of array-like
inputs and therefore stay independent of NumPy.
"""

from __future__ import annotations

from numbers import Integral
from typing import Union

from .._errors import DimensionMismatchError
from ..types._numpy import NDArrayLike


def check_same_sizes(
    data: NDArrayLike,
    size: Union[int, NDArrayLike],
    caller_description: str,
    add_info: str = "gradient",
) -> None:
    """
    Check that ``data`` has the expected number of elements.

    Parameters
    ----------
    data : NDArrayLike
        Array whose element count is checked.
    size : int or NDArrayLike
        Expected number of elements, or an array whose element count is
        used as the expectation.
    caller_description : str
        Description of the caller, used as the message prefix.
    add_info : str, optional
        Name of the compared quantity in the message. Defaults to "gradient".

    Raises
    ------
    DimensionMismatchError
        If the element counts differ.
    """
    expected = int(size) if isinstance(size, Integral) else int(size.size)
    actual = int(data.size)
    if actual != expected:
        raise DimensionMismatchError(
            f"{caller_description}: number of elements ({actual}) does not "
            f"match number of {add_info} ({expected})!",
            expected=expected,
            actual=actual,
        )


def check_same_dimensionality(
    data: NDArrayLike,
    dimension: Union[int, NDArrayLike],
    caller_description: str,
    add_info: str = "dataset",
) -> None:
    """
    Check that the leading dimension (rows) of ``data`` matches the model.

    Parameters
    ----------
    data : NDArrayLike
        Dataset whose number of rows is checked. Datasets follow the
        column-major convention: one point per column.
    dimension : int or NDArrayLike
        Expected dimensionality, or an array whose number of rows is used.
    caller_description : str
        Description of the caller, used as the message prefix.
    add_info : str, optional
        Name of the checked data in the message. Defaults to "dataset".

    Raises
    ------
    DimensionMismatchError
        If the dimensionalities differ.
    """
    if isinstance(dimension, Integral):
        expected = int(dimension)
    else:
        expected = int(dimension.shape[0])
    actual = int(data.shape[0]) if data.ndim > 0 else 1
    if actual != expected:
        raise DimensionMismatchError(
            f"{caller_description}: dimensionality of {add_info} ({actual}) is "
            f"not equal to the dimensionality of the model ({expected})!",
            expected=expected,
            actual=actual,
        )
