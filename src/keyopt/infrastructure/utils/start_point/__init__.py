"""
Start-point initialization public API.

Importing this package registers the built-in initializers (``randn``,
``uniform``, ``zeros``, ``iterate``) into the `StartPointInitializer`
registry via import side effects.
"""

from ._random import *
from ._constants import *
from ._base import StartPointInitializer

__all__ = [
    StartPointInitializer.__name__,
]
