from ._callable import CallableFiniteSum
from ._least_squares import LeastSquaresFunction
from ._logistic import LogisticRegressionFunction
from ._quadratic import QuadraticFiniteSum

__all__ = [
    CallableFiniteSum.__name__,
    LeastSquaresFunction.__name__,
    LogisticRegressionFunction.__name__,
    QuadraticFiniteSum.__name__,
]
