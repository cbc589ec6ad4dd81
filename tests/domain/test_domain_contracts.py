import math
import unittest

import numpy as np

from keyopt.domain._errors import (
    IllConditionedUpdateError,
    InvalidConfigurationError,
)
from keyopt.domain._objective import IFiniteSumObjective
from keyopt.domain._optimizers import IFiniteSumOptimizer
from keyopt.domain._reporter import ISweepReporter
from keyopt.domain._result import OptimizationResult, OptimizationStatus
from keyopt.domain.types._numpy import NDArrayLike
from keyopt.infrastructure.objectives import (
    CallableFiniteSum,
    LeastSquaresFunction,
    LogisticRegressionFunction,
    QuadraticFiniteSum,
)
from keyopt.infrastructure.optimizers import IQN
from keyopt.infrastructure.reporters import (
    CompositeReporter,
    HistoryReporter,
    LoggingReporter,
    NullReporter,
    PrintReporter,
)


class TestProtocols(unittest.TestCase):
    def test_iqn_conforms_to_ifinitesumoptimizer(self):
        self.assertIsInstance(IQN(), IFiniteSumOptimizer)

    def test_objectives_conform_to_ifinitesumobjective(self):
        A = np.ones((2, 3))
        objectives = [
            QuadraticFiniteSum(np.tile(np.eye(2), (3, 1, 1)), np.zeros((3, 2))),
            LeastSquaresFunction(A, np.zeros(3)),
            LogisticRegressionFunction(A, np.array([0.0, 1.0, 1.0])),
            CallableFiniteSum([lambda x: 0.0], [lambda x: x]),
        ]
        for obj in objectives:
            self.assertIsInstance(obj, IFiniteSumObjective)

    def test_reporters_conform_to_isweepreporter(self):
        reporters = [
            NullReporter(),
            PrintReporter(),
            LoggingReporter(),
            HistoryReporter(),
            CompositeReporter(),
        ]
        for r in reporters:
            self.assertIsInstance(r, ISweepReporter)

    def test_numpy_array_is_ndarraylike(self):
        self.assertIsInstance(np.zeros(3), NDArrayLike)


class TestOptimizationResult(unittest.TestCase):
    def _result(self, status, objective=1.0):
        return OptimizationResult(
            objective=objective, status=status, sweeps=3, num_functions=2
        )

    def test_converged_is_success(self):
        r = self._result(OptimizationStatus.CONVERGED)
        self.assertTrue(r.converged)
        self.assertTrue(r.success)

    def test_budget_exhausted_is_success_but_not_converged(self):
        r = self._result(OptimizationStatus.MAX_ITERATIONS)
        self.assertFalse(r.converged)
        self.assertTrue(r.success)

    def test_diverged_is_failure(self):
        r = self._result(OptimizationStatus.DIVERGED, objective=math.nan)
        self.assertFalse(r.success)
        self.assertTrue(math.isnan(r.objective))

    def test_cancelled_is_failure(self):
        self.assertFalse(self._result(OptimizationStatus.CANCELLED).success)

    def test_result_is_frozen(self):
        r = self._result(OptimizationStatus.CONVERGED)
        with self.assertRaises(Exception):
            r.objective = 2.0  # type: ignore[misc]


class TestErrors(unittest.TestCase):
    def test_invalid_configuration_error_carries_name_and_value(self):
        err = InvalidConfigurationError("step_size", 0.0, "must be in (0, 1]")
        self.assertIsInstance(err, ValueError)
        self.assertEqual(err.name, "step_size")
        self.assertEqual(err.value, 0.0)
        self.assertIn("step_size must be in (0, 1]", str(err))

    def test_ill_conditioned_error_mentions_component(self):
        err = IllConditionedUpdateError(4, "y^T s", -1.0)
        self.assertIsInstance(err, ArithmeticError)
        self.assertEqual(err.component, 4)
        self.assertIn("component 4", str(err))

    def test_ill_conditioned_error_for_aggregate(self):
        err = IllConditionedUpdateError(None, "B", math.nan)
        self.assertIsNone(err.component)
        self.assertIn("aggregate model", str(err))


if __name__ == "__main__":
    unittest.main()
