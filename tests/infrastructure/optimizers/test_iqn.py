import math
import threading
import unittest

import numpy as np

from keyopt.domain._errors import DimensionMismatchError, InvalidConfigurationError
from keyopt.domain._result import OptimizationStatus
from keyopt.infrastructure.objectives import (
    CallableFiniteSum,
    LeastSquaresFunction,
    LogisticRegressionFunction,
    QuadraticFiniteSum,
)
from keyopt.infrastructure.optimizers import IQN, AggregateState
from keyopt.infrastructure.reporters import HistoryReporter


def toy_objective() -> CallableFiniteSum:
    # f_0(x) = (x - 1)^2, f_1(x) = (x + 1)^2; mean minimized at x = 0 with value 1
    return CallableFiniteSum(
        [lambda x: float((x[0] - 1.0) ** 2), lambda x: float((x[0] + 1.0) ** 2)],
        [lambda x: 2.0 * (x - 1.0), lambda x: 2.0 * (x + 1.0)],
    )


def nan_gradient_objective() -> CallableFiniteSum:
    f = lambda x: float(np.sum(x**2))
    grad = lambda x: np.full_like(x, np.nan)
    return CallableFiniteSum([f, f], [grad, grad])


class TestIQNConfiguration(unittest.TestCase):
    def test_defaults(self):
        opt = IQN()
        self.assertEqual(opt.step_size, 0.01)
        self.assertEqual(opt.max_iterations, 100000)
        self.assertEqual(opt.tolerance, 1e-5)
        self.assertEqual(opt.conditioning, "skip")
        self.assertIsNone(opt.last_result)

    def test_invalid_step_size_raises(self):
        for bad in (0.0, -0.5, 1.5, float("nan"), float("inf")):
            with self.assertRaises(InvalidConfigurationError):
                IQN(step_size=bad)

    def test_invalid_max_iterations_raises(self):
        for bad in (-1, 2.5, True):
            with self.assertRaises(InvalidConfigurationError):
                IQN(max_iterations=bad)

    def test_nan_tolerance_raises(self):
        with self.assertRaises(InvalidConfigurationError):
            IQN(tolerance=float("nan"))

    def test_negative_curvature_eps_raises(self):
        with self.assertRaises(InvalidConfigurationError):
            IQN(curvature_eps=-1.0)

    def test_unknown_conditioning_raises(self):
        with self.assertRaises(InvalidConfigurationError):
            IQN(conditioning="clamp")

    def test_unknown_start_point_raises(self):
        with self.assertRaises(ValueError):
            IQN(start_point="nope")

    def test_empty_objective_rejected_before_any_state(self):
        opt = IQN()
        with self.assertRaises(InvalidConfigurationError):
            opt.minimize(CallableFiniteSum([], []), np.zeros(2))
        self.assertIsNone(opt.model)

    def test_iterate_must_be_float_ndarray(self):
        opt = IQN()
        with self.assertRaises(TypeError):
            opt.minimize(toy_objective(), [0.0])  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            opt.minimize(toy_objective(), np.zeros(1, dtype=np.int64))

    def test_gradient_size_mismatch_raises(self):
        bad = CallableFiniteSum([lambda x: 0.0], [lambda x: np.zeros(3)])
        with self.assertRaises(DimensionMismatchError):
            IQN(rng=0).minimize(bad, np.zeros(2))


class TestIQNToyScenario(unittest.TestCase):
    def test_converges_to_shared_minimizer(self):
        x = np.array([0.1])
        opt = IQN(step_size=1.0, max_iterations=50, tolerance=1.0 + 1e-8, start_point="zeros")

        result = opt.minimize(toy_objective(), x)

        self.assertEqual(result.status, OptimizationStatus.CONVERGED)
        self.assertTrue(result.success)
        np.testing.assert_allclose(x, [0.0], atol=1e-6)
        self.assertAlmostEqual(result.objective, 1.0, places=8)

    def test_converges_from_random_seed_point(self):
        x = np.array([0.1])
        result = IQN(step_size=1.0, max_iterations=100, tolerance=1.0 + 1e-8, rng=0).minimize(
            toy_objective(), x
        )
        self.assertTrue(result.converged)
        np.testing.assert_allclose(x, [0.0], atol=1e-4)

    def test_tolerance_above_minimum_converges_after_first_sweep(self):
        x = np.array([0.1])
        result = IQN(step_size=1.0, max_iterations=50, tolerance=2.0, start_point="zeros").minimize(
            toy_objective(), x
        )
        self.assertEqual(result.status, OptimizationStatus.CONVERGED)
        self.assertEqual(result.sweeps, 1)

    def test_optimize_returns_final_objective(self):
        x = np.array([0.1])
        opt = IQN(step_size=1.0, max_iterations=50, tolerance=2.0, start_point="zeros")
        value = opt.optimize(toy_objective(), x)
        self.assertEqual(value, opt.last_result.objective)

    def test_unbounded_budget_runs_until_convergence(self):
        x = np.array([0.1])
        result = IQN(step_size=1.0, max_iterations=0, tolerance=1.0 + 1e-8, rng=1).minimize(
            toy_objective(), x
        )
        self.assertTrue(result.converged)


class TestIQNConvergence(unittest.TestCase):
    def test_convex_quadratic_reaches_minimum(self):
        q = QuadraticFiniteSum.random(8, 4, rng=3, min_eig=1.0, max_eig=2.0)
        x_star = q.minimizer()
        f_star = q.mean(x_star)

        x = np.zeros(4)
        result = IQN(
            step_size=1.0, max_iterations=500, tolerance=f_star + 1e-8, rng=7
        ).minimize(q, x)

        self.assertTrue(result.converged)
        self.assertLess(result.objective, f_star + 1e-8)
        np.testing.assert_allclose(x, x_star, atol=1e-3)

    def test_aggregate_consistent_after_run(self):
        q = QuadraticFiniteSum.random(6, 3, rng=5)
        opt = IQN(step_size=0.5, max_iterations=10, tolerance=-1.0, rng=2)
        opt.minimize(q, np.zeros(3))

        rebuilt = AggregateState.from_table(opt.model.table)
        self.assertTrue(opt.model.aggregate.allclose(rebuilt, rtol=1e-8, atol=1e-8))
        for Q in opt.model.table.curvatures:
            np.testing.assert_allclose(Q, Q.T, rtol=0, atol=1e-12)

    def test_matrix_shaped_iterate_is_overwritten_in_place(self):
        rng = np.random.default_rng(11)
        A = rng.standard_normal((3, 60))
        w = np.array([1.0, -2.0, 0.5])
        f = LeastSquaresFunction(A, A.T @ w)

        x = np.zeros((3, 1))
        buffer_id = id(x)
        result = IQN(step_size=1.0, max_iterations=300, tolerance=1e-10, rng=4).minimize(f, x)

        self.assertEqual(id(x), buffer_id)
        self.assertEqual(x.shape, (3, 1))
        self.assertTrue(result.converged)
        np.testing.assert_allclose(x.ravel(), w, atol=1e-3)

    def test_logistic_regression_separates_clusters(self):
        rng = np.random.default_rng(21)
        neg = rng.normal(-2.0, 0.5, size=(2, 20))
        pos = rng.normal(2.0, 0.5, size=(2, 20))
        A = np.hstack([neg, pos])
        labels = np.concatenate([np.zeros(20), np.ones(20)])
        f = LogisticRegressionFunction(A, labels, lambda_=0.1)

        x = np.zeros(3)
        result = IQN(step_size=1.0, max_iterations=30, tolerance=-1.0, rng=0).minimize(f, x)

        self.assertEqual(result.status, OptimizationStatus.MAX_ITERATIONS)
        self.assertTrue(math.isfinite(result.objective))
        self.assertLess(result.objective, math.log(2.0))
        accuracy = np.mean(f.classify(x) == labels)
        self.assertGreaterEqual(accuracy, 0.95)

    def test_same_seed_is_deterministic(self):
        q = QuadraticFiniteSum.random(5, 3, rng=8)
        x1 = np.zeros(3)
        x2 = np.zeros(3)
        r1 = IQN(step_size=0.5, max_iterations=5, tolerance=-1.0, rng=42).minimize(q, x1)
        r2 = IQN(step_size=0.5, max_iterations=5, tolerance=-1.0, rng=42).minimize(q, x2)
        np.testing.assert_array_equal(x1, x2)
        self.assertEqual(r1.objective, r2.objective)


class TestIQNStopping(unittest.TestCase):
    def test_nan_gradient_diverges_within_one_sweep(self):
        x = np.ones(2)
        reporter = HistoryReporter()
        opt = IQN(step_size=0.5, max_iterations=100, tolerance=1e-3, start_point="zeros", reporter=reporter)

        result = opt.minimize(nan_gradient_objective(), x)

        self.assertEqual(result.status, OptimizationStatus.DIVERGED)
        self.assertFalse(result.success)
        self.assertEqual(result.sweeps, 1)
        self.assertFalse(math.isfinite(result.objective))
        self.assertEqual(len(reporter.history), 1)

    def test_nan_gradient_diverges_under_every_conditioning_policy(self):
        for conditioning in ("skip", "raise", "ignore"):
            with self.subTest(conditioning=conditioning):
                opt = IQN(step_size=0.5, max_iterations=100, rng=0, conditioning=conditioning)

                result = opt.minimize(nan_gradient_objective(), np.ones(2))

                self.assertEqual(result.status, OptimizationStatus.DIVERGED)
                self.assertEqual(result.sweeps, 1)
                self.assertTrue(math.isnan(result.objective))

    def test_infinite_objective_diverges(self):
        f = CallableFiniteSum([lambda x: math.inf], [lambda x: np.zeros_like(x)])
        result = IQN(rng=0, max_iterations=10).minimize(f, np.ones(2))
        self.assertEqual(result.status, OptimizationStatus.DIVERGED)
        self.assertEqual(result.objective, math.inf)

    def test_budget_exhaustion_returns_best_effort(self):
        q = QuadraticFiniteSum.random(4, 2, rng=9)
        x = np.zeros(2)
        result = IQN(step_size=0.5, max_iterations=1, tolerance=-1.0, rng=3).minimize(q, x)

        self.assertEqual(result.status, OptimizationStatus.MAX_ITERATIONS)
        self.assertTrue(result.success)
        self.assertFalse(result.converged)
        self.assertEqual(result.sweeps, 1)
        self.assertAlmostEqual(result.objective, q.mean(x))

    def test_should_stop_is_polled_between_sweeps(self):
        q = QuadraticFiniteSum.random(3, 2, rng=10)
        polls = []

        def should_stop():
            polls.append(1)
            return len(polls) > 2

        result = IQN(step_size=0.5, max_iterations=50, tolerance=-1.0, rng=0).minimize(
            q, np.zeros(2), should_stop=should_stop
        )
        self.assertEqual(result.status, OptimizationStatus.CANCELLED)
        self.assertEqual(result.sweeps, 2)

    def test_preset_event_cancels_before_first_sweep(self):
        stop = threading.Event()
        stop.set()
        x = np.ones(2)

        result = IQN(rng=0, start_point="zeros").minimize(
            QuadraticFiniteSum.random(3, 2, rng=1), x, should_stop=stop.is_set
        )

        self.assertEqual(result.status, OptimizationStatus.CANCELLED)
        self.assertEqual(result.sweeps, 0)
        self.assertTrue(math.isnan(result.objective))
        np.testing.assert_array_equal(x, np.ones(2))

    def test_reporter_sees_every_sweep_and_the_result(self):
        reporter = HistoryReporter()
        q = QuadraticFiniteSum.random(3, 2, rng=12)
        result = IQN(step_size=0.5, max_iterations=4, tolerance=-1.0, rng=0, reporter=reporter).minimize(
            q, np.zeros(2)
        )
        self.assertEqual(reporter.history.sweep, [1, 2, 3, 4])
        self.assertIs(reporter.result, result)
        self.assertEqual(reporter.history.last(), result.objective)


class TestIQNStepSizeExtremes(unittest.TestCase):
    def test_tiny_step_size_keeps_iterate_nearly_stationary(self):
        q = QuadraticFiniteSum.random(4, 3, rng=13)
        start = np.ones(3)
        x = start.copy()

        result = IQN(step_size=1e-8, max_iterations=3, tolerance=-1.0, rng=0).minimize(q, x)

        self.assertTrue(math.isfinite(result.objective))
        np.testing.assert_allclose(x, start, atol=1e-5)

    def test_unit_step_size_runs(self):
        q = QuadraticFiniteSum.random(4, 3, rng=14)
        x = np.ones(3)
        result = IQN(step_size=1.0, max_iterations=3, tolerance=-1.0, rng=0).minimize(q, x)
        self.assertTrue(math.isfinite(result.objective))


if __name__ == "__main__":
    unittest.main()
