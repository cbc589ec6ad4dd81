import contextlib
import io
import logging
import math
import unittest

from keyopt.domain._result import OptimizationResult, OptimizationStatus
from keyopt.infrastructure.reporters import (
    CompositeReporter,
    HistoryReporter,
    LoggingReporter,
    NullReporter,
    PrintReporter,
    SweepHistory,
)


def _result(status=OptimizationStatus.CONVERGED, objective=0.5, sweeps=3):
    return OptimizationResult(
        objective=objective, status=status, sweeps=sweeps, num_functions=4
    )


class TestSweepHistory(unittest.TestCase):
    def test_append_and_last(self):
        h = SweepHistory()
        self.assertIsNone(h.last())
        h.append_sweep(1, 2)
        h.append_sweep(2, 0.5)

        self.assertEqual(h.sweep, [1, 2])
        self.assertEqual(h.objective, [2.0, 0.5])
        self.assertIsInstance(h.objective[0], float)
        self.assertEqual(h.last(), 0.5)
        self.assertEqual(len(h), 2)
        self.assertEqual(h.as_dict(), {"sweep": [1, 2], "objective": [2.0, 0.5]})

    def test_non_finite_values_are_kept(self):
        h = SweepHistory()
        h.append_sweep(1, float("nan"))
        self.assertTrue(math.isnan(h.last()))


class TestPrintReporter(unittest.TestCase):
    def _capture(self, fn):
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            fn()
        return buf.getvalue()

    def test_prints_each_sweep_and_final_status(self):
        r = PrintReporter(verbose=1, max_iterations=10)

        def run():
            r.on_sweep(1, 1.25)
            r.on_finish(_result())

        out = self._capture(run)
        self.assertIn("Sweep 1/10 - objective: 1.250000", out)
        self.assertIn("status: converged", out)

    def test_verbose_zero_is_silent(self):
        r = PrintReporter(verbose=0)
        out = self._capture(lambda: (r.on_sweep(1, 1.0), r.on_finish(_result())))
        self.assertEqual(out, "")

    def test_verbose_n_prints_every_nth_sweep(self):
        r = PrintReporter(verbose=2)

        def run():
            for i in range(1, 5):
                r.on_sweep(i, float(i))

        lines = self._capture(run).strip().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].startswith("Sweep 2 "))


class TestLoggingReporter(unittest.TestCase):
    def test_sweeps_logged_at_info(self):
        r = LoggingReporter()
        with self.assertLogs("keyopt.iqn", level="INFO") as cm:
            r.on_sweep(3, 0.25)
        self.assertIn("IQN: iteration 3, objective 0.25.", cm.output[0])

    def test_divergence_logged_as_warning(self):
        r = LoggingReporter()
        with self.assertLogs("keyopt.iqn", level="WARNING") as cm:
            r.on_finish(_result(OptimizationStatus.DIVERGED, objective=float("nan")))
        self.assertIn("Try a smaller step size?", cm.output[0])
        self.assertTrue(cm.output[0].startswith("WARNING"))

    def test_convergence_mentions_tolerance(self):
        r = LoggingReporter(tolerance=1e-3)
        with self.assertLogs("keyopt.iqn", level="INFO") as cm:
            r.on_finish(_result())
        self.assertIn("minimized within tolerance 0.001", cm.output[0])

    def test_budget_exhaustion_logged(self):
        logger = logging.getLogger("keyopt.test.custom")
        r = LoggingReporter(logger, level=logging.DEBUG)
        with self.assertLogs(logger, level="DEBUG") as cm:
            r.on_finish(_result(OptimizationStatus.MAX_ITERATIONS, sweeps=7))
        self.assertIn("maximum iterations (7) reached", cm.output[0])


class TestHistoryAndComposite(unittest.TestCase):
    def test_history_reporter_records(self):
        r = HistoryReporter()
        r.on_sweep(1, 3.0)
        r.on_sweep(2, 1.0)
        res = _result()
        r.on_finish(res)

        self.assertEqual(r.history.objective, [3.0, 1.0])
        self.assertIs(r.result, res)

    def test_composite_fans_out_in_order(self):
        a, b = HistoryReporter(), HistoryReporter()
        c = CompositeReporter(a, NullReporter(), b)
        c.on_sweep(1, 2.0)
        c.on_finish(_result())

        self.assertEqual(a.history.objective, [2.0])
        self.assertEqual(b.history.objective, [2.0])
        self.assertIsNotNone(a.result)
        self.assertIsNotNone(b.result)


if __name__ == "__main__":
    unittest.main()
