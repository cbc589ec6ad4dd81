"""
scripts/bench_iqn_least_squares.py

IQN convergence microbenchmark (NOT a unit test) for KeyOpt.

Minimizes a synthetic least-squares problem

    F(x) = (1/m) * sum_i (a_i^T x - b_i)^2

with IQN and reports, per step size:
- number of sweeps until the tolerance is met (or the budget runs out)
- final objective and distance to the least-squares solution
- wall-clock time (median over repeats)

Timing policy
-------------
- Problem generation is excluded from the timed region.
- Each repeat starts from the same iterate and uses the same seed, so repeats
  only differ by timing noise.

Usage
-----
python scripts/bench_iqn_least_squares.py
python scripts/bench_iqn_least_squares.py --dim 20 --num-functions 2000 --step-sizes 1.0 0.5 0.1
python scripts/bench_iqn_least_squares.py --noise 0.1 --tolerance 0.011 --verbose 10
"""

from __future__ import annotations

import argparse
import os
import statistics
import sys
import time
from dataclasses import dataclass
from typing import Callable

import numpy as np

# -------------------------
# Make repo_root/src importable
# -------------------------
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from keyopt.domain._result import OptimizationResult
from keyopt.infrastructure.objectives import LeastSquaresFunction
from keyopt.infrastructure.optimizers import IQN
from keyopt.infrastructure.reporters import PrintReporter


@dataclass(frozen=True)
class Case:
    step_size: float
    result: OptimizationResult
    distance: float
    seconds: float


def _time_one(fn: Callable[[], OptimizationResult], *, repeats: int):
    ts: list[float] = []
    result = None
    for _ in range(repeats):
        t0 = time.perf_counter()
        result = fn()
        t1 = time.perf_counter()
        ts.append(t1 - t0)
    return result, ts


def _fmt_seconds(x: float) -> str:
    if x < 1e-3:
        return f"{x*1e6:.2f} µs"
    if x < 1:
        return f"{x*1e3:.2f} ms"
    return f"{x:.3f} s"


def make_problem(dim: int, num_functions: int, noise: float, seed: int):
    rng = np.random.default_rng(seed)
    A = rng.standard_normal((dim, num_functions))
    w = rng.standard_normal(dim)
    b = A.T @ w + noise * rng.standard_normal(num_functions)
    return LeastSquaresFunction(A, b)


def run_case(
    objective: LeastSquaresFunction,
    *,
    step_size: float,
    max_iterations: int,
    tolerance: float,
    seed: int,
    repeats: int,
    verbose: int,
) -> Case:
    x_star = objective.minimizer()
    dim = x_star.size
    final = np.zeros(dim)

    def once() -> OptimizationResult:
        x = np.zeros(dim)
        opt = IQN(
            step_size=step_size,
            max_iterations=max_iterations,
            tolerance=tolerance,
            rng=seed,
            reporter=PrintReporter(verbose, max_iterations=max_iterations),
        )
        result = opt.minimize(objective, x)
        final[...] = x
        return result

    result, ts = _time_one(once, repeats=repeats)
    return Case(
        step_size=step_size,
        result=result,
        distance=float(np.linalg.norm(final - x_star)),
        seconds=statistics.median(ts),
    )


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--dim", type=int, default=10)
    ap.add_argument("--num-functions", type=int, default=500)
    ap.add_argument("--noise", type=float, default=0.0)
    ap.add_argument("--step-sizes", type=float, nargs="+", default=[1.0, 0.5, 0.1])
    ap.add_argument("--max-iterations", type=int, default=100)
    ap.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Objective threshold (default: optimum + 1e-8).",
    )
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--repeats", type=int, default=3)
    ap.add_argument("--verbose", type=int, default=0)
    args = ap.parse_args()

    objective = make_problem(args.dim, args.num_functions, args.noise, args.seed)
    x_star = objective.minimizer()
    f_star = sum(
        objective.evaluate(x_star, i) for i in range(objective.num_functions())
    ) / objective.num_functions()
    tolerance = args.tolerance if args.tolerance is not None else f_star + 1e-8

    print(
        f"least squares: dim={args.dim} m={args.num_functions} "
        f"noise={args.noise} f*={f_star:.6e} tolerance={tolerance:.6e}"
    )
    print(f"{'step':>6}  {'status':>15}  {'sweeps':>6}  {'objective':>12}  "
          f"{'|x - x*|':>10}  {'time':>10}")

    for step_size in args.step_sizes:
        case = run_case(
            objective,
            step_size=step_size,
            max_iterations=args.max_iterations,
            tolerance=tolerance,
            seed=args.seed,
            repeats=args.repeats,
            verbose=args.verbose,
        )
        print(
            f"{case.step_size:>6.3g}  {case.result.status.value:>15}  "
            f"{case.result.sweeps:>6d}  {case.result.objective:>12.6e}  "
            f"{case.distance:>10.3e}  {_fmt_seconds(case.seconds):>10}"
        )


if __name__ == "__main__":
    main()
