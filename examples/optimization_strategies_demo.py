"""
Example: Local, global and composed optimization with dfopt

Minimizes a double-well objective whose deeper basin is on the opposite
side of the domain from the initial guess. The local optimizer stays in the
starting basin, while the global and composed optimizers find the deeper
one. The last example cancels a run from outside through the stop
condition.
"""

import time

from dfopt import (
    AlgNLoptMLSL,
    DefaultGlobalOptimizer,
    DefaultLocalOptimizer,
    Optimizer,
    StopCriteria,
    bounds,
)
from dfopt.logging import log_level

BOX = bounds([(-4.0, 4.0), (-4.0, 4.0)])
X0 = [3.0, 1.0]


def double_well(x, y):
    return (x * x - 4.0) ** 2 + x + (y - 1.0) ** 2


def report(title, result):
    print("=" * 60)
    print(title)
    print("=" * 60)
    print(f"Status: {result.status.name} ({result.message})")
    print(f"Optimum: {result.optimum}")
    print(f"Score: {result.score:.6f}")
    print(f"Evaluations: {result.nfev}")
    print()


def example_local():
    criteria = StopCriteria().with_abs_score_diff(1e-8)
    result = DefaultLocalOptimizer(criteria).to_min().optimize(double_well, X0, BOX)
    report("Example 1: Local subplex search", result)


def example_global():
    criteria = StopCriteria().with_abs_score_diff(1e-8).with_max_iterations(5000)
    opt = DefaultGlobalOptimizer(criteria).to_min()
    opt.seed(7)
    report("Example 2: Evolutionary global search", opt.optimize(double_well, X0, BOX))


def example_composed():
    criteria = StopCriteria().with_abs_score_diff(1e-8).with_max_iterations(3000)
    # INFO shows the run summary the binding logs to stderr.
    with log_level("INFO"):
        result = Optimizer[AlgNLoptMLSL](criteria).optimize(double_well, X0, BOX)
    report("Example 3: MLSL global search with subplex refinement", result)


def example_cancellation():
    deadline = time.monotonic() + 0.05
    criteria = (
        StopCriteria()
        .with_abs_score_diff(1e-12)
        .with_stop_condition(lambda: time.monotonic() > deadline)
    )

    def slow_double_well(x, y):
        time.sleep(0.001)
        return double_well(x, y)

    result = Optimizer[AlgNLoptMLSL](criteria).optimize(slow_double_well, X0, BOX)
    report("Example 4: Run cancelled after 50 ms", result)


if __name__ == "__main__":
    example_local()
    example_global()
    example_composed()
    example_cancellation()
    print("All optimization examples finished.")
