"""
Core data model shared by every optimizer in dfopt.

A run is described by a box of :class:`Bound` intervals (one per input
dimension), an initial point, and a :class:`StopCriteria`. Every run, however
it ends, produces a :class:`Result` carrying the solver's termination code
together with the best point and score observed.

Numeric stop criteria use NaN as the "not set" sentinel so that a threshold
of exactly zero stays a legitimate value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Callable, Iterable, Sequence, Tuple, Union

import numpy as np

Array = np.ndarray
StopPredicate = Callable[[], bool]

UNSET = math.nan


class ResultCode(IntEnum):
    """Termination codes reported by the underlying NLopt solvers."""

    SUCCESS = 1
    STOPVAL_REACHED = 2
    FTOL_REACHED = 3
    XTOL_REACHED = 4
    MAXEVAL_REACHED = 5
    MAXTIME_REACHED = 6
    FAILURE = -1
    INVALID_ARGS = -2
    OUT_OF_MEMORY = -3
    ROUNDOFF_LIMITED = -4
    FORCED_STOP = -5


_MESSAGES = {
    ResultCode.SUCCESS: "Optimization converged.",
    ResultCode.STOPVAL_REACHED: "Target stop score reached.",
    ResultCode.FTOL_REACHED: "Score tolerance satisfied.",
    ResultCode.XTOL_REACHED: "Parameter tolerance satisfied.",
    ResultCode.MAXEVAL_REACHED: "Maximum evaluations reached.",
    ResultCode.MAXTIME_REACHED: "Maximum time reached.",
    ResultCode.FAILURE: "Solver failure.",
    ResultCode.INVALID_ARGS: "Invalid arguments (check bounds and initial point).",
    ResultCode.OUT_OF_MEMORY: "Solver ran out of memory.",
    ResultCode.ROUNDOFF_LIMITED: "Round-off errors prevented further progress.",
    ResultCode.FORCED_STOP: "Stopped by the stop condition.",
}


class OptDir(Enum):
    """Direction of the optimization."""

    MIN = "min"
    MAX = "max"


@dataclass(frozen=True)
class Bound:
    """Closed interval of admissible values for one input dimension.

    The default interval is unbounded on both sides. ``min <= max`` is
    assumed by the solvers but not checked here; a reversed bound is
    reported by the run as ``INVALID_ARGS``.
    """

    min: float = -math.inf
    max: float = math.inf

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


Bounds = Tuple[Bound, ...]
BoundLike = Union[Bound, Sequence[float]]


def bounds(items: Iterable[BoundLike]) -> Bounds:
    """Build a bound set from :class:`Bound` objects or ``(min, max)`` pairs."""
    result = []
    for item in items:
        if isinstance(item, Bound):
            result.append(item)
        else:
            lo, hi = item
            result.append(Bound(float(lo), float(hi)))
    return tuple(result)


def initvals(values: Iterable[float]) -> Array:
    """Copy an initial guess into a fresh 1-D float array."""
    return np.array(list(values), dtype=float)


def lower_bounds(bs: Bounds) -> Array:
    return np.array([b.min for b in bs], dtype=float)


def upper_bounds(bs: Bounds) -> Array:
    return np.array([b.max for b in bs], dtype=float)


def _never() -> bool:
    return False


@dataclass(frozen=True)
class StopCriteria:
    """
    Conditions under which a search ends.

    Attributes:
        abs_score_diff: Stop when successive best scores differ by less than
            this amount. NaN disables the criterion.
        rel_score_diff: Stop when successive best scores differ by less than
            this fraction of the score. NaN disables the criterion.
        stop_score: Stop as soon as a score at least this good (according to
            the optimization direction) is found. NaN disables the criterion.
        max_iterations: Maximum number of objective evaluations; ``0`` means
            unbounded.
        stop_condition: Zero-argument predicate polled twice per objective
            evaluation, right before and right after it. When it returns True
            the run ends early and returns the best point found so far.
            Exceptions it raises propagate out of ``optimize`` unchanged.

    Instances are immutable. The ``with_*`` methods return modified copies
    so settings can be chained::

        criteria = StopCriteria().with_abs_score_diff(1e-6).with_max_iterations(500)
    """

    abs_score_diff: float = UNSET
    rel_score_diff: float = UNSET
    stop_score: float = UNSET
    max_iterations: int = 0
    stop_condition: StopPredicate = field(default=_never, compare=False)

    def __post_init__(self) -> None:
        if self.max_iterations < 0:
            raise ValueError("max_iterations must be non-negative.")
        if int(self.max_iterations) != self.max_iterations:
            raise ValueError("max_iterations must be an integer.")
        object.__setattr__(self, "max_iterations", int(self.max_iterations))

    def with_abs_score_diff(self, value: float) -> "StopCriteria":
        return replace(self, abs_score_diff=float(value))

    def with_rel_score_diff(self, value: float) -> "StopCriteria":
        return replace(self, rel_score_diff=float(value))

    def with_stop_score(self, value: float) -> "StopCriteria":
        return replace(self, stop_score=float(value))

    def with_max_iterations(self, value: int) -> "StopCriteria":
        return replace(self, max_iterations=value)

    def with_stop_condition(self, predicate: StopPredicate) -> "StopCriteria":
        return replace(self, stop_condition=predicate)

    def is_set(self, name: str) -> bool:
        """Return True if the named numeric criterion is active."""
        value = getattr(self, name)
        if name == "max_iterations":
            return value > 0
        return not math.isnan(value)

    def should_stop(self) -> bool:
        return bool(self.stop_condition())


@dataclass
class Result:
    """
    Outcome of one optimization run.

    Attributes:
        resultcode: Solver termination code, see :class:`ResultCode`. Positive
            codes are successful, negative codes are failures except
            ``FORCED_STOP`` which marks an early return requested by the stop
            condition.
        optimum: Best point observed.
        score: Objective value at ``optimum`` (NaN if nothing was evaluated).
        nfev: Number of objective evaluations performed.
    """

    resultcode: int
    optimum: Array
    score: float
    nfev: int = 0

    @property
    def status(self) -> ResultCode:
        return ResultCode(self.resultcode)

    @property
    def success(self) -> bool:
        return self.resultcode > 0 or self.resultcode == ResultCode.FORCED_STOP

    @property
    def message(self) -> str:
        try:
            return _MESSAGES[ResultCode(self.resultcode)]
        except ValueError:
            return f"Unknown result code {self.resultcode}."


__all__ = [
    "Array",
    "Bound",
    "BoundLike",
    "Bounds",
    "OptDir",
    "Result",
    "ResultCode",
    "StopCriteria",
    "StopPredicate",
    "UNSET",
    "bounds",
    "initvals",
    "lower_bounds",
    "upper_bounds",
]
