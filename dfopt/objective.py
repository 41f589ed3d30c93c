"""Bridge between NLopt's array callback and fixed-arity objectives."""

from __future__ import annotations

import inspect
import math
from typing import Any, Callable, Optional, Protocol

import numpy as np

from .core import Array, OptDir, StopCriteria

Objective = Callable[..., float]


class StopHandle(Protocol):
    """Anything that can be asked to stop a running solver."""

    def force_stop(self) -> Any: ...


def check_arity(func: Objective, n: int) -> None:
    """Raise ValueError if ``func`` cannot be called with ``n`` positional floats.

    Callables whose signature cannot be inspected (some builtins and
    extension types) are accepted as-is.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return
    try:
        sig.bind(*([0.0] * n))
    except TypeError as exc:
        raise ValueError(
            f"Objective {getattr(func, '__name__', func)!r} cannot take "
            f"{n} positional arguments: {exc}"
        ) from None


class ObjectiveAdapter:
    """
    Callable installed as the NLopt objective for one run.

    NLopt calls ``adapter(x, grad)`` with ``x`` holding the candidate point.
    The adapter unpacks the first ``n`` values of ``x`` into positional
    arguments for the user objective and returns its score.

    The stop condition is polled twice per evaluation, once before and once
    after it. When it fires the solver is force-stopped; the in-flight
    evaluation still runs and its score is returned normally. The second
    poll makes the solver stop before its next evaluation. Exceptions from
    either the objective or the stop condition are kept in ``error`` so the
    binding can re-raise them unchanged.

    The adapter also keeps the best point and score seen so far, which is
    what a run reports when NLopt ends by raising instead of returning.
    """

    def __init__(
        self,
        func: Objective,
        n: int,
        direction: OptDir,
        criteria: StopCriteria,
        stop_handle: Optional[StopHandle] = None,
    ) -> None:
        self.func = func
        self.n = n
        self.direction = direction
        self.criteria = criteria
        self.stop_handle = stop_handle
        self.nfev = 0
        self.best_x: Optional[Array] = None
        self.best_score = math.nan
        self.error: Optional[BaseException] = None
        self._stop_requested = False

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def _request_stop(self) -> None:
        if self._stop_requested:
            return
        self._stop_requested = True
        if self.stop_handle is not None:
            self.stop_handle.force_stop()

    def _poll_stop(self) -> None:
        try:
            stop = self.criteria.should_stop()
        except BaseException as exc:
            self.error = exc
            raise
        if stop:
            self._request_stop()

    def _is_better(self, score: float) -> bool:
        if math.isnan(score):
            return False
        if self.best_x is None or math.isnan(self.best_score):
            return True
        if self.direction is OptDir.MIN:
            return score < self.best_score
        return score > self.best_score

    def __call__(self, x: Array, grad: Optional[Array] = None) -> float:
        assert len(x) >= self.n, f"solver passed {len(x)} values, expected {self.n}"

        self._poll_stop()

        try:
            score = float(self.func(*x[: self.n]))
        except BaseException as exc:
            self.error = exc
            raise
        self.nfev += 1

        if self._is_better(score):
            self.best_x = np.array(x[: self.n], dtype=float)
            self.best_score = score

        self._poll_stop()

        return score

    def release(self) -> None:
        """Drop the solver reference so the context can be freed."""
        self.stop_handle = None


__all__ = ["Objective", "ObjectiveAdapter", "StopHandle", "check_arity"]
