"""Tests for the objective adapter."""

from __future__ import annotations

import math

import numpy as np
import pytest

from dfopt.core import OptDir, StopCriteria
from dfopt.objective import ObjectiveAdapter, check_arity


class FakeStopHandle:
    def __init__(self) -> None:
        self.stops = 0

    def force_stop(self) -> None:
        self.stops += 1


def test_adapter_unpacks_exactly_n_values() -> None:
    seen = []

    def f(a, b):
        seen.append((a, b))
        return a - b

    adapter = ObjectiveAdapter(f, 2, OptDir.MIN, StopCriteria())
    score = adapter(np.array([5.0, 2.0, 99.0]), np.array([]))
    assert score == 3.0
    assert isinstance(score, float)
    assert seen == [(5.0, 2.0)]
    assert adapter.nfev == 1


def test_adapter_tracks_best_for_minimization() -> None:
    adapter = ObjectiveAdapter(lambda x: x * x, 1, OptDir.MIN, StopCriteria())
    for v in (3.0, -1.0, 2.0):
        adapter(np.array([v]), None)
    assert adapter.best_score == 1.0
    assert np.array_equal(adapter.best_x, np.array([-1.0]))


def test_adapter_tracks_best_for_maximization() -> None:
    adapter = ObjectiveAdapter(lambda x: x * x, 1, OptDir.MAX, StopCriteria())
    for v in (3.0, -1.0, 2.0):
        adapter(np.array([v]), None)
    assert adapter.best_score == 9.0
    assert np.array_equal(adapter.best_x, np.array([3.0]))


def test_adapter_best_point_is_a_copy() -> None:
    adapter = ObjectiveAdapter(lambda x: x, 1, OptDir.MIN, StopCriteria())
    buf = np.array([1.0])
    adapter(buf, None)
    buf[0] = 50.0
    assert adapter.best_x[0] == 1.0


def test_adapter_ignores_nan_scores_for_best() -> None:
    adapter = ObjectiveAdapter(lambda x: math.nan if x > 0 else x, 1, OptDir.MIN, StopCriteria())
    adapter(np.array([1.0]), None)
    assert adapter.best_x is None
    adapter(np.array([-2.0]), None)
    assert adapter.best_score == -2.0


def test_stop_condition_forces_stop_but_still_evaluates() -> None:
    handle = FakeStopHandle()
    criteria = StopCriteria().with_stop_condition(lambda: True)
    adapter = ObjectiveAdapter(lambda x: 2 * x, 1, OptDir.MIN, criteria, handle)
    assert adapter(np.array([4.0]), None) == 8.0
    assert adapter.stop_requested
    assert handle.stops == 1
    assert adapter.nfev == 1


def test_stop_condition_polled_after_evaluation() -> None:
    handle = FakeStopHandle()
    calls = []

    def f(x):
        calls.append(x)
        return x

    criteria = StopCriteria().with_stop_condition(lambda: len(calls) >= 1)
    adapter = ObjectiveAdapter(f, 1, OptDir.MIN, criteria, handle)
    adapter(np.array([1.0]), None)
    assert handle.stops == 1


def test_stop_condition_false_never_stops() -> None:
    handle = FakeStopHandle()
    adapter = ObjectiveAdapter(lambda x: x, 1, OptDir.MIN, StopCriteria(), handle)
    for v in range(5):
        adapter(np.array([float(v)]), None)
    assert handle.stops == 0
    assert not adapter.stop_requested


def test_adapter_records_objective_error() -> None:
    def boom(x):
        raise KeyError("bad")

    adapter = ObjectiveAdapter(boom, 1, OptDir.MIN, StopCriteria())
    with pytest.raises(KeyError):
        adapter(np.array([0.0]), None)
    assert isinstance(adapter.error, KeyError)
    assert adapter.nfev == 0


def test_adapter_records_stop_condition_error() -> None:
    def broken_predicate():
        raise ValueError("predicate broke")

    criteria = StopCriteria().with_stop_condition(broken_predicate)
    adapter = ObjectiveAdapter(lambda x: x, 1, OptDir.MIN, criteria)
    with pytest.raises(ValueError, match="predicate broke"):
        adapter(np.array([0.0]), None)
    assert isinstance(adapter.error, ValueError)
    assert adapter.nfev == 0


def test_stop_condition_polled_twice_per_evaluation() -> None:
    polls = []

    def predicate():
        polls.append(1)
        return False

    adapter = ObjectiveAdapter(
        lambda x: x, 1, OptDir.MIN, StopCriteria().with_stop_condition(predicate)
    )
    for v in range(10):
        adapter(np.array([float(v)]), None)
    assert adapter.nfev == 10
    assert len(polls) == 20


def test_release_drops_stop_handle() -> None:
    adapter = ObjectiveAdapter(lambda x: x, 1, OptDir.MIN, StopCriteria(), FakeStopHandle())
    adapter.release()
    assert adapter.stop_handle is None


def test_check_arity() -> None:
    check_arity(lambda x, y: x + y, 2)
    check_arity(lambda *args: sum(args), 4)
    check_arity(lambda x, y=0.0: x, 1)
    with pytest.raises(ValueError, match="cannot take 3 positional"):
        check_arity(lambda x, y: x + y, 3)
    with pytest.raises(ValueError):
        check_arity(lambda x, y: x + y, 1)
