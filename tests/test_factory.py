"""Tests for the optimizer factory."""

from __future__ import annotations

import math

import pytest

from dfopt import (
    ALGORITHMS,
    AlgNLoptMLSL,
    AlgNLoptSubplex,
    OptDir,
    ResultCode,
    create_optimizer,
)
from dfopt.factory import OptimizerConfig


def test_create_subplex_optimizer() -> None:
    config = OptimizerConfig(method="subplex", abs_score_diff=1e-6, max_iterations=200)
    opt = create_optimizer(config)
    assert opt.method == AlgNLoptSubplex
    assert opt.direction is OptDir.MIN
    cr = opt.get_criteria()
    assert cr.abs_score_diff == 1e-6
    assert cr.max_iterations == 200
    assert math.isnan(cr.rel_score_diff)
    assert math.isnan(cr.stop_score)


def test_create_optimizer_case_insensitive() -> None:
    opt = create_optimizer(OptimizerConfig(method="MLSL", direction="MAX"))
    assert opt.method == AlgNLoptMLSL
    assert opt.direction is OptDir.MAX


def test_every_catalog_name_is_creatable() -> None:
    for name, method in ALGORITHMS.items():
        assert create_optimizer(OptimizerConfig(method=name)).method == method


def test_create_optimizer_invalid_name_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported optimizer method"):
        create_optimizer(OptimizerConfig(method="gradient_descent"))


def test_create_optimizer_invalid_direction_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported direction"):
        create_optimizer(OptimizerConfig(method="subplex", direction="sideways"))


def test_create_optimizer_negative_budget_raises() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        create_optimizer(OptimizerConfig(method="subplex", max_iterations=-5))


def test_factory_stop_condition_is_installed(counting) -> None:
    obj = counting(lambda x: (x - 1.0) ** 2)
    opt = create_optimizer(
        OptimizerConfig(method="simplex", abs_score_diff=1e-10),
        stop_condition=lambda: obj.calls >= 3,
    )
    res = opt.optimize(obj, [4.0], [(-5, 5)])
    assert res.status is ResultCode.FORCED_STOP
    assert obj.calls == 3


def test_factory_seed_is_applied() -> None:
    config = OptimizerConfig(method="genetic", max_iterations=400, seed=11)
    box = [(-2, 2), (-2, 2)]
    f = lambda x, y: (x - 0.3) ** 2 + (y + 0.7) ** 2  # noqa: E731
    res1 = create_optimizer(config).optimize(f, [0.0, 0.0], box)
    res2 = create_optimizer(config).optimize(f, [0.0, 0.0], box)
    assert res1.score == res2.score
