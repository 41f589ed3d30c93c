"""Factory for creating optimizers from configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .algorithms import ALGORITHMS
from .core import UNSET, StopCriteria, StopPredicate
from .optimizer import Optimizer


@dataclass(frozen=True)
class OptimizerConfig:
    """
    Configuration for creating an optimizer by name.

    Args:
        method: Algorithm name, one of the keys of
            :data:`dfopt.algorithms.ALGORITHMS` ("genetic", "subplex",
            "simplex", "mlsl", "direct", "cobyla"). Case-insensitive.
        direction: "min" or "max". Defaults to "min".
        abs_score_diff: Absolute score tolerance. NaN leaves it unset.
        rel_score_diff: Relative score tolerance. NaN leaves it unset.
        stop_score: Target score. NaN leaves it unset.
        max_iterations: Evaluation budget, 0 for unbounded.
        seed: Seed for randomized algorithms. None leaves the solver's
            random state alone.
    """

    method: str
    direction: str = "min"
    abs_score_diff: float = UNSET
    rel_score_diff: float = UNSET
    stop_score: float = UNSET
    max_iterations: int = 0
    seed: Optional[int] = None

    def to_criteria(self, stop_condition: Optional[StopPredicate] = None) -> StopCriteria:
        criteria = StopCriteria(
            abs_score_diff=self.abs_score_diff,
            rel_score_diff=self.rel_score_diff,
            stop_score=self.stop_score,
            max_iterations=self.max_iterations,
        )
        if stop_condition is not None:
            criteria = criteria.with_stop_condition(stop_condition)
        return criteria


def create_optimizer(
    config: OptimizerConfig, stop_condition: Optional[StopPredicate] = None
) -> Optimizer:
    """
    Create an optimizer from a configuration.

    Args:
        config: Optimizer configuration.
        stop_condition: Optional cancellation predicate added to the stop
            criteria built from ``config``.

    Returns:
        An optimizer for the named algorithm, with direction, criteria and
        seed applied.

    Raises:
        ValueError: If the method or direction name is not supported.
    """
    name_lower = config.method.lower()
    if name_lower not in ALGORITHMS:
        raise ValueError(
            f"Unsupported optimizer method '{config.method}'. "
            f"Supported methods: {sorted(ALGORITHMS)}"
        )

    direction = config.direction.lower()
    if direction not in ("min", "max"):
        raise ValueError(
            f"Unsupported direction '{config.direction}'. "
            f"Supported directions: ['max', 'min']"
        )

    opt = Optimizer[ALGORITHMS[name_lower]](config.to_criteria(stop_condition))
    if direction == "max":
        opt.to_max()
    else:
        opt.to_min()
    if config.seed is not None:
        opt.seed(config.seed)
    return opt


__all__ = ["OptimizerConfig", "create_optimizer"]
