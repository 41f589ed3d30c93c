"""
Generic optimizer front door.

``Optimizer[tag]`` specialises the optimizer for one algorithm tag. The
specialisation is looked up when the class is subscripted, so an
unsupported tag fails where the optimizer type is spelled out (at import
time for module-level aliases), never halfway through a run.

Example
-------
>>> from dfopt import DefaultLocalOptimizer, StopCriteria, bounds
>>> opt = DefaultLocalOptimizer(StopCriteria().with_abs_score_diff(1e-8))
>>> res = opt.to_min().optimize(
...     lambda x, y: (x - 3) ** 2 + (y + 1) ** 2,
...     [0.0, 0.0],
...     bounds([(-10, 10), (-10, 10)]),
... )
>>> [round(float(v), 2) for v in res.optimum]
[3.0, -1.0]
"""

from __future__ import annotations

from functools import lru_cache
from typing import ClassVar, Iterable, Optional, Type

from .algorithms import AlgNLoptGenetic, AlgNLoptSubplex, Method
from .binding import NLoptBinding, UnsupportedMethodError, binding_for
from .core import BoundLike, OptDir, Result, StopCriteria, bounds as make_bounds, initvals
from .objective import Objective, check_arity


@lru_cache(maxsize=None)
def _specialize(method: Method) -> Type["Optimizer"]:
    binding = binding_for(method)
    return type(
        f"Optimizer[{method!r}]",
        (Optimizer,),
        {"_method": method, "_binding": binding, "__module__": __name__},
    )


class Optimizer:
    """
    Optimizer for one algorithm tag.

    Holds the optimization direction, the stop criteria and an optional
    seed. Each call to :meth:`optimize` builds a fresh solver binding, so
    one optimizer can be reused for many runs.
    """

    _method: ClassVar[Optional[Method]] = None
    _binding: ClassVar[Optional[Type[NLoptBinding]]] = None

    def __class_getitem__(cls, method: Method) -> Type["Optimizer"]:
        return _specialize(method)

    def __init__(self, criteria: Optional[StopCriteria] = None) -> None:
        if self._binding is None:
            raise UnsupportedMethodError(
                "Optimizer needs a method; use Optimizer[method](...)"
            )
        self._criteria = criteria if criteria is not None else StopCriteria()
        self._direction = OptDir.MIN
        self._seed: Optional[int] = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(direction={self._direction.value!r}, "
            f"criteria={self._criteria!r})"
        )

    @property
    def method(self) -> Method:
        return self._method

    @property
    def direction(self) -> OptDir:
        return self._direction

    def to_min(self) -> "Optimizer":
        self._direction = OptDir.MIN
        return self

    def to_max(self) -> "Optimizer":
        self._direction = OptDir.MAX
        return self

    def set_criteria(self, criteria: StopCriteria) -> "Optimizer":
        self._criteria = criteria
        return self

    def get_criteria(self) -> StopCriteria:
        return self._criteria

    def seed(self, value: int) -> None:
        """Seed the random state of randomized algorithms before each run."""
        self._seed = int(value)

    def optimize(
        self,
        func: Objective,
        initial: Iterable[float],
        bounds: Iterable[BoundLike],
    ) -> Result:
        """
        Run one optimization.

        Parameters
        ----------
        func:
            Objective taking N floats as positional arguments and returning
            a score.
        initial:
            Initial guess of length N. It should lie within ``bounds``.
        bounds:
            N :class:`~dfopt.core.Bound` objects or ``(min, max)`` pairs.

        Returns
        -------
        Result
            Termination code with the best point and score observed. Solver
            failures are reported through the code, not raised.

        Raises
        ------
        ValueError
            If ``bounds`` or ``func`` do not match the dimension of ``initial``.
        """
        x0 = initvals(initial)
        bs = make_bounds(bounds)
        n = len(x0)
        if n == 0:
            raise ValueError("Cannot optimize over zero dimensions.")
        if len(bs) != n:
            raise ValueError(
                f"Got {len(bs)} bounds for a {n}-dimensional initial point."
            )
        check_arity(func, n)

        binding = self._binding(self._method, self._criteria, self._direction, self._seed)
        return binding.optimize(func, x0, bs)


# Pre-crafted global and local optimizers that work well.
DefaultGlobalOptimizer = Optimizer[AlgNLoptGenetic]
DefaultLocalOptimizer = Optimizer[AlgNLoptSubplex]


__all__ = ["DefaultGlobalOptimizer", "DefaultLocalOptimizer", "Optimizer"]
