"""
Solver bindings: one class per kind of algorithm tag.

A binding lives for exactly one ``optimize`` call. It acquires the NLopt
context(s) for the tag, configures bounds and stop criteria, installs the
objective adapter, runs, and releases everything again whether the run
converged, was force-stopped, failed, or the objective raised.

Bindings are registered per tag type with :func:`register_binding`;
:func:`binding_for` is how ``Optimizer[tag]`` finds them.
"""

from __future__ import annotations

import math
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, Type

import nlopt
import numpy as np

from .algorithms import Method, NLoptAlg, NLoptAlgComb, describe
from .core import (
    Array,
    Bounds,
    OptDir,
    Result,
    ResultCode,
    StopCriteria,
    lower_bounds,
    upper_bounds,
)
from .logging import get_logger
from .objective import Objective, ObjectiveAdapter

logger = get_logger(__name__)


class UnsupportedMethodError(TypeError):
    """Raised when no binding is registered for an algorithm tag."""


_BINDINGS: Dict[type, Type["NLoptBinding"]] = {}


def register_binding(tag_type: type) -> Callable[[Type["NLoptBinding"]], Type["NLoptBinding"]]:
    """Class decorator registering a binding for every tag of ``tag_type``."""

    def decorator(cls: Type["NLoptBinding"]) -> Type["NLoptBinding"]:
        _BINDINGS[tag_type] = cls
        return cls

    return decorator


def binding_for(method: Method) -> Type["NLoptBinding"]:
    """Return the binding class for ``method`` or raise UnsupportedMethodError."""
    for tag_type in type(method).__mro__:
        if tag_type in _BINDINGS:
            return _BINDINGS[tag_type]
    raise UnsupportedMethodError(
        f"Optimizer unimplemented for given method: {method!r}"
    )


def _nlopt_error(name: str) -> Optional[Type[BaseException]]:
    exc_type = getattr(nlopt, name, None)
    if isinstance(exc_type, type) and issubclass(exc_type, BaseException):
        return exc_type
    return None


# NLopt reports every negative code by raising; these map them back. The
# exception classes differ between nlopt releases, so missing ones are
# skipped. Order matters: the catch-all entries come last.
_FAILURE_CODES = tuple(
    (exc_type, code)
    for exc_type, code in (
        (_nlopt_error("forced_stop"), ResultCode.FORCED_STOP),
        (_nlopt_error("ForcedStop"), ResultCode.FORCED_STOP),
        (_nlopt_error("roundoff_limited"), ResultCode.ROUNDOFF_LIMITED),
        (_nlopt_error("RoundoffLimited"), ResultCode.ROUNDOFF_LIMITED),
        (_nlopt_error("invalid_argument"), ResultCode.INVALID_ARGS),
        (ValueError, ResultCode.INVALID_ARGS),
        (MemoryError, ResultCode.OUT_OF_MEMORY),
        (RuntimeError, ResultCode.FAILURE),
        (_nlopt_error("exception"), ResultCode.FAILURE),
    )
    if exc_type is not None
)
_NLOPT_ERRORS = tuple(exc_type for exc_type, _ in _FAILURE_CODES)


def _failure_code(exc_type: Type[BaseException]) -> ResultCode:
    for failure_type, code in _FAILURE_CODES:
        if issubclass(exc_type, failure_type):
            return code
    return ResultCode.FAILURE


@contextmanager
def nlopt_context(algorithm: int, n: int) -> Iterator[nlopt.opt]:
    """Scoped NLopt context that logs its release on exit.

    The context object itself is freed once the last reference to it goes,
    which for the bindings is when ``optimize`` returns or raises.
    """
    opt = nlopt.opt(algorithm, n)
    try:
        yield opt
    finally:
        logger.debug("releasing %s context", opt.get_algorithm_name())


class NLoptBinding:
    """Binding for single-algorithm tags (:class:`NLoptAlg`)."""

    def __init__(
        self,
        method: Method,
        criteria: StopCriteria,
        direction: OptDir = OptDir.MIN,
        seed: Optional[int] = None,
    ) -> None:
        self.method = method
        self.criteria = criteria
        self.direction = direction
        self.seed = seed

    def set_up(
        self, opt: nlopt.opt, adapter: ObjectiveAdapter, bounds: Bounds
    ) -> None:
        """Install bounds, the active stop criteria, and the objective on ``opt``."""
        opt.set_lower_bounds(lower_bounds(bounds))
        opt.set_upper_bounds(upper_bounds(bounds))

        cr = self.criteria
        if cr.is_set("abs_score_diff"):
            opt.set_ftol_abs(cr.abs_score_diff)
        if cr.is_set("rel_score_diff"):
            opt.set_ftol_rel(cr.rel_score_diff)
        if cr.is_set("stop_score"):
            opt.set_stopval(cr.stop_score)
        if cr.is_set("max_iterations"):
            opt.set_maxeval(cr.max_iterations)

        if self.direction is OptDir.MIN:
            opt.set_min_objective(adapter)
        else:
            opt.set_max_objective(adapter)

        logger.debug(
            "configured %s: n=%d dir=%s ftol_abs=%s ftol_rel=%s stopval=%s maxeval=%d",
            opt.get_algorithm_name(),
            adapter.n,
            self.direction.value,
            cr.abs_score_diff,
            cr.rel_score_diff,
            cr.stop_score,
            cr.max_iterations,
        )

    def run(
        self,
        opt: nlopt.opt,
        adapter: ObjectiveAdapter,
        initvals: Array,
        configure: Callable[[], None],
    ) -> Result:
        """Configure and run ``opt`` from ``initvals``, converting the outcome into a Result.

        ``configure`` installs everything on the context(s); NLopt errors it
        raises are reported through the result code like run failures.
        """
        if self.seed is not None:
            nlopt.srand(int(self.seed))

        x0 = np.array(initvals, dtype=float)
        try:
            configure()
            optimum = np.asarray(opt.optimize(x0), dtype=float)
        except _NLOPT_ERRORS as exc:
            if adapter.error is not None:
                raise adapter.error
            code = _failure_code(type(exc))
            if adapter.best_x is not None:
                optimum, score = adapter.best_x, adapter.best_score
            else:
                optimum, score = x0, math.nan
            result = Result(int(code), optimum, float(score), adapter.nfev)
        else:
            result = Result(
                int(opt.last_optimize_result()),
                optimum,
                float(opt.last_optimum_value()),
                adapter.nfev,
            )

        if result.success:
            logger.info(
                "%s finished: %s score=%g nfev=%d",
                " + ".join(describe(self.method)),
                result.status.name,
                result.score,
                result.nfev,
            )
        else:
            logger.warning(
                "%s failed: %s (%s) nfev=%d",
                " + ".join(describe(self.method)),
                result.status.name,
                result.message,
                result.nfev,
            )
        return result

    def optimize(self, func: Objective, initvals: Array, bounds: Bounds) -> Result:
        n = len(initvals)
        with nlopt_context(self.method.algorithm, n) as opt:
            adapter = ObjectiveAdapter(func, n, self.direction, self.criteria, opt)
            try:
                return self.run(
                    opt, adapter, initvals, lambda: self.set_up(opt, adapter, bounds)
                )
            finally:
                adapter.release()


register_binding(NLoptAlg)(NLoptBinding)


@register_binding(NLoptAlgComb)
class NLoptCombBinding(NLoptBinding):
    """
    Binding for composed tags (:class:`NLoptAlgComb`).

    Both contexts get the same bounds, criteria and adapter. The adapter
    force-stops the global context, and NLopt forwards that stop to the local
    search running inside it. Only the global context is run, so its code
    is the code of the whole run.
    """

    def optimize(self, func: Objective, initvals: Array, bounds: Bounds) -> Result:
        n = len(initvals)
        with nlopt_context(self.method.global_algorithm, n) as glob, nlopt_context(
            self.method.local_algorithm, n
        ) as loc:
            adapter = ObjectiveAdapter(func, n, self.direction, self.criteria, glob)
            try:
                def configure() -> None:
                    self.set_up(glob, adapter, bounds)
                    self.set_up(loc, adapter, bounds)
                    glob.set_local_optimizer(loc)

                return self.run(glob, adapter, initvals, configure)
            finally:
                adapter.release()


__all__ = [
    "NLoptBinding",
    "NLoptCombBinding",
    "UnsupportedMethodError",
    "binding_for",
    "nlopt_context",
    "register_binding",
]
