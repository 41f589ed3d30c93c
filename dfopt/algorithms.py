"""
Algorithm tags and the catalog of predefined NLopt methods.

A tag only names the NLopt algorithm(s) to run. :class:`NLoptAlg` selects a
single algorithm. :class:`NLoptAlgComb` selects a global algorithm with a
local algorithm nested inside it: the global search hands promising regions
to the local one for refinement, and the pair is driven as one run.

Tags are frozen and hashable; ``Optimizer[tag]`` uses them as registry keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, Union

import nlopt


@dataclass(frozen=True)
class NLoptAlg:
    """Tag selecting a single NLopt algorithm."""

    algorithm: int

    def __repr__(self) -> str:
        return f"NLoptAlg({nlopt.algorithm_name(self.algorithm)!r})"


@dataclass(frozen=True)
class NLoptAlgComb:
    """Tag selecting a global NLopt algorithm with a nested local one."""

    global_algorithm: int
    local_algorithm: int = nlopt.LN_NELDERMEAD

    def __repr__(self) -> str:
        return (
            f"NLoptAlgComb({nlopt.algorithm_name(self.global_algorithm)!r}, "
            f"{nlopt.algorithm_name(self.local_algorithm)!r})"
        )


Method = Union[NLoptAlg, NLoptAlgComb]

# Predefined algorithms
AlgNLoptGenetic = NLoptAlgComb(nlopt.GN_ESCH)
AlgNLoptSubplex = NLoptAlg(nlopt.LN_SBPLX)
AlgNLoptSimplex = NLoptAlg(nlopt.LN_NELDERMEAD)
AlgNLoptMLSL = NLoptAlgComb(nlopt.GN_MLSL_LDS, nlopt.LN_SBPLX)
AlgNLoptDIRECT = NLoptAlg(nlopt.GN_DIRECT)
AlgNLoptCobyla = NLoptAlg(nlopt.LN_COBYLA)

ALGORITHMS: Dict[str, Method] = {
    "genetic": AlgNLoptGenetic,
    "subplex": AlgNLoptSubplex,
    "simplex": AlgNLoptSimplex,
    "mlsl": AlgNLoptMLSL,
    "direct": AlgNLoptDIRECT,
    "cobyla": AlgNLoptCobyla,
}


def describe(method: Method) -> Tuple[str, ...]:
    """Return NLopt's descriptive names for the algorithms behind ``method``."""
    if isinstance(method, NLoptAlgComb):
        return (
            nlopt.algorithm_name(method.global_algorithm),
            nlopt.algorithm_name(method.local_algorithm),
        )
    if isinstance(method, NLoptAlg):
        return (nlopt.algorithm_name(method.algorithm),)
    raise TypeError(f"Not an algorithm tag: {method!r}")


__all__ = [
    "ALGORITHMS",
    "AlgNLoptCobyla",
    "AlgNLoptDIRECT",
    "AlgNLoptGenetic",
    "AlgNLoptMLSL",
    "AlgNLoptSimplex",
    "AlgNLoptSubplex",
    "Method",
    "NLoptAlg",
    "NLoptAlgComb",
    "describe",
]
