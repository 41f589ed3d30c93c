"""dfopt - bounded derivative-free optimization on top of NLopt."""

__version__ = "0.1.0"

# Data model
from .core import (
    Bound,
    Bounds,
    OptDir,
    Result,
    ResultCode,
    StopCriteria,
    bounds,
    initvals,
)

# Algorithm tags and catalog
from .algorithms import (
    ALGORITHMS,
    AlgNLoptCobyla,
    AlgNLoptDIRECT,
    AlgNLoptGenetic,
    AlgNLoptMLSL,
    AlgNLoptSimplex,
    AlgNLoptSubplex,
    NLoptAlg,
    NLoptAlgComb,
    describe,
)

# Solver bindings
from .binding import UnsupportedMethodError, binding_for, register_binding
from .objective import ObjectiveAdapter

# Optimizers
from .optimizer import DefaultGlobalOptimizer, DefaultLocalOptimizer, Optimizer
from .factory import OptimizerConfig, create_optimizer

__all__ = [
    # Version
    "__version__",
    # Data model
    "Bound",
    "Bounds",
    "OptDir",
    "Result",
    "ResultCode",
    "StopCriteria",
    "bounds",
    "initvals",
    # Algorithms
    "ALGORITHMS",
    "NLoptAlg",
    "NLoptAlgComb",
    "AlgNLoptGenetic",
    "AlgNLoptSubplex",
    "AlgNLoptSimplex",
    "AlgNLoptMLSL",
    "AlgNLoptDIRECT",
    "AlgNLoptCobyla",
    "describe",
    # Bindings
    "ObjectiveAdapter",
    "UnsupportedMethodError",
    "binding_for",
    "register_binding",
    # Optimizers
    "Optimizer",
    "DefaultGlobalOptimizer",
    "DefaultLocalOptimizer",
    "OptimizerConfig",
    "create_optimizer",
]
