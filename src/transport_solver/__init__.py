"""High-level entrypoints for the transportation simplex solver library."""

from .data import (
    ProgressCallback,
    ProgressInfo,
    SolverOptions,
    TransportProblem,
    TransportResult,
    build_problem,
)
from .diagnostics import ConvergenceMonitor
from .exceptions import (
    InvalidProblemError,
    IterationLimitError,
    MalformedBasisError,
    NoImprovingCycleError,
    SolverConfigurationError,
    TransportSolverError,
)
from .maxflow import (
    AugmentingPath,
    BreadthFirstPathFinder,
    DepthFirstPathFinder,
    MaxFlowResult,
    PathFinder,
    max_flow,
)
from .simplex import SolverState, TransportSimplex
from .solver import load_problem, save_result, solve_transportation
from .utils import (
    OptimalityCertificate,
    ValidationResult,
    check_optimality,
    compute_objective,
    validate_plan,
)
from .visualization import visualize_plan, visualize_problem

__version__ = "0.1.0"

__all__ = [
    # Main API
    "build_problem",
    "load_problem",
    "solve_transportation",
    "save_result",
    # Problem and result types
    "TransportProblem",
    "TransportResult",
    # Configuration
    "SolverOptions",
    # Progress tracking
    "ProgressCallback",
    "ProgressInfo",
    # Solver internals
    "TransportSimplex",
    "SolverState",
    # Utilities
    "validate_plan",
    "check_optimality",
    "compute_objective",
    "ValidationResult",
    "OptimalityCertificate",
    # Diagnostics
    "ConvergenceMonitor",
    # Maximum flow
    "max_flow",
    "MaxFlowResult",
    "AugmentingPath",
    "PathFinder",
    "BreadthFirstPathFinder",
    "DepthFirstPathFinder",
    # Visualization
    "visualize_problem",
    "visualize_plan",
    # Exceptions
    "TransportSolverError",
    "InvalidProblemError",
    "MalformedBasisError",
    "NoImprovingCycleError",
    "IterationLimitError",
    "SolverConfigurationError",
    # Version
    "__version__",
]
