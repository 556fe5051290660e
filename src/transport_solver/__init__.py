"""High-level entrypoints for the transportation problem solver library."""

from .balancing import BalancedProblem, balance_problem
from .basis import AllocationMatrix, Cell, find_closed_path, fix_degeneracy
from .data import (
    Allocation,
    ProgressCallback,
    ProgressInfo,
    SolverOptions,
    TransportationProblem,
    TransportationResult,
    build_problem,
)
from .diagnostics import ConvergenceMonitor
from .exceptions import (
    InvalidProblemError,
    IterationLimitError,
    SolverConfigurationError,
    TransportationSolverError,
)
from .formatting import RouteNameTable, format_solution
from .initialization import north_west_corner
from .solver import load_problem, save_result, solve, solve_transportation
from .stepping_stone import CycleEvaluation, SteppingStone, compute_marginal_costs
from .utils import ValidationResult, allocation_matrix, total_cost, validate_allocations
from .validation import (
    NumericAnalysis,
    NumericWarning,
    analyze_numeric_properties,
    validate_numeric_properties,
)

__version__ = "0.1.0"

__all__ = [
    # Main API
    "build_problem",
    "load_problem",
    "solve_transportation",
    "solve",
    "save_result",
    # Data model
    "TransportationProblem",
    "TransportationResult",
    "Allocation",
    "SolverOptions",
    # Progress tracking
    "ProgressCallback",
    "ProgressInfo",
    # Solver stages
    "balance_problem",
    "BalancedProblem",
    "north_west_corner",
    "AllocationMatrix",
    "Cell",
    "find_closed_path",
    "fix_degeneracy",
    "SteppingStone",
    "CycleEvaluation",
    "compute_marginal_costs",
    "format_solution",
    "RouteNameTable",
    # Utilities
    "validate_allocations",
    "allocation_matrix",
    "total_cost",
    "ValidationResult",
    # Numeric validation
    "analyze_numeric_properties",
    "validate_numeric_properties",
    "NumericAnalysis",
    "NumericWarning",
    # Diagnostics
    "ConvergenceMonitor",
    # Exceptions
    "TransportationSolverError",
    "InvalidProblemError",
    "IterationLimitError",
    "SolverConfigurationError",
    # Version
    "__version__",
]
