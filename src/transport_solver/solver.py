"""Public solver entrypoints."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from pathlib import Path

from .balancing import balance_problem
from .data import (
    Allocation,
    ProgressCallback,
    SolverOptions,
    TransportationProblem,
    TransportationResult,
    build_problem,
)
from .formatting import RouteNameTable, format_solution
from .initialization import north_west_corner
from .io import load_problem as load_problem_file
from .io import save_result as save_result_file
from .stepping_stone import SteppingStone

logger = logging.getLogger(__name__)


def solve_transportation(
    problem: TransportationProblem,
    options: SolverOptions | None = None,
    max_iterations: int | None = None,
    progress_callback: ProgressCallback | None = None,
    progress_interval: int = 1,
) -> TransportationResult:
    """Solve a transportation problem with North-West Corner + Stepping-Stone.

    The solve runs entirely on private copies of the problem data:

    1. Balance totals with a zero-cost dummy source or destination.
    2. Build an initial allocation with the North-West Corner rule.
    3. Repair degeneracy and pivot along improving closed paths until no
       empty cell has a negative net marginal cost.
    4. Convert the basis into allocation records, dropping dummy shipments.

    Args:
        problem: The transportation problem to solve. Totals need not match.
        options: Solver configuration options. If None, uses defaults.
        max_iterations: Maximum number of pivots. Overrides options.max_iterations
                        if provided.
        progress_callback: Optional callback receiving ProgressInfo.
        progress_interval: Number of pivots between progress callbacks (default: 1).

    Returns:
        TransportationResult with the allocations, objective, status ('optimal' or
        'iteration_limit'), pivot count and objective history.

    Raises:
        InvalidProblemError: If the problem violates the input contract.
        SolverConfigurationError: If options or overrides are invalid.

    Examples:
        >>> from transport_solver import build_problem, solve_transportation
        >>> problem = build_problem(
        ...     supply=[100, 150],
        ...     demand=[80, 90, 80],
        ...     costs=[[2, 3, 1], [5, 4, 9]],
        ... )
        >>> result = solve_transportation(problem)
        >>> print(f"Status: {result.status}, Cost: {result.objective:.2f}")
        Status: optimal, Cost: 780.00
    """
    problem.validate()
    options = options if options is not None else SolverOptions()

    balanced = balance_problem(problem)
    matrix = north_west_corner(balanced.supply, balanced.demand, balanced.costs)

    # A fresh optimizer per call keeps solves independent of each other.
    optimizer = SteppingStone(matrix, options=options)
    status = optimizer.run(
        max_iterations=max_iterations,
        progress_callback=progress_callback,
        progress_interval=progress_interval,
    )

    routes = RouteNameTable(problem.route_names, problem.num_destinations)
    allocations = format_solution(balanced, matrix, routes, epsilon=options.epsilon)
    objective = math.fsum(allocation.total_cost for allocation in allocations)

    if not allocations:
        logger.info("Solution contains no shipments between real nodes")

    return TransportationResult(
        allocations=allocations,
        objective=objective,
        status=status,
        iterations=optimizer.iterations,
        dummy_source=balanced.dummy_source,
        dummy_destination=balanced.dummy_destination,
        objective_history=list(optimizer.objective_history),
    )


def solve(
    supply: Sequence[float],
    demand: Sequence[float],
    costs: Sequence[Sequence[float]],
    source_names: Sequence[str] | None = None,
    destination_names: Sequence[str] | None = None,
    route_names: Sequence[str] | None = None,
    options: SolverOptions | None = None,
    max_iterations: int | None = None,
) -> list[Allocation]:
    """Solve from plain sequences and return only the allocation records.

    Route names are flattened row-major over ``len(demand)``, i.e. the caller's
    original destination count.

    Examples:
        >>> allocations = solve([10.0], [4.0, 6.0], [[1.0, 2.0]])
        >>> [a.units for a in allocations]
        [4.0, 6.0]
    """
    problem = build_problem(
        supply=supply,
        demand=demand,
        costs=costs,
        source_names=source_names,
        destination_names=destination_names,
        route_names=route_names,
    )
    return solve_transportation(problem, options=options, max_iterations=max_iterations).allocations


def load_problem(path: str | Path) -> TransportationProblem:
    """Load a transportation problem from a JSON file.

    Raises:
        FileNotFoundError: If file does not exist.
        InvalidProblemError: If JSON is malformed or problem is invalid.
    """
    return load_problem_file(path)


def save_result(path: str | Path, result: TransportationResult) -> None:
    """Save a transportation solution to a JSON file."""
    save_result_file(path, result)
