"""Core data structures for balanced transportation problems."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from .exceptions import InvalidProblemError, SolverConfigurationError

DUMMY_SOURCE_NAME = "Dummy Source"
DUMMY_DESTINATION_NAME = "Dummy Destination"


@dataclass
class TransportationProblem:
    """Encapsulates a transportation problem instance.

    A transportation problem ships a single commodity from supply nodes (rows)
    to demand nodes (columns). Every supply/demand pair is a route with a unit
    cost. Totals do not have to match: the solver balances the problem by adding
    a zero-cost dummy source or dummy destination. Fields accept lists or numpy
    arrays; ``build_problem`` normalizes both to plain lists.

    Attributes:
        supply: Capacity of each source (non-negative).
        demand: Requirement of each destination (non-negative).
        costs: Unit cost matrix with ``len(supply)`` rows and ``len(demand)`` columns.
        source_names: Display name per source. Defaults to ``"Source <i>"``.
        destination_names: Display name per destination. Defaults to ``"Destination <j>"``.
        route_names: Display name per route, flattened row-major over the original
                     (unbalanced) destination count. May be empty, in which case
                     names are synthesized from the node names.
        tolerance: Tolerance used when checking feasibility of a solution (default: 1e-3).

    Examples:
        >>> problem = TransportationProblem(
        ...     supply=[100.0, 150.0],
        ...     demand=[80.0, 90.0, 80.0],
        ...     costs=[[2.0, 3.0, 1.0], [5.0, 4.0, 9.0]],
        ...     source_names=["Source 1", "Source 2"],
        ...     destination_names=["Dest 1", "Dest 2", "Dest 3"],
        ... )
        >>> problem.validate()

    See Also:
        - build_problem(): Construct and validate from plain sequences.
        - solve_transportation(): Solve the problem with the stepping-stone method.
    """

    supply: list[float]
    demand: list[float]
    costs: list[list[float]]
    source_names: list[str] = field(default_factory=list)
    destination_names: list[str] = field(default_factory=list)
    route_names: list[str] = field(default_factory=list)
    tolerance: float = 1e-3

    def __post_init__(self) -> None:
        if len(self.source_names) == 0:
            self.source_names = [f"Source {i + 1}" for i in range(len(self.supply))]
        if len(self.destination_names) == 0:
            self.destination_names = [f"Destination {j + 1}" for j in range(len(self.demand))]

    @property
    def num_sources(self) -> int:
        return len(self.supply)

    @property
    def num_destinations(self) -> int:
        return len(self.demand)

    @property
    def total_supply(self) -> float:
        return math.fsum(self.supply)

    @property
    def total_demand(self) -> float:
        return math.fsum(self.demand)

    def validate(self) -> None:
        # Fail fast on contract violations so the solver stages can assume clean input.
        if len(self.supply) == 0:
            raise InvalidProblemError(
                "Problem has no sources. At least one supply value is required.", field="supply"
            )
        if len(self.demand) == 0:
            raise InvalidProblemError(
                "Problem has no destinations. At least one demand value is required.", field="demand"
            )
        for name, values in (("supply", self.supply), ("demand", self.demand)):
            for idx, value in enumerate(values):
                if not math.isfinite(value):
                    raise InvalidProblemError(
                        f"{name}[{idx}] is not finite ({value}). Quantities must be finite numbers.",
                        field=name,
                        index=idx,
                    )
                if value < 0:
                    raise InvalidProblemError(
                        f"{name}[{idx}] is negative ({value}). Quantities must be >= 0.",
                        field=name,
                        index=idx,
                    )
        if len(self.costs) != self.num_sources:
            raise InvalidProblemError(
                f"Cost matrix has {len(self.costs)} rows but supply has {self.num_sources} "
                f"entries. The cost matrix needs one row per source.",
                field="costs",
            )
        for i, row in enumerate(self.costs):
            if len(row) != self.num_destinations:
                raise InvalidProblemError(
                    f"Cost matrix row {i} has {len(row)} columns but demand has "
                    f"{self.num_destinations} entries. The cost matrix needs one column per "
                    f"destination.",
                    field="costs",
                    index=i,
                )
            for j, cost in enumerate(row):
                if not math.isfinite(cost):
                    raise InvalidProblemError(
                        f"costs[{i}][{j}] is not finite ({cost}). Unit costs must be finite.",
                        field="costs",
                        index=(i, j),
                    )
        if len(self.source_names) != self.num_sources:
            raise InvalidProblemError(
                f"Got {len(self.source_names)} source names for {self.num_sources} sources.",
                field="source_names",
            )
        if len(self.destination_names) != self.num_destinations:
            raise InvalidProblemError(
                f"Got {len(self.destination_names)} destination names for "
                f"{self.num_destinations} destinations.",
                field="destination_names",
            )
        expected_routes = self.num_sources * self.num_destinations
        if len(self.route_names) > 0 and len(self.route_names) != expected_routes:
            raise InvalidProblemError(
                f"Got {len(self.route_names)} route names, expected {expected_routes} "
                f"({self.num_sources} sources x {self.num_destinations} destinations, "
                f"row-major). Pass an empty list to use generated route names.",
                field="route_names",
            )
        if self.tolerance <= 0:
            raise InvalidProblemError(
                f"Tolerance must be positive, got {self.tolerance}.", field="tolerance"
            )


@dataclass(frozen=True)
class Allocation:
    """A single shipment in the solution: units sent from a source to a destination.

    Attributes:
        source_name: Display name of the source.
        destination_name: Display name of the destination.
        route_name: Display name of the route used.
        units: Quantity shipped.
        unit_cost: Cost per unit on this route.
        total_cost: ``units * unit_cost``.
        source_index: Index of the source in the original problem.
        destination_index: Index of the destination in the original problem.
    """

    source_name: str
    destination_name: str
    route_name: str
    units: float
    unit_cost: float
    total_cost: float
    source_index: int
    destination_index: int

    def __str__(self) -> str:
        return (
            f"Allocate {self.units:g} units from {self.source_name} to "
            f"{self.destination_name} via {self.route_name} "
            f"(cost: {self.unit_cost:g}, total: {self.total_cost:g})"
        )


@dataclass
class TransportationResult:
    """Represents the output of a transportation solve.

    Attributes:
        allocations: Allocation records in row-major order (source index, then
                     destination index). Dummy-node shipments are excluded.
        objective: Total cost over the returned allocations.
        status: Solution status:
                - 'optimal': No improving cycle remains
                - 'iteration_limit': Pivot limit reached before optimality was confirmed
        iterations: Number of stepping-stone pivots performed.
        dummy_source: True if a dummy source was added (demand exceeded supply).
        dummy_destination: True if a dummy destination was added (supply exceeded demand).
        objective_history: Cost of the full balanced allocation before the first pivot
                           and after every pivot. Non-increasing up to float
                           resolution: an epsilon pivot on fractional data can
                           repeat the previous value.

    Examples:
        >>> result = solve_transportation(problem)
        >>> print(f"Status: {result.status}, Cost: {result.objective:.2f}")
        Status: optimal, Cost: 780.00
        >>> for allocation in result.allocations:
        ...     print(allocation)
    """

    allocations: list[Allocation] = field(default_factory=list)
    objective: float = 0.0
    status: str = "optimal"
    iterations: int = 0
    dummy_source: bool = False
    dummy_destination: bool = False
    objective_history: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class ProgressInfo:
    """Progress information provided during the stepping-stone loop.

    Attributes:
        iteration: Number of pivots performed so far.
        max_iterations: Maximum allowed pivots.
        objective: Cost of the balanced allocation after the latest pivot.
        pivot_amount: Quantity shifted around the latest cycle.
        marginal_cost: Net marginal cost of the cell that entered the basis.
        elapsed_time: Elapsed time in seconds since the loop started.
    """

    iteration: int
    max_iterations: int
    objective: float
    pivot_amount: float
    marginal_cost: float
    elapsed_time: float


# Type alias for progress callback function
ProgressCallback = Callable[[ProgressInfo], None]


@dataclass
class SolverOptions:
    """Configuration options for the stepping-stone solver.

    Attributes:
        max_iterations: Maximum number of pivots before the loop stops with status
                        'iteration_limit'. If None, defaults to max(100, 10 * rows * cols)
                        of the balanced problem.
        tolerance: Optimality tolerance (default: 1e-9). A cell enters the basis only
                   if its net marginal cost is below ``-tolerance``.
        epsilon: Degeneracy quantity (default: 1e-10). Used both as the placeholder
                 quantity inserted to complete a degenerate basis and as the threshold
                 at or below which a cell is vacated after a pivot.

    Examples:
        >>> options = SolverOptions(max_iterations=500)
        >>> options = SolverOptions(tolerance=1e-6, epsilon=1e-9)
    """

    max_iterations: int | None = None
    tolerance: float = 1e-9
    epsilon: float = 1e-10

    def __post_init__(self) -> None:
        if self.max_iterations is not None and self.max_iterations <= 0:
            raise SolverConfigurationError(
                f"max_iterations must be positive, got {self.max_iterations}."
            )
        if self.tolerance <= 0:
            raise SolverConfigurationError(
                f"Tolerance must be positive, got {self.tolerance}. "
                f"Tolerance controls when a marginal cost counts as an improvement."
            )
        if self.epsilon <= 0:
            raise SolverConfigurationError(
                f"Epsilon must be positive, got {self.epsilon}. "
                f"Epsilon is the placeholder quantity used to repair degenerate bases."
            )

    def resolve_max_iterations(self, rows: int, cols: int) -> int:
        if self.max_iterations is not None:
            return self.max_iterations
        return max(100, 10 * rows * cols)


def build_problem(
    supply: Sequence[float],
    demand: Sequence[float],
    costs: Sequence[Sequence[float]],
    source_names: Sequence[str] | None = None,
    destination_names: Sequence[str] | None = None,
    route_names: Sequence[str] | None = None,
    tolerance: float = 1e-3,
) -> TransportationProblem:
    """Factory helper used by the IO layer and callers holding plain sequences.

    Copies every input so later changes by the caller never leak into the problem.
    """
    if source_names is None:
        source_names = ()
    if destination_names is None:
        destination_names = ()
    if route_names is None:
        route_names = ()
    try:
        problem = TransportationProblem(
            supply=[float(value) for value in supply],
            demand=[float(value) for value in demand],
            costs=[[float(value) for value in row] for row in costs],
            source_names=[str(name) for name in source_names],
            destination_names=[str(name) for name in destination_names],
            route_names=["" if name is None else str(name) for name in route_names],
            tolerance=float(tolerance),
        )
    except (TypeError, ValueError) as exc:
        raise InvalidProblemError(f"Problem data must be numeric: {exc}") from exc
    problem.validate()
    return problem
