"""Utility functions for analyzing and validating transportation solutions."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from .data import Allocation, TransportationProblem


@dataclass
class ValidationResult:
    """Results from validating a set of allocations against a problem.

    Attributes:
        is_valid: True if the allocations satisfy all constraints.
        errors: List of validation error messages (empty if valid).
        shipped: Units shipped per source.
        received: Units received per destination.
        supply_violations: Sources shipping more than their supply.
        demand_violations: Destinations not receiving exactly their demand.
    """

    is_valid: bool
    errors: list[str]
    shipped: list[float]
    received: list[float]
    supply_violations: list[int]
    demand_violations: list[int]


def allocation_matrix(problem: TransportationProblem, allocations: Iterable[Allocation]) -> np.ndarray:
    """Return the shipped units as a sources x destinations array."""
    flows = np.zeros((problem.num_sources, problem.num_destinations), dtype=float)
    for allocation in allocations:
        flows[allocation.source_index, allocation.destination_index] += allocation.units
    return flows


def total_cost(allocations: Iterable[Allocation]) -> float:
    return math.fsum(allocation.total_cost for allocation in allocations)


def validate_allocations(
    problem: TransportationProblem,
    allocations: Iterable[Allocation],
    tolerance: float | None = None,
) -> ValidationResult:
    """Check that allocations form a feasible solution of ``problem``.

    Every source must ship at most its supply. When total supply covers total
    demand, every destination must receive exactly its demand; when supply is
    short, destinations may receive less but never more, and all supply must be
    shipped.

    Args:
        problem: The original (unbalanced) problem.
        allocations: Records returned by the solver.
        tolerance: Absolute tolerance (default: problem.tolerance).

    Returns:
        ValidationResult describing any violations.
    """
    allocations = list(allocations)
    tol = problem.tolerance if tolerance is None else tolerance
    errors: list[str] = []

    for allocation in allocations:
        if not (0 <= allocation.source_index < problem.num_sources) or not (
            0 <= allocation.destination_index < problem.num_destinations
        ):
            errors.append(
                f"Allocation {allocation.source_index}->{allocation.destination_index} "
                f"references a node outside the problem"
            )
        elif allocation.units < -tol:
            errors.append(
                f"Allocation {allocation.source_name}->{allocation.destination_name} "
                f"has negative units {allocation.units:.6f}"
            )
    if errors:
        return ValidationResult(False, errors, [], [], [], [])

    flows = allocation_matrix(problem, allocations)
    shipped = flows.sum(axis=1)
    received = flows.sum(axis=0)
    supply_short = problem.total_supply < problem.total_demand - tol

    supply_violations: list[int] = []
    for i, amount in enumerate(shipped):
        limit = problem.supply[i]
        if amount > limit + tol or (supply_short and amount < limit - tol):
            supply_violations.append(i)
            errors.append(
                f"Source {problem.source_names[i]} ships {amount:.6f} of supply {limit:.6f}"
            )

    demand_violations: list[int] = []
    for j, amount in enumerate(received):
        need = problem.demand[j]
        if amount > need + tol or (not supply_short and amount < need - tol):
            demand_violations.append(j)
            errors.append(
                f"Destination {problem.destination_names[j]} receives {amount:.6f} of "
                f"demand {need:.6f}"
            )

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        shipped=[float(value) for value in shipped],
        received=[float(value) for value in received],
        supply_violations=supply_violations,
        demand_violations=demand_violations,
    )
