"""Balancing of supply and demand totals with zero-cost dummy nodes."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .data import DUMMY_DESTINATION_NAME, DUMMY_SOURCE_NAME, TransportationProblem

logger = logging.getLogger(__name__)


@dataclass
class BalancedProblem:
    """A private, balanced copy of a transportation problem.

    Attributes:
        supply: Supply per row, including the dummy source if one was added.
        demand: Demand per column, including the dummy destination if one was added.
        costs: Unit cost matrix extended with a zero-cost dummy row or column.
        source_names: Row names, ending in "Dummy Source" when a dummy row exists.
        destination_names: Column names, ending in "Dummy Destination" when a dummy
                           column exists.
        num_sources: Number of real sources (rows before balancing).
        num_destinations: Number of real destinations (columns before balancing).
        dummy_source: True if a dummy row was appended.
        dummy_destination: True if a dummy column was appended.
    """

    supply: np.ndarray
    demand: np.ndarray
    costs: np.ndarray
    source_names: list[str]
    destination_names: list[str]
    num_sources: int
    num_destinations: int
    dummy_source: bool = False
    dummy_destination: bool = False

    @property
    def shape(self) -> tuple[int, int]:
        return self.costs.shape

    def is_dummy_cell(self, row: int, col: int) -> bool:
        return row >= self.num_sources or col >= self.num_destinations


def balance_problem(problem: TransportationProblem) -> BalancedProblem:
    """Return a balanced copy of ``problem``.

    If total supply exceeds total demand, a "Dummy Destination" absorbing the
    surplus is appended as a zero-cost column. If total demand exceeds total
    supply, a "Dummy Source" covering the shortfall is appended as a zero-cost
    row. At most one dummy node is ever added and the caller's arrays are never
    modified.
    """
    supply = np.array(problem.supply, dtype=float)
    demand = np.array(problem.demand, dtype=float)
    costs = np.array(problem.costs, dtype=float).reshape(len(supply), len(demand))
    source_names = list(problem.source_names)
    destination_names = list(problem.destination_names)

    total_supply = math.fsum(supply)
    total_demand = math.fsum(demand)
    balanced = BalancedProblem(
        supply=supply,
        demand=demand,
        costs=costs,
        source_names=source_names,
        destination_names=destination_names,
        num_sources=len(supply),
        num_destinations=len(demand),
    )

    if total_supply > total_demand:
        surplus = total_supply - total_demand
        balanced.demand = np.append(demand, surplus)
        balanced.costs = np.hstack((costs, np.zeros((costs.shape[0], 1))))
        balanced.destination_names.append(DUMMY_DESTINATION_NAME)
        balanced.dummy_destination = True
        logger.info(
            "Added dummy destination to absorb surplus supply",
            extra={"surplus": surplus, "total_supply": total_supply, "total_demand": total_demand},
        )
    elif total_demand > total_supply:
        shortfall = total_demand - total_supply
        balanced.supply = np.append(supply, shortfall)
        balanced.costs = np.vstack((costs, np.zeros((1, costs.shape[1]))))
        balanced.source_names.append(DUMMY_SOURCE_NAME)
        balanced.dummy_source = True
        logger.warning(
            f"Not enough supply available: requested {total_demand:g}, available "
            f"{total_supply:g}. Adding a dummy source for the {shortfall:g} unit shortfall.",
            extra={"shortfall": shortfall, "total_supply": total_supply, "total_demand": total_demand},
        )

    return balanced
