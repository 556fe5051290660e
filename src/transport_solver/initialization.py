"""Initial basic feasible solution via the North-West Corner rule."""

from __future__ import annotations

import logging

import numpy as np

from .basis import AllocationMatrix

logger = logging.getLogger(__name__)


def north_west_corner(supply: np.ndarray, demand: np.ndarray, costs: np.ndarray) -> AllocationMatrix:
    """Build an initial allocation with the North-West Corner rule.

    Scanning starts at cell (0, 0). Each visited cell receives
    ``min(remaining supply, remaining demand)``. When a row's supply is exhausted
    the scan moves to the next row and resumes at the current column; when a
    column's demand is exhausted the scan stays on the row and moves right.
    Costs are ignored; optimality is left to the stepping-stone stage.

    The inputs are copied, so the caller's remaining quantities are untouched.
    For a balanced, non-degenerate problem the result has exactly
    ``rows + cols - 1`` occupied cells; ties (a row and a column exhausted by the
    same assignment) produce fewer, which ``fix_degeneracy`` repairs.
    """
    remaining_supply = np.array(supply, dtype=float)
    remaining_demand = np.array(demand, dtype=float)
    matrix = AllocationMatrix(costs)
    rows, cols = matrix.shape

    start_col = 0
    for r in range(rows):
        for c in range(start_col, cols):
            quantity = min(remaining_supply[r], remaining_demand[c])
            if quantity <= 0:
                continue
            matrix.occupy(r, c, float(quantity))
            remaining_supply[r] -= quantity
            remaining_demand[c] -= quantity
            if remaining_supply[r] == 0:
                start_col = c
                break

    logger.debug(
        "North-west corner allocation built",
        extra={
            "basis_size": matrix.basis_size,
            "required_basis_size": matrix.required_basis_size,
            "initial_cost": matrix.total_cost(),
        },
    )
    return matrix
