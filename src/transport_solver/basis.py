"""Allocation matrix, closed-path search and degeneracy repair.

The allocation matrix stores the current basis of the transportation tableau.
Each cell is either empty or occupied; an occupied cell may legitimately carry a
zero or near-zero quantity (a degenerate basis member), so occupancy is tracked
by an explicit mask rather than inferred from the quantity.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """An occupied (or candidate) cell of the allocation matrix.

    Attributes:
        row: Source index in the balanced problem.
        col: Destination index in the balanced problem.
        quantity: Units currently shipped through this cell.
        cost: Unit cost of the route.
    """

    row: int
    col: int
    quantity: float
    cost: float

    @property
    def position(self) -> tuple[int, int]:
        return (self.row, self.col)


class AllocationMatrix:
    """Sparse basis over a rows x cols transportation tableau.

    Attributes:
        costs: Unit cost matrix (read-only after construction).
        occupied: Boolean mask, True for cells in the basis.
        quantity: Shipped quantity per cell (0.0 for empty cells).
    """

    def __init__(self, costs: np.ndarray):
        self.costs = np.array(costs, dtype=float)
        self.costs.setflags(write=False)
        self.occupied = np.zeros(self.costs.shape, dtype=bool)
        self.quantity = np.zeros(self.costs.shape, dtype=float)

    @property
    def shape(self) -> tuple[int, int]:
        return self.costs.shape

    @property
    def basis_size(self) -> int:
        return int(self.occupied.sum())

    @property
    def required_basis_size(self) -> int:
        rows, cols = self.shape
        return rows + cols - 1

    def is_degenerate(self) -> bool:
        return self.basis_size < self.required_basis_size

    def is_occupied(self, row: int, col: int) -> bool:
        return bool(self.occupied[row, col])

    def occupy(self, row: int, col: int, quantity: float) -> None:
        self.occupied[row, col] = True
        self.quantity[row, col] = quantity

    def vacate(self, row: int, col: int) -> None:
        self.occupied[row, col] = False
        self.quantity[row, col] = 0.0

    def cell(self, row: int, col: int) -> Cell:
        return Cell(row, col, float(self.quantity[row, col]), float(self.costs[row, col]))

    def occupied_cells(self) -> list[Cell]:
        """Return the basis in row-major order."""
        return [self.cell(int(r), int(c)) for r, c in np.argwhere(self.occupied)]

    def empty_cells(self) -> Iterator[tuple[int, int]]:
        """Yield (row, col) of every empty cell in row-major order."""
        for r, c in np.argwhere(~self.occupied):
            yield int(r), int(c)

    def total_cost(self) -> float:
        return float(np.sum(self.quantity * self.costs, where=self.occupied))

    def copy(self) -> AllocationMatrix:
        clone = AllocationMatrix(self.costs)
        clone.occupied = self.occupied.copy()
        clone.quantity = self.quantity.copy()
        return clone


def _row_neighbor(cell: Cell, cells: list[Cell]) -> Cell | None:
    for other in cells:
        if other is not cell and other.row == cell.row:
            return other
    return None


def _col_neighbor(cell: Cell, cells: list[Cell]) -> Cell | None:
    for other in cells:
        if other is not cell and other.col == cell.col:
            return other
    return None


def find_closed_path(matrix: AllocationMatrix, candidate: Cell) -> tuple[Cell, ...]:
    """Find the closed stepping-stone path through ``candidate``.

    The path starts at ``candidate`` and alternates between a row step and a
    column step through occupied cells until it returns to the candidate. Cells
    that lack either a row partner or a column partner can never lie on the
    cycle, so they are pruned repeatedly until a fixed point is reached; for a
    valid basis exactly the cycle survives.

    Neighbors are chosen in enumeration order: the candidate first, then the
    occupied cells in row-major order.

    Args:
        matrix: Current allocation basis.
        candidate: The (empty) cell being evaluated.

    Returns:
        The ordered cycle, candidate first, or an empty tuple when the candidate
        does not close a cycle with the basis (or the basis is inconsistent).
    """
    path: list[Cell] = [candidate]
    path.extend(
        cell for cell in matrix.occupied_cells() if cell.position != candidate.position
    )

    # Prune cells whose row or column has no second member, to a fixed point.
    while True:
        row_counts = Counter(cell.row for cell in path)
        col_counts = Counter(cell.col for cell in path)
        kept = [cell for cell in path if row_counts[cell.row] > 1 and col_counts[cell.col] > 1]
        if len(kept) == len(path):
            break
        path = kept

    if len(path) < 4 or path[0] is not candidate:
        return ()

    stones: list[Cell] = []
    current: Cell | None = candidate
    for step in range(len(path)):
        stones.append(current)
        current = _row_neighbor(current, path) if step % 2 == 0 else _col_neighbor(current, path)
        if current is None:
            break

    if current is not candidate or len(stones) != len(path):
        logger.debug(
            "Closed path walk did not return to the candidate",
            extra={"candidate": candidate.position, "walked": len(stones), "pruned": len(path)},
        )
        return ()
    return tuple(stones)


def fix_degeneracy(matrix: AllocationMatrix, epsilon: float) -> int:
    """Complete a degenerate basis with epsilon-quantity placeholder cells.

    While the basis has fewer than ``rows + cols - 1`` occupied cells, the first
    empty cell (row-major) that does not close a cycle with the basis is
    occupied with ``epsilon``. The call is a no-op on a complete basis.

    Returns:
        Number of placeholder cells inserted.
    """
    inserted = 0
    while matrix.is_degenerate():
        placed = False
        for row, col in matrix.empty_cells():
            trial = Cell(row, col, epsilon, float(matrix.costs[row, col]))
            if not find_closed_path(matrix, trial):
                matrix.occupy(row, col, epsilon)
                inserted += 1
                placed = True
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(
                        "Inserted epsilon cell to repair degenerate basis",
                        extra={"cell": (row, col), "epsilon": epsilon},
                    )
                break
        if not placed:
            logger.warning(
                "Degenerate basis could not be completed: no empty cell admits an "
                "epsilon allocation without closing a cycle",
                extra={
                    "basis_size": matrix.basis_size,
                    "required_basis_size": matrix.required_basis_size,
                },
            )
            break
    return inserted
