"""Conversion of the final basis into named allocation records."""

from __future__ import annotations

from collections.abc import Sequence

from .balancing import BalancedProblem
from .basis import AllocationMatrix
from .data import Allocation


class RouteNameTable:
    """Route names keyed by (source index, destination index).

    The table is built once from the flattened, row-major list supplied by the
    caller, using the original (pre-balancing) destination count, so inserting a
    dummy column never shifts the lookup. Missing or empty names fall back to
    ``"Route from <source> to <destination>"``.
    """

    def __init__(self, route_names: Sequence[str], num_destinations: int):
        self._names: dict[tuple[int, int], str] = {}
        if num_destinations <= 0:
            return
        for index, name in enumerate(route_names):
            if name:
                self._names[divmod(index, num_destinations)] = name

    def __len__(self) -> int:
        return len(self._names)

    def lookup(self, source_index: int, destination_index: int, source_name: str, destination_name: str) -> str:
        name = self._names.get((source_index, destination_index))
        if name:
            return name
        return f"Route from {source_name} to {destination_name}"


def format_solution(
    balanced: BalancedProblem,
    matrix: AllocationMatrix,
    route_names: RouteNameTable,
    epsilon: float = 1e-10,
) -> list[Allocation]:
    """Convert the occupied cells of ``matrix`` into allocation records.

    Cells on a dummy row or column are dropped, as are epsilon placeholders
    (quantity at or below ``epsilon``) that only exist to keep the basis complete.
    Records come out in row-major order.
    """
    allocations: list[Allocation] = []
    for cell in matrix.occupied_cells():
        if balanced.is_dummy_cell(cell.row, cell.col) or cell.quantity <= epsilon:
            continue
        source_name = balanced.source_names[cell.row]
        destination_name = balanced.destination_names[cell.col]
        allocations.append(
            Allocation(
                source_name=source_name,
                destination_name=destination_name,
                route_name=route_names.lookup(cell.row, cell.col, source_name, destination_name),
                units=cell.quantity,
                unit_cost=cell.cost,
                total_cost=cell.quantity * cell.cost,
                source_index=cell.row,
                destination_index=cell.col,
            )
        )
    return allocations
