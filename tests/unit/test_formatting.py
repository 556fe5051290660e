"""Tests for route naming and allocation formatting."""

import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import Allocation, build_problem  # noqa: E402
from transport_solver.balancing import balance_problem  # noqa: E402
from transport_solver.basis import AllocationMatrix  # noqa: E402
from transport_solver.formatting import RouteNameTable, format_solution  # noqa: E402


def test_route_table_uses_original_destination_count():
    table = RouteNameTable(["A-1", "A-2", "B-1", "B-2"], num_destinations=2)

    assert len(table) == 4
    assert table.lookup(1, 0, "B", "1") == "B-1"
    assert table.lookup(0, 1, "A", "2") == "A-2"


def test_route_table_falls_back_for_missing_names():
    table = RouteNameTable(["A-1", ""], num_destinations=2)

    assert table.lookup(0, 1, "Depot", "Clinic") == "Route from Depot to Clinic"
    assert table.lookup(5, 5, "Dummy Source", "Clinic") == "Route from Dummy Source to Clinic"


def test_format_skips_dummy_and_epsilon_cells():
    problem = build_problem(
        supply=[10, 10],
        demand=[5],
        costs=[[4], [2]],
        source_names=["North", "South"],
        destination_names=["Clinic"],
        route_names=["N-C", "S-C"],
    )
    balanced = balance_problem(problem)
    matrix = AllocationMatrix(balanced.costs)
    matrix.occupy(1, 0, 5.0)
    matrix.occupy(0, 1, 10.0)
    matrix.occupy(1, 1, 5.0)
    matrix.occupy(0, 0, 1e-10)

    allocations = format_solution(
        balanced, matrix, RouteNameTable(problem.route_names, problem.num_destinations)
    )

    assert allocations == [
        Allocation(
            source_name="South",
            destination_name="Clinic",
            route_name="S-C",
            units=5.0,
            unit_cost=2.0,
            total_cost=10.0,
            source_index=1,
            destination_index=0,
        )
    ]


def test_format_is_idempotent():
    problem = build_problem(supply=[4, 6], demand=[5, 5], costs=[[1, 2], [3, 4]])
    balanced = balance_problem(problem)
    matrix = AllocationMatrix(balanced.costs)
    matrix.occupy(0, 0, 4.0)
    matrix.occupy(1, 0, 1.0)
    matrix.occupy(1, 1, 5.0)
    table = RouteNameTable(problem.route_names, problem.num_destinations)

    first = format_solution(balanced, matrix, table)
    second = format_solution(balanced, matrix, table)

    assert first == second
    assert [(a.source_index, a.destination_index) for a in first] == [(0, 0), (1, 0), (1, 1)]
    np.testing.assert_allclose([a.total_cost for a in first], [4.0, 3.0, 20.0])


def test_allocation_str():
    allocation = Allocation("A", "B", "A-B", 5.0, 2.5, 12.5, 0, 0)

    assert str(allocation) == "Allocate 5 units from A to B via A-B (cost: 2.5, total: 12.5)"


def test_allocation_is_frozen():
    allocation = Allocation("A", "B", "A-B", 5.0, 2.5, 12.5, 0, 0)
    with pytest.raises(AttributeError):
        allocation.units = 1.0  # type: ignore[misc]
