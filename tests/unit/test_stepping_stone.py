"""Tests for stepping-stone evaluation, pivoting and the optimization loop."""

import logging
import math
import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import ProgressInfo, SolverConfigurationError, SolverOptions  # noqa: E402
from transport_solver.initialization import north_west_corner  # noqa: E402
from transport_solver.stepping_stone import SteppingStone, compute_marginal_costs  # noqa: E402

SUPPLY = np.array([300.0, 400.0, 500.0])
DEMAND = np.array([250.0, 350.0, 400.0, 200.0])
COSTS = np.array([[3.0, 1.0, 7.0, 4.0], [2.0, 6.0, 5.0, 9.0], [8.0, 3.0, 3.0, 2.0]])


def _optimizer(**options) -> SteppingStone:
    matrix = north_west_corner(SUPPLY, DEMAND, COSTS)
    return SteppingStone(matrix, SolverOptions(**options))


def test_evaluate_cell_marginal_cost():
    """Marginal cost alternates + and - signs around the cycle."""
    optimizer = _optimizer()
    evaluation = optimizer.evaluate_cell(1, 0)

    assert evaluation is not None
    assert evaluation.marginal_cost == pytest.approx(2 - 6 + 1 - 3)
    assert evaluation.leaving.position == (0, 0)
    assert evaluation.pivot_amount == pytest.approx(250.0)
    assert evaluation.entering.position == (1, 0)


def test_find_entering_picks_most_negative():
    optimizer = _optimizer()
    entering = optimizer.find_entering()

    assert entering is not None
    assert entering.entering.position == (1, 0)
    assert entering.marginal_cost == pytest.approx(-6.0)


def test_pivot_shifts_flow_and_swaps_basis_cells():
    optimizer = _optimizer()
    matrix = optimizer.matrix
    evaluation = optimizer.evaluate_cell(1, 0)

    optimizer.pivot(evaluation)

    assert matrix.is_occupied(1, 0)
    assert matrix.quantity[1, 0] == pytest.approx(250.0)
    assert not matrix.is_occupied(0, 0)
    assert matrix.quantity[0, 1] == pytest.approx(300.0)
    assert matrix.quantity[1, 1] == pytest.approx(50.0)
    assert matrix.basis_size == matrix.required_basis_size
    assert matrix.total_cost() == pytest.approx(4400.0 - 6 * 250.0)


def test_pivot_preserves_row_and_column_totals():
    optimizer = _optimizer()
    optimizer.pivot(optimizer.find_entering())

    np.testing.assert_allclose(optimizer.matrix.quantity.sum(axis=1), SUPPLY)
    np.testing.assert_allclose(optimizer.matrix.quantity.sum(axis=0), DEMAND)


def test_run_reaches_optimum():
    optimizer = _optimizer()
    status = optimizer.run()

    assert status == "optimal"
    assert optimizer.iterations == 2
    assert optimizer.matrix.total_cost() == pytest.approx(2850.0)


def test_marginal_costs_non_negative_at_optimum():
    optimizer = _optimizer()
    optimizer.run()

    marginal = compute_marginal_costs(optimizer.matrix)
    finite = marginal[~np.isnan(marginal)]
    assert finite.size == 12 - 6
    assert np.all(finite >= -1e-9)
    assert all(math.isnan(marginal[r, c]) for r, c in np.argwhere(optimizer.matrix.occupied))


def test_objective_strictly_decreases_each_pivot():
    optimizer = _optimizer()
    optimizer.run()

    history = optimizer.objective_history
    assert len(history) == optimizer.iterations + 1
    for before, after in zip(history, history[1:]):
        assert after < before


def test_objective_non_increasing_on_fractional_degenerate_data():
    supply = np.array([10.1, 20.2])
    demand = np.array([10.1, 20.2])
    costs = np.array([[5.3, 1.7], [1.1, 5.9]])
    optimizer = SteppingStone(north_west_corner(supply, demand, costs), SolverOptions())

    assert optimizer.run() == "optimal"

    history = optimizer.objective_history
    for before, after in zip(history, history[1:]):
        assert after <= before + 1e-9 * abs(before)
    assert history[-1] == pytest.approx(87.87)


def test_iteration_limit_status():
    optimizer = _optimizer(max_iterations=1)

    assert optimizer.run() == "iteration_limit"
    assert optimizer.iterations == 1


def test_iteration_limit_logs_warning(caplog):
    optimizer = _optimizer()
    with caplog.at_level(logging.WARNING, logger="transport_solver.stepping_stone"):
        optimizer.run(max_iterations=1)

    assert "Iteration limit reached" in caplog.text


def test_optimal_basis_reports_optimal_at_limit():
    """A basis that is already optimal reports 'optimal' even with a tight limit."""
    optimizer = _optimizer()
    optimizer.run()

    assert optimizer.run(max_iterations=1) == "optimal"


def test_progress_callback_receives_each_pivot():
    progress: list[ProgressInfo] = []
    optimizer = _optimizer()

    optimizer.run(progress_callback=progress.append, progress_interval=1)

    assert [info.iteration for info in progress] == [1, 2]
    assert progress[0].marginal_cost == pytest.approx(-6.0)
    assert progress[0].pivot_amount == pytest.approx(250.0)
    assert progress[-1].objective == pytest.approx(2850.0)
    assert all(info.elapsed_time >= 0 for info in progress)


def test_progress_interval_controls_frequency():
    progress: list[ProgressInfo] = []
    optimizer = _optimizer()

    optimizer.run(progress_callback=progress.append, progress_interval=2)

    assert [info.iteration for info in progress] == [2]


def test_invalid_run_arguments():
    optimizer = _optimizer()
    with pytest.raises(SolverConfigurationError):
        optimizer.run(max_iterations=0)
    with pytest.raises(SolverConfigurationError):
        optimizer.run(progress_interval=0)


def test_degenerate_pivot_keeps_basis_complete():
    """Pivoting through an epsilon cell keeps rows + cols - 1 occupied cells."""
    supply = np.array([10.0, 20.0])
    demand = np.array([10.0, 20.0])
    costs = np.array([[5.0, 1.0], [1.0, 5.0]])
    matrix = north_west_corner(supply, demand, costs)
    optimizer = SteppingStone(matrix)

    assert optimizer.run() == "optimal"
    assert matrix.basis_size == matrix.required_basis_size
    assert matrix.total_cost() == pytest.approx(70.0)
