"""Tests for convergence monitoring."""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver.diagnostics import ConvergenceMonitor  # noqa: E402


def test_improving_run_is_not_stalled():
    monitor = ConvergenceMonitor()
    for objective in (100.0, 90.0, 80.0, 70.0):
        monitor.record_pivot(objective)

    assert not monitor.is_stalled(min_consecutive=2)
    assert monitor.total_pivots == 4
    assert monitor.get_degeneracy_ratio() == 0.0


def test_flat_objective_stalls():
    monitor = ConvergenceMonitor()
    monitor.record_pivot(50.0)
    for _ in range(10):
        monitor.record_pivot(50.0, is_degenerate=True)

    assert monitor.is_stalled()
    assert monitor.is_highly_degenerate()
    assert monitor.degenerate_pivots == 10


def test_improvement_resets_stall_counter():
    monitor = ConvergenceMonitor()
    for objective in (50.0, 50.0, 50.0, 40.0):
        monitor.record_pivot(objective)

    assert monitor.consecutive_no_improvement == 0


def test_history_window():
    monitor = ConvergenceMonitor(window_size=3)
    for objective in range(10, 0, -1):
        monitor.record_pivot(float(objective))

    assert list(monitor.objective_history) == [3.0, 2.0, 1.0]


def test_degeneracy_needs_minimum_sample():
    monitor = ConvergenceMonitor()
    monitor.record_pivot(1.0, is_degenerate=True)

    assert not monitor.is_highly_degenerate()
