"""Stepping-stone optimization of a transportation basis."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass

import numpy as np

from .basis import AllocationMatrix, Cell, find_closed_path, fix_degeneracy
from .data import ProgressCallback, ProgressInfo, SolverOptions
from .diagnostics import ConvergenceMonitor
from .exceptions import SolverConfigurationError


@dataclass(frozen=True)
class CycleEvaluation:
    """Evaluation of one empty cell as a candidate to enter the basis.

    Attributes:
        path: Closed path starting at the candidate; signs alternate ``+ - + -``.
        marginal_cost: Net change in total cost per unit shifted around the path.
        leaving: The ``-`` cell with the smallest quantity (first one on ties).
        pivot_amount: Quantity of the leaving cell.
    """

    path: tuple[Cell, ...]
    marginal_cost: float
    leaving: Cell
    pivot_amount: float

    @property
    def entering(self) -> Cell:
        return self.path[0]


def evaluate_path(path: tuple[Cell, ...]) -> CycleEvaluation:
    """Compute marginal cost and leaving cell of a closed path."""
    marginal_cost = 0.0
    leaving = None
    for position, cell in enumerate(path):
        if position % 2 == 0:
            marginal_cost += cell.cost
        else:
            marginal_cost -= cell.cost
            if leaving is None or cell.quantity < leaving.quantity:
                leaving = cell
    return CycleEvaluation(
        path=path,
        marginal_cost=marginal_cost,
        leaving=leaving,
        pivot_amount=leaving.quantity,
    )


class SteppingStone:
    """Stepping-stone optimizer for a balanced transportation basis.

    Each iteration evaluates every empty cell (row-major), computing the net
    marginal cost of routing one unit through it along its closed path. The cell
    with the most negative marginal cost enters the basis; the ``-`` cell with the
    smallest quantity leaves. The loop ends when no cell improves the cost by
    more than ``options.tolerance`` or when the pivot limit is reached.

    Attributes:
        matrix: The allocation basis, modified in place.
        options: Solver configuration.
        iterations: Number of pivots performed so far.
        objective_history: Total cost before the first pivot and after each pivot.
            Epsilon pivots may leave it unchanged within float resolution.
        monitor: Convergence monitor fed with every pivot.

    Note:
        This class is internal to the solver. Use solve_transportation() instead
        of instantiating it directly.
    """

    def __init__(self, matrix: AllocationMatrix, options: SolverOptions | None = None):
        self.matrix = matrix
        self.options = options if options is not None else SolverOptions()
        self.logger = logging.getLogger(__name__)
        self.iterations = 0
        self.objective_history: list[float] = []
        self.monitor = ConvergenceMonitor()
        self._stall_reported = False

    def evaluate_cell(self, row: int, col: int) -> CycleEvaluation | None:
        """Evaluate an empty cell; None if it closes no cycle with the basis."""
        candidate = Cell(row, col, 0.0, float(self.matrix.costs[row, col]))
        path = find_closed_path(self.matrix, candidate)
        if not path:
            return None
        return evaluate_path(path)

    def find_entering(self) -> CycleEvaluation | None:
        """Return the most improving cycle, or None if the basis is optimal."""
        best: CycleEvaluation | None = None
        threshold = -self.options.tolerance
        for row, col in self.matrix.empty_cells():
            evaluation = self.evaluate_cell(row, col)
            if evaluation is None:
                continue
            if evaluation.marginal_cost < threshold and (
                best is None or evaluation.marginal_cost < best.marginal_cost
            ):
                best = evaluation
        return best

    def pivot(self, evaluation: CycleEvaluation) -> None:
        """Shift ``pivot_amount`` around the cycle of ``evaluation``.

        ``+`` cells gain the amount and ``-`` cells lose it. The entering cell
        always joins the basis and the leaving cell always exits it; any other
        cell left with a quantity at or below epsilon is vacated as well.
        """
        amount = evaluation.pivot_amount
        epsilon = self.options.epsilon
        for position, cell in enumerate(evaluation.path):
            if position % 2 == 0:
                self.matrix.occupy(cell.row, cell.col, cell.quantity + amount)
                continue
            remaining = cell.quantity - amount
            if cell is evaluation.leaving or remaining <= epsilon:
                self.matrix.vacate(cell.row, cell.col)
            else:
                self.matrix.occupy(cell.row, cell.col, remaining)

    def run(
        self,
        max_iterations: int | None = None,
        progress_callback: ProgressCallback | None = None,
        progress_interval: int = 1,
    ) -> str:
        """Pivot until optimal or until the pivot limit is reached.

        Args:
            max_iterations: Pivot limit. Overrides options.max_iterations if provided.
            progress_callback: Optional callable receiving ProgressInfo.
            progress_interval: Pivots between progress callbacks (default: 1).

        Returns:
            'optimal' when no improving cycle remains, 'iteration_limit' when the
            limit stopped the loop while an improving cycle still existed.
        """
        rows, cols = self.matrix.shape
        if max_iterations is None:
            max_iterations = self.options.resolve_max_iterations(rows, cols)
        if max_iterations <= 0:
            raise SolverConfigurationError(f"max_iterations must be positive, got {max_iterations}.")
        if progress_interval <= 0:
            raise SolverConfigurationError(
                f"progress_interval must be positive, got {progress_interval}."
            )

        start_time = time.time()
        fix_degeneracy(self.matrix, self.options.epsilon)
        self.objective_history.append(self.matrix.total_cost())
        self.logger.info(
            "Starting stepping-stone optimization",
            extra={
                "rows": rows,
                "cols": cols,
                "basis_size": self.matrix.basis_size,
                "initial_objective": self.objective_history[0],
                "max_iterations": max_iterations,
            },
        )

        while True:
            entering = self.find_entering()
            if entering is None:
                status = "optimal"
                break
            if self.iterations >= max_iterations:
                status = "iteration_limit"
                self.logger.warning(
                    "Iteration limit reached before optimality was confirmed",
                    extra={
                        "iterations": self.iterations,
                        "max_iterations": max_iterations,
                        "objective": self.objective_history[-1],
                    },
                )
                break

            self.pivot(entering)
            self.iterations += 1
            fix_degeneracy(self.matrix, self.options.epsilon)
            objective = self.matrix.total_cost()
            self.objective_history.append(objective)
            self._record_pivot(entering, objective)

            if self.logger.isEnabledFor(logging.DEBUG):
                self.logger.debug(
                    f"Pivot {self.iterations}: cell {entering.entering.position} entered, "
                    f"cell {entering.leaving.position} left",
                    extra={
                        "iteration": self.iterations,
                        "marginal_cost": entering.marginal_cost,
                        "pivot_amount": entering.pivot_amount,
                        "cycle_length": len(entering.path),
                        "objective": objective,
                    },
                )

            if progress_callback is not None and self.iterations % progress_interval == 0:
                progress_callback(
                    ProgressInfo(
                        iteration=self.iterations,
                        max_iterations=max_iterations,
                        objective=objective,
                        pivot_amount=entering.pivot_amount,
                        marginal_cost=entering.marginal_cost,
                        elapsed_time=time.time() - start_time,
                    )
                )

        self.logger.info(
            "Stepping-stone optimization complete",
            extra={
                "status": status,
                "iterations": self.iterations,
                "objective": self.objective_history[-1],
                "degenerate_pivots": self.monitor.degenerate_pivots,
                "elapsed_ms": (time.time() - start_time) * 1000,
            },
        )
        return status

    def _record_pivot(self, evaluation: CycleEvaluation, objective: float) -> None:
        self.monitor.record_pivot(
            objective, is_degenerate=evaluation.pivot_amount <= self.options.epsilon
        )
        if self._stall_reported:
            return
        if self.monitor.is_stalled() or self.monitor.is_highly_degenerate():
            self._stall_reported = True
            self.logger.warning(
                "Stepping-stone progress is stalling on degenerate pivots",
                extra={
                    "iteration": self.iterations,
                    "degeneracy_ratio": self.monitor.get_degeneracy_ratio(),
                    "consecutive_no_improvement": self.monitor.consecutive_no_improvement,
                },
            )


def compute_marginal_costs(matrix: AllocationMatrix) -> np.ndarray:
    """Net marginal cost of every empty cell of ``matrix``.

    Occupied cells and empty cells that close no cycle are reported as ``nan``.
    A basis is optimal when every finite entry is non-negative.
    """
    marginal = np.full(matrix.shape, math.nan)
    for row, col in matrix.empty_cells():
        path = find_closed_path(matrix, Cell(row, col, 0.0, float(matrix.costs[row, col])))
        if path:
            marginal[row, col] = evaluate_path(path).marginal_cost
    return marginal
