"""Convergence diagnostics for the stepping-stone loop.

The monitor tracks the objective after every pivot so the optimizer can report
stalling (long runs of pivots with negligible improvement, typically caused by
epsilon cells circulating in a degenerate basis) and an unusually high share of
degenerate pivots.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field


@dataclass
class ConvergenceMonitor:
    """Monitors pivot progress and detects stalling.

    Attributes:
        window_size: Number of recent objective values to keep.
        stall_threshold: Relative improvement below which a pivot counts as no progress.
        degeneracy_threshold: Ratio of degenerate pivots above which the run is
                              considered highly degenerate.

    Examples:
        >>> monitor = ConvergenceMonitor(window_size=50)
        >>> monitor.record_pivot(objective=4400.0, is_degenerate=False)
        >>> monitor.record_pivot(objective=3900.0, is_degenerate=False)
        >>> monitor.is_stalled()
        False
    """

    window_size: int = 50
    stall_threshold: float = 1e-12
    degeneracy_threshold: float = 0.5

    objective_history: deque[float] = field(default_factory=deque)
    degenerate_pivots: int = 0
    total_pivots: int = 0
    consecutive_no_improvement: int = 0

    def __post_init__(self) -> None:
        self.objective_history = deque(maxlen=self.window_size)

    def record_pivot(self, objective: float, is_degenerate: bool = False) -> None:
        """Record the objective reached by a pivot."""
        if self.objective_history:
            previous = self.objective_history[-1]
            scale = abs(previous) if abs(previous) > 1e-12 else 1.0
            if (previous - objective) / scale < self.stall_threshold:
                self.consecutive_no_improvement += 1
            else:
                self.consecutive_no_improvement = 0
        self.objective_history.append(objective)
        self.total_pivots += 1
        if is_degenerate:
            self.degenerate_pivots += 1

    def is_stalled(self, min_consecutive: int = 10) -> bool:
        return self.consecutive_no_improvement >= min_consecutive

    def is_highly_degenerate(self) -> bool:
        if self.total_pivots < 10:
            return False
        return self.get_degeneracy_ratio() > self.degeneracy_threshold

    def get_degeneracy_ratio(self) -> float:
        if self.total_pivots == 0:
            return 0.0
        return self.degenerate_pivots / self.total_pivots
