"""Custom exceptions for the transportation solver library."""

from __future__ import annotations


class TransportationSolverError(Exception):
    """Base exception for all transportation solver errors.

    All custom exceptions in the transport_solver package inherit from this class,
    allowing users to catch all solver-related errors with a single except clause.

    Example:
        try:
            result = solve_transportation(problem)
        except TransportationSolverError as e:
            print(f"Solver error: {e}")
    """


class InvalidProblemError(TransportationSolverError):
    """Raised when a problem definition violates the input contract.

    This includes:
    - Supply length not matching the number of cost rows
    - Demand length not matching the number of cost columns
    - Negative or non-finite supply/demand quantities
    - Non-finite unit costs
    - Name lists whose length does not match the node lists
    - Malformed JSON input

    The message names the offending array and, where relevant, the index.

    Example:
        InvalidProblemError("supply[2] is negative (-5.0). Supplies must be >= 0.")
    """

    def __init__(self, message: str, field: str | None = None, index: int | tuple[int, int] | None = None):
        """Initialize with message and optional location of the violation."""
        super().__init__(message)
        self.field = field
        self.index = index


class IterationLimitError(TransportationSolverError):
    """Raised when the stepping-stone loop reaches its pivot limit before converging.

    This is technically not an error condition - the solver returns the best
    allocation found so far, which is feasible but not proven optimal. This
    exception is provided for users who want to treat iteration limits as errors.

    Note: The solver returns a TransportationResult with status="iteration_limit"
    rather than raising this exception. Users can check the status field instead.

    Example:
        if result.status == "iteration_limit":
            raise IterationLimitError(
                "Iteration limit reached: 500 pivots completed",
                iterations=result.iterations,
                objective=result.objective,
            )
    """

    def __init__(
        self,
        message: str,
        iterations: int = 0,
        objective: float | None = None,
        status: str = "iteration_limit",
    ):
        """Initialize with message and solution state."""
        super().__init__(message)
        self.iterations = iterations
        self.objective = objective
        self.status = status


class SolverConfigurationError(TransportationSolverError):
    """Raised when solver configuration or options are invalid.

    This includes:
    - Non-positive iteration limits
    - Non-positive tolerance or epsilon
    - Non-positive progress interval

    Example:
        SolverConfigurationError("max_iterations must be positive, got -1")
    """
