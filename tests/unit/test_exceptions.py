"""Tests for custom exception hierarchy."""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import (  # noqa: E402
    InvalidProblemError,
    IterationLimitError,
    SolverConfigurationError,
    TransportationSolverError,
)


def test_all_exceptions_inherit_from_base():
    assert issubclass(InvalidProblemError, TransportationSolverError)
    assert issubclass(IterationLimitError, TransportationSolverError)
    assert issubclass(SolverConfigurationError, TransportationSolverError)
    assert issubclass(TransportationSolverError, Exception)


def test_invalid_problem_error_location():
    error = InvalidProblemError("bad cost", field="costs", index=(1, 2))

    assert str(error) == "bad cost"
    assert error.field == "costs"
    assert error.index == (1, 2)


def test_iteration_limit_error_attributes():
    error = IterationLimitError("limit", iterations=12, objective=99.5)

    assert error.iterations == 12
    assert error.objective == 99.5
    assert error.status == "iteration_limit"
