import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver.solver import load_problem, save_result, solve_transportation  # noqa: E402


def test_solver_end_to_end(tmp_path: Path):
    # Exercise the public solver facade by round-tripping a small JSON instance.
    problem_payload = {
        "supply": [10, 10],
        "demand": [5, 8],
        "costs": [[4, 1], [2, 6]],
        "source_names": ["North Depot", "South Depot"],
        "destination_names": ["Clinic", "School"],
        "route_names": ["N-C", "N-S", "S-C", ""],
    }

    problem_path = tmp_path / "problem.json"
    problem_path.write_text(json.dumps(problem_payload), encoding="utf-8")

    problem = load_problem(problem_path)
    result = solve_transportation(problem)

    assert result.status == "optimal"
    assert result.dummy_destination is True
    assert result.objective == pytest.approx(18.0)
    assert [(a.route_name, a.units) for a in result.allocations] == [
        ("N-S", pytest.approx(8.0)),
        ("S-C", pytest.approx(5.0)),
    ]

    result_path = tmp_path / "result.json"
    save_result(result_path, result)

    saved = json.loads(result_path.read_text(encoding="utf-8"))
    assert saved["status"] == "optimal"
    assert saved["objective"] == pytest.approx(18.0)
    assert saved["iterations"] >= 1
    assert [entry["route"] for entry in saved["allocations"]] == ["N-S", "S-C"]


def test_example_fixture_solves():
    fixture = PROJECT_ROOT / "examples" / "sample_problem.json"

    problem = load_problem(fixture)
    result = solve_transportation(problem)

    assert result.status == "optimal"
    assert result.objective == pytest.approx(2850.0)
    assert len(result.allocations) == 6
