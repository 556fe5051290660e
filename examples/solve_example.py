"""CLI script that solves the sample station/point distribution problem."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from transport_solver import load_problem, save_result, solve_transportation  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Solve the sample transportation problem")
    parser.add_argument(
        "problem",
        nargs="?",
        help="Path to a problem JSON file (default: sample_problem.json next to this script)",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Where to write the solution JSON (default: <problem>_solution.json)",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Maximum number of stepping-stone pivots",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    )
    args = parser.parse_args()

    # Configure logging based on verbosity
    if args.verbose >= 2:
        level = logging.DEBUG
    elif args.verbose >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    base_dir = Path(__file__).resolve().parent
    problem_path = Path(args.problem) if args.problem else base_dir / "sample_problem.json"
    output_path = (
        Path(args.output)
        if args.output
        else base_dir / problem_path.name.replace("_problem.json", "_solution.json")
    )
    if output_path == problem_path:
        output_path = problem_path.with_name(f"{problem_path.stem}_solution.json")

    problem = load_problem(problem_path)
    result = solve_transportation(problem, max_iterations=args.max_iterations)
    save_result(output_path, result)

    for allocation in result.allocations:
        print(allocation)
    print(f"Solved {problem_path.name}: status={result.status}, objective={result.objective}")


if __name__ == "__main__":
    main()
