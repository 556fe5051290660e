"""File I/O helpers for transportation problems."""

from __future__ import annotations

import json
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any

from .data import TransportationProblem, TransportationResult, build_problem
from .exceptions import InvalidProblemError


def load_problem(path: str | Path) -> TransportationProblem:
    """Load a transportation instance from a JSON file."""
    with Path(path).open("r", encoding="utf-8") as fh:
        payload: MutableMapping[str, Any] = json.load(fh)
    if not isinstance(payload, dict):
        raise InvalidProblemError(
            f"Invalid problem format: expected a JSON object, got {type(payload).__name__}."
        )
    supply = payload.get("supply")
    demand = payload.get("demand")
    costs = payload.get("costs")
    for name, value in (("supply", supply), ("demand", demand), ("costs", costs)):
        if not isinstance(value, list):
            raise InvalidProblemError(
                "Invalid problem format: JSON must include 'supply', 'demand' and 'costs' "
                f"arrays. Got {name} type: {type(value).__name__}",
                field=name,
            )
    # Defer to the core builder so validation rules remain centralized in one place.
    return build_problem(
        supply=supply,
        demand=demand,
        costs=costs,
        source_names=payload.get("source_names"),
        destination_names=payload.get("destination_names"),
        route_names=payload.get("route_names"),
        tolerance=payload.get("tolerance", 1e-3),
    )


def save_result(path: str | Path, result: TransportationResult) -> None:
    """Persist a solver result to JSON."""
    data = {
        "status": result.status,
        "objective": result.objective,
        "iterations": result.iterations,
        "dummy_source": result.dummy_source,
        "dummy_destination": result.dummy_destination,
        "allocations": [
            {
                "source": allocation.source_name,
                "destination": allocation.destination_name,
                "route": allocation.route_name,
                "units": allocation.units,
                "unit_cost": allocation.unit_cost,
                "total_cost": allocation.total_cost,
                "source_index": allocation.source_index,
                "destination_index": allocation.destination_index,
            }
            for allocation in result.allocations
        ],
    }
    with Path(path).open("w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2, sort_keys=False)
