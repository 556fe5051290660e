"""Numeric validation for transportation problems.

The stepping-stone loop treats quantities at or below a small epsilon as empty,
so problems whose quantities approach that scale, or whose values span many
orders of magnitude, can lose precision. This module reports such issues before
solving.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .data import TransportationProblem

EXTREME_HIGH = 1e10
EXTREME_LOW = 1e-8


@dataclass
class NumericWarning:
    """Warning about numeric issues in a transportation problem.

    Attributes:
        severity: Severity level ('low', 'medium', 'high')
        category: Category of warning ('range' or 'conditioning')
        message: Human-readable warning message
        recommendation: Suggested action to resolve the issue
    """

    severity: str
    category: str
    message: str
    recommendation: str


@dataclass
class NumericAnalysis:
    """Results of numeric analysis on a transportation problem.

    Attributes:
        is_well_conditioned: Whether the problem appears numerically stable
        warnings: List of numeric warnings detected
        cost_range: Ratio of max to min absolute non-zero cost
        quantity_range: Ratio of max to min non-zero supply/demand
        has_extreme_values: Whether any extreme values were detected
    """

    is_well_conditioned: bool
    warnings: list[NumericWarning]
    cost_range: float
    quantity_range: float
    has_extreme_values: bool


def _value_range(values: list[float]) -> float:
    if not values:
        return 1.0
    return max(values) / min(values)


def _range_warning(label: str, value_range: float) -> NumericWarning | None:
    if value_range > 1e8:
        return NumericWarning(
            severity="high",
            category="conditioning",
            message=f"{label} range is very wide: {value_range:.2e} (max/min ratio)",
            recommendation=f"Wide {label.lower()} ranges can cause numerical instability. Consider rescaling.",
        )
    if value_range > 1e6:
        return NumericWarning(
            severity="medium",
            category="conditioning",
            message=f"{label} range is wide: {value_range:.2e} (max/min ratio)",
            recommendation=f"Consider scaling {label.lower()} values to improve numerical stability",
        )
    return None


def analyze_numeric_properties(problem: TransportationProblem) -> NumericAnalysis:
    """Analyze numeric properties of a transportation problem.

    Checks for:
    - Very large values (> 1e10) in costs or quantities
    - Quantities small enough (< 1e-8) to be confused with degenerate placeholders
    - Wide cost or quantity ranges
    """
    warnings_list: list[NumericWarning] = []
    has_extreme_values = False

    for i, row in enumerate(problem.costs):
        for j, cost in enumerate(row):
            if abs(cost) > EXTREME_HIGH:
                has_extreme_values = True
                warnings_list.append(NumericWarning(
                    severity="medium",
                    category="range",
                    message=f"Route {i}->{j} has very large cost {cost:.2e}",
                    recommendation="Consider scaling costs to range [0.01, 1000] for better stability",
                ))

    for label, values in (("Source", problem.supply), ("Destination", problem.demand)):
        for idx, value in enumerate(values):
            if value > EXTREME_HIGH:
                has_extreme_values = True
                warnings_list.append(NumericWarning(
                    severity="medium",
                    category="range",
                    message=f"{label} {idx} has very large quantity {value:.2e}",
                    recommendation="Consider scaling supplies/demands for better numerical stability",
                ))
            elif 0 < value < EXTREME_LOW:
                has_extreme_values = True
                warnings_list.append(NumericWarning(
                    severity="low",
                    category="range",
                    message=f"{label} {idx} has very small quantity {value:.2e}",
                    recommendation="Quantities this small may be treated as empty cells; rescale or remove them",
                ))

    costs = [abs(cost) for row in problem.costs for cost in row if cost != 0.0]
    quantities = [value for value in (*problem.supply, *problem.demand) if value > 0.0]
    cost_range = _value_range(costs)
    quantity_range = _value_range(quantities)
    for label, value_range in (("Cost", cost_range), ("Quantity", quantity_range)):
        warning = _range_warning(label, value_range)
        if warning is not None:
            warnings_list.append(warning)

    is_well_conditioned = not any(w.severity in ("medium", "high") for w in warnings_list)
    return NumericAnalysis(
        is_well_conditioned=is_well_conditioned,
        warnings=warnings_list,
        cost_range=cost_range,
        quantity_range=quantity_range,
        has_extreme_values=has_extreme_values,
    )


def validate_numeric_properties(
    problem: TransportationProblem,
    strict: bool = False,
    warn: bool = True,
) -> None:
    """Validate numeric properties and optionally warn about issues.

    Args:
        problem: The transportation problem to validate
        strict: If True, raise exception on high-severity warnings
        warn: If True, emit Python warnings for detected issues

    Raises:
        ValueError: If strict=True and high-severity issues are found
    """
    analysis = analyze_numeric_properties(problem)

    if warn and analysis.warnings:
        for severity in ("high", "medium", "low"):
            group = [w for w in analysis.warnings if w.severity == severity]
            if not group:
                continue
            msg = f"{severity.capitalize()}-severity numeric issues detected ({len(group)} total):\n"
            for w in group[:3]:
                msg += f"  - {w.message}\n    → {w.recommendation}\n"
            if len(group) > 3:
                msg += f"  ... and {len(group) - 3} more\n"
            warnings.warn(msg, UserWarning, stacklevel=2)

    if strict:
        high_warnings = [w for w in analysis.warnings if w.severity == "high"]
        if high_warnings:
            error_msg = "Problem has high-severity numeric issues:\n"
            for w in high_warnings:
                error_msg += f"  - {w.message}\n    → {w.recommendation}\n"
            raise ValueError(error_msg)
