"""Curve generation: net income, marginal rate and effective rate over income.

Every grid point is a fresh CONTINUOUS evaluation; points do not depend on
each other, only the marginal rate combines adjacent adjusted totals
afterwards.
"""

import logging
import math
from typing import List, Mapping, Optional

from .engine import evaluate
from .schemas import CurveSeries, EvaluationMode, EvaluationRequest, RuleSet
from .taxes import child_benefit_amount

logger = logging.getLogger(__name__)

STEP = 100
BASE_MAX_INCOME = 180_000
AXIS_EXTENSION_THRESHOLD = 170_000
AXIS_EXTENSION_STEP = 100_000


def axis_ceiling(highlight_income: Optional[float] = None) -> int:
    """Upper bound of the income grid.

    The base ceiling applies when nothing is highlighted. A highlighted
    income above the extension threshold moves the ceiling to the next
    whole extension step above it, so the point is never off-grid.
    """
    if highlight_income is None or not math.isfinite(highlight_income):
        return BASE_MAX_INCOME
    if highlight_income <= AXIS_EXTENSION_THRESHOLD:
        return BASE_MAX_INCOME
    return (math.floor(highlight_income / AXIS_EXTENSION_STEP) + 1) * AXIS_EXTENSION_STEP


def valid_step(step) -> bool:
    return step is not None and math.isfinite(step) and step > 0


def income_grid(max_income: float, step: float = STEP) -> List[float]:
    """0, step, 2*step, ... up to and including max_income."""
    if not valid_step(step) or not math.isfinite(max_income) or max_income < 0:
        return [0]
    count = int(max_income // step) + 1
    return [i * step for i in range(count)]


def adjusted_tax(request: EvaluationRequest, ruleset: Optional[RuleSet], child_benefit: float) -> float:
    """Total tax less the flat household credit."""
    return evaluate(request, ruleset).total_tax - child_benefit


def marginal_rates(adjusted: List[float], step: float) -> List[float]:
    """Backward differences in percent; the first point is 0."""
    rates = [0.0] * len(adjusted)
    for i in range(1, len(adjusted)):
        rates[i] = (adjusted[i] - adjusted[i - 1]) / step * 100
    return rates


def generate_curve(
    request: EvaluationRequest,
    catalog: Mapping[str, RuleSet],
    max_income: Optional[float] = None,
    step: float = STEP,
    ruleset_name: Optional[str] = None,
) -> CurveSeries:
    """Sweep income for one rule set.

    Args:
        request: Household options; gross_income is the highlighted point
            (0 for none) and decides the grid ceiling when max_income is None
        catalog: Available rule sets
        max_income: Grid ceiling override
        step: Grid spacing, also the marginal-rate difference
        ruleset_name: Evaluate against this rule set instead of
            request.ruleset (for comparison curves)

    Returns:
        CurveSeries; empty series if the rule set is unknown
    """
    name = ruleset_name or request.ruleset
    ruleset = catalog.get(name)
    series = CurveSeries(ruleset=name)
    if ruleset is None:
        logger.debug(f"missing_reference_data: unknown rule set '{name}', empty curve")
        return series

    if max_income is None or not math.isfinite(max_income):
        max_income = axis_ceiling(request.gross_income or None)
    if not valid_step(step):
        logger.debug(f"degenerate_parameter: curve step {step!r}, using {STEP}")
        step = STEP

    base = request.model_copy(update={"ruleset": name, "mode": EvaluationMode.CONTINUOUS})
    child_benefit = child_benefit_amount(ruleset, request.children)

    grid = income_grid(max_income, step)
    adjusted = [adjusted_tax(base.at(income), ruleset, child_benefit) for income in grid]

    series.gross = grid
    series.net = [income - tax for income, tax in zip(grid, adjusted)]
    series.marginal = marginal_rates(adjusted, step)
    series.effective = [
        0.0 if income == 0 else tax / income * 100 for income, tax in zip(grid, adjusted)
    ]
    logger.debug(f"curve for '{name}': {len(grid)} points to {max_income}")
    return series
