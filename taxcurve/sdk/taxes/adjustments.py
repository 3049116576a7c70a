"""Adjustment calculators: child benefit and its clawback, loan repayment,
marriage credit, childcare subsidy and the flat self-employed contribution.

Each returns an unsigned amount; the pipeline attaches the sign (credit or
debit). Missing or degenerate parameters give 0 rather than raising.
"""

import math
from typing import List, Optional, Sequence

from ..schemas import (
    EvaluationMode,
    FlatRateContribution,
    LoanComponent,
    RuleSet,
)

WEEKS_PER_YEAR = 52

# Income per percent of clawback when the rule set gives neither an end
# threshold nor an explicit increment (the pre-2024 £100-per-1% rule)
DEFAULT_CLAWBACK_INCREMENT = 100

# Marriage allowance is relieved at the basic rate
MARRIAGE_CREDIT_RATE = 0.20

CHILDCARE_PRESETS = [0, 1000, 2000, 3000, 5000, 7500, 10000]


def child_benefit_amount(ruleset: Optional[RuleSet], children: int) -> float:
    """Annual child benefit for the household."""
    if ruleset is None or children <= 0 or ruleset.child_benefit is None:
        return 0.0
    weekly = ruleset.child_benefit.first + ruleset.child_benefit.subsequent * (children - 1)
    return WEEKS_PER_YEAR * weekly


def clawback_increment(ruleset: RuleSet) -> float:
    """Income per percentage point of clawback."""
    start = ruleset.hicbc_start or 0
    increment = ruleset.hicbc_income_per_percent
    if not increment and ruleset.hicbc_end:
        increment = (ruleset.hicbc_end - start) / 100
    if not increment or increment <= 0:
        increment = DEFAULT_CLAWBACK_INCREMENT
    return increment


def benefit_clawback(
    gross_income: float,
    ruleset: RuleSet,
    children: int,
    mode: EvaluationMode = EvaluationMode.STEPPED,
) -> float:
    """High income child benefit charge, bounded by the benefit itself.

    STEPPED charges 1% per whole increment (the first pound over the start
    already costs 1%). CONTINUOUS phases the charge in linearly.
    """
    total_benefit = child_benefit_amount(ruleset, children)
    if total_benefit <= 0:
        return 0.0

    start = ruleset.hicbc_start or 0
    if gross_income <= start:
        return 0.0

    increment = clawback_increment(ruleset)
    end = ruleset.hicbc_end or start + increment * 100

    if mode == EvaluationMode.STEPPED:
        percent = min(100, math.floor((gross_income - start) / increment) + 1)
        return total_benefit * percent / 100

    fraction = (gross_income - start) / max(end - start, increment)
    return total_benefit * min(1.0, max(0.0, fraction))


def loan_repayment(gross_income: float, components: Sequence[LoanComponent]) -> float:
    """Sum of repayments over all components of the plan."""
    total = 0.0
    for component in components:
        if gross_income > component.threshold:
            total += (gross_income - component.threshold) * component.rate
    return total


def marriage_credit(income: float, ruleset: RuleSet) -> float:
    """Basic-rate credit for the allowance transferred from a spouse.

    The window is checked against the recipient's own income: above the
    personal allowance (so there is tax to relieve) and below the
    max-earnings limit.
    """
    allowance = ruleset.statutory_personal_allowance
    max_earnings = ruleset.marriage_allowance_max_earnings
    if not ruleset.marriage_allowance or max_earnings is None:
        return 0.0
    if not (allowance < income < max_earnings):
        return 0.0
    return allowance * ruleset.marriage_allowance * MARRIAGE_CREDIT_RATE


def eligible_childcare_children(ruleset: RuleSet, children: int) -> int:
    max_children = ruleset.childcare_max_children or children
    return max(0, min(children, max_children))


def childcare_subsidy(
    income: float,
    ruleset: RuleSet,
    children: int,
    subsidy_per_child: float,
) -> float:
    """All-or-nothing subsidy for income strictly inside (min, max) earnings."""
    if subsidy_per_child <= 0 or children <= 0:
        return 0.0

    eligible = eligible_childcare_children(ruleset, children)
    potential = subsidy_per_child * eligible
    if potential <= 0:
        return 0.0

    if ruleset.childcare_min_earnings is not None and income <= ruleset.childcare_min_earnings:
        return 0.0
    if ruleset.childcare_max_earnings is not None and income >= ruleset.childcare_max_earnings:
        return 0.0
    return potential


def childcare_options(ruleset: Optional[RuleSet]) -> List[int]:
    """Preset per-child subsidy amounts the rule set can support."""
    if ruleset is None or ruleset.childcare_subsidy_per_child <= 0:
        return [0]
    options = [a for a in CHILDCARE_PRESETS if a <= ruleset.childcare_subsidy_per_child]
    return options or [0]


def flat_contribution(gross_income: float, record: Optional[FlatRateContribution]) -> float:
    """Flat weekly contribution, payable only above the lower profits limit."""
    if record is None or not record.weekly_amount:
        return 0.0
    if gross_income <= record.lower_profits_limit:
        return 0.0
    return WEEKS_PER_YEAR * record.weekly_amount
