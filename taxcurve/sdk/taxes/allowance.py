"""Personal allowance with high-income withdrawal.

The withdrawal rate may be given either way round: 0.5 ("50p of allowance
per pound") or 2 ("£1 of allowance per £2"). Both describe the same rule.
"""

import math

from ..schemas import EvaluationMode, RuleSet


def withdrawal_applies(gross_income: float, ruleset: RuleSet) -> bool:
    threshold = ruleset.allowance_withdrawal_threshold
    rate = ruleset.allowance_withdrawal_rate
    if threshold is None or not rate or rate <= 0:
        return False
    return gross_income > threshold


def personal_allowance(
    gross_income: float,
    ruleset: RuleSet,
    mode: EvaluationMode = EvaluationMode.STEPPED,
) -> float:
    """Income-tax-free allowance at this income.

    STEPPED loses £1 per whole £N over the threshold (the statutory
    staircase). CONTINUOUS withdraws linearly, so a swept curve has no
    staircase artifacts; the two differ by less than one step at any income.
    """
    allowance = ruleset.statutory_personal_allowance
    if not withdrawal_applies(gross_income, ruleset):
        return allowance

    rate = ruleset.allowance_withdrawal_rate
    excess = gross_income - ruleset.allowance_withdrawal_threshold

    if mode == EvaluationMode.STEPPED:
        pounds_per_step = 1 / rate if rate < 1 else rate
        steps = math.floor(excess / pounds_per_step)
        return max(0.0, allowance - steps)

    reduction_per_pound = rate if rate < 1 else 1 / rate
    return max(0.0, allowance - excess * reduction_per_pound)
