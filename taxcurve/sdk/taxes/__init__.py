"""taxes - Leaf calculators for the evaluation pipeline.

Scope:
- Progressive band tax (income tax and contribution classes)
- Personal allowance withdrawal (stepped and continuous)
- Adjustments: child benefit clawback, loan repayment, marriage credit,
  childcare subsidy, flat self-employed contribution
- Employer cost gross-down

Constraints:
- Pure calculation over a RuleSet - no file or config access
- No request objects - callers pass plain numbers and rule sets

Usage:
    from taxcurve.sdk.taxes import band_tax, personal_allowance

    total, breakdown = band_tax(47430, ruleset.income_tax)
"""

from .adjustments import (
    benefit_clawback,
    child_benefit_amount,
    childcare_options,
    childcare_subsidy,
    flat_contribution,
    loan_repayment,
    marriage_credit,
)
from .allowance import personal_allowance
from .bands import band_tax, title_case
from .employer import employer_line_label, employer_rate_for, gross_down

__all__ = [
    "band_tax",
    "title_case",
    "personal_allowance",
    "benefit_clawback",
    "child_benefit_amount",
    "childcare_options",
    "childcare_subsidy",
    "flat_contribution",
    "loan_repayment",
    "marriage_credit",
    "gross_down",
    "employer_rate_for",
    "employer_line_label",
]
