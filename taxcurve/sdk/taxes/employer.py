"""Employer cost gross-down.

For partnership/LLP and inside-IR35 income the stated figure is the total
cost, including an employer-side contribution. Solving

    stated = taxable + rate * max(0, taxable - threshold)

for taxable income gives a closed form, so no iteration is needed.
"""

from typing import Tuple

from ..schemas import EmployerContributions, EmploymentCategory


def gross_down(stated_income: float, employer_rate: float, secondary_threshold: float = 0) -> Tuple[float, float]:
    """Split a cost-inclusive figure into (taxable_income, employer_contribution).

    Args:
        stated_income: Cost including the employer-side charge
        employer_rate: Employer contribution rate (0.15 for 15%)
        secondary_threshold: Annual threshold below which no employer
            contribution is due (0 or less means none)
    """
    if employer_rate <= 0:
        return stated_income, 0.0

    if not secondary_threshold or secondary_threshold <= 0:
        taxable = stated_income / (1 + employer_rate)
        return taxable, stated_income - taxable

    if stated_income <= secondary_threshold:
        return stated_income, 0.0

    taxable = (stated_income + employer_rate * secondary_threshold) / (1 + employer_rate)
    return taxable, max(0.0, stated_income - taxable)


def employer_rate_for(category: EmploymentCategory, config: EmployerContributions) -> float:
    """Rate applicable to the category (0 when it needs no gross-down)."""
    if category == EmploymentCategory.PARTNERSHIP:
        rate = config.partnership_rate
    elif category == EmploymentCategory.IR35:
        rate = config.employer_rate
    else:
        rate = None
    return rate if rate and rate > 0 else 0.0


def employer_line_label(category: EmploymentCategory) -> str:
    if category == EmploymentCategory.IR35:
        return "Employer NI (IR35)"
    return "Employer NI (Partnership)"
