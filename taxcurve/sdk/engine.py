"""Evaluation pipeline.

One pass, no carried state: for a request and its rule set

    1. gross down cost-inclusive income (partnership/IR35)
    2. personal allowance reduces income for the income-tax schedule only
    3. income-tax bands on the reduced income
    4. contribution bands on the unreduced taxable income, for the class
       selected by employment category (plus the flat class for the
       self-employed)
    5. adjustments: clawback, loan, marriage credit, childcare subsidy
    6. total = bands + adjustments + employer contribution

Nothing here raises for bad input. Problems are recorded as ``Issue`` codes
on the result and logged at DEBUG.
"""

import logging
import math
from typing import List, Mapping, Optional, Tuple

from .loans import get_loan_plan
from .schemas import (
    AdjustmentEntry,
    AdjustmentKind,
    BandAmount,
    EmploymentCategory,
    EvaluationRequest,
    EvaluationResult,
    Issue,
    RuleSet,
    Schedule,
    TaxBand,
)
from .taxes import (
    band_tax,
    benefit_clawback,
    childcare_subsidy,
    employer_rate_for,
    flat_contribution,
    gross_down,
    loan_repayment,
    marriage_credit,
    personal_allowance,
)

logger = logging.getLogger(__name__)

EMPLOYEE_CLASS_LABEL = "NI Class 1"
SELF_EMPLOYED_CLASS_LABEL = "NI Class 4"
FLAT_CLASS_LABEL = "NI Class 2"

CLAWBACK_LABEL = "Child benefit clawback"
LOAN_LABEL = "Student loan"
MARRIAGE_LABEL = "Marriage allowance credit"
CHILDCARE_LABEL = "Childcare subsidy"


def sanitise_income(value) -> Tuple[float, bool]:
    """Return (income, was_valid). Non-numeric, non-finite and negative
    values become 0."""
    try:
        income = float(value)
    except (TypeError, ValueError):
        return 0.0, False
    if not math.isfinite(income) or income < 0:
        return 0.0, False
    return income, True


def transform_income(
    income: float, ruleset: RuleSet, employment: EmploymentCategory
) -> Tuple[float, float]:
    """Taxable income and employer contribution for the category."""
    config = ruleset.employer_contributions
    if not employment.requires_gross_down or config is None:
        return income, 0.0
    rate = employer_rate_for(employment, config)
    if rate <= 0:
        return income, 0.0
    return gross_down(income, rate, config.annual_secondary_threshold)


def contribution_schedule(
    ruleset: RuleSet, employment: EmploymentCategory
) -> Optional[Tuple[Tuple[TaxBand, ...], str]]:
    """(bands, class label) for the category; None when no contributions apply."""
    if employment == EmploymentCategory.RETIRED:
        return None
    if employment.is_self_employed:
        return ruleset.self_employed_contributions, SELF_EMPLOYED_CLASS_LABEL
    return ruleset.employee_contributions, EMPLOYEE_CLASS_LABEL


def _note(issues: List[Issue], issue: Issue, message: str) -> None:
    if issue not in issues:
        issues.append(issue)
    logger.debug(f"{issue.value}: {message}")


def _adjustments(
    request: EvaluationRequest,
    ruleset: RuleSet,
    taxable_income: float,
    issues: List[Issue],
) -> List[AdjustmentEntry]:
    entries = []

    if request.children > 0:
        if ruleset.child_benefit is None:
            _note(issues, Issue.MISSING_REFERENCE_DATA, f"{ruleset.name}: no child benefit data")
        else:
            charge = benefit_clawback(taxable_income, ruleset, request.children, request.mode)
            if charge > 0:
                entries.append(AdjustmentEntry(label=CLAWBACK_LABEL, amount=charge, kind=AdjustmentKind.DEBIT))

    if request.loan_plan:
        plan = get_loan_plan(request.loan_plan, ruleset)
        if plan is None:
            _note(issues, Issue.MISSING_REFERENCE_DATA, f"unknown loan plan '{request.loan_plan}'")
        else:
            repayment = loan_repayment(taxable_income, plan.components)
            if repayment > 0:
                entries.append(AdjustmentEntry(label=LOAN_LABEL, amount=repayment, kind=AdjustmentKind.DEBIT))

    if request.marriage_credit:
        if not ruleset.marriage_allowance:
            _note(issues, Issue.DEGENERATE_PARAMETER, f"{ruleset.name}: marriage allowance fraction is 0")
        credit = marriage_credit(taxable_income, ruleset)
        if credit > 0:
            entries.append(AdjustmentEntry(label=MARRIAGE_LABEL, amount=-credit, kind=AdjustmentKind.CREDIT))

    if request.children > 0 and request.childcare_subsidy_per_child > 0:
        subsidy = childcare_subsidy(
            taxable_income, ruleset, request.children, request.childcare_subsidy_per_child
        )
        if subsidy > 0:
            entries.append(AdjustmentEntry(label=CHILDCARE_LABEL, amount=-subsidy, kind=AdjustmentKind.CREDIT))

    return entries


def evaluate(request: EvaluationRequest, ruleset: Optional[RuleSet]) -> EvaluationResult:
    """Evaluate one request against one rule set.

    Args:
        request: Income and household options
        ruleset: Rule set to apply; None gives a neutral zero result

    Returns:
        EvaluationResult. ``total_tax`` may be negative when credits exceed
        bands and debits.
    """
    issues: List[Issue] = []
    income, valid = sanitise_income(request.gross_income)
    if not valid:
        _note(issues, Issue.INVALID_INPUT, f"income {request.gross_income!r} treated as 0")

    if ruleset is None:
        _note(issues, Issue.MISSING_REFERENCE_DATA, f"unknown rule set '{request.ruleset}'")
        return EvaluationResult(gross_income=income, taxable_income=income, issues=issues)

    taxable_income, employer_contribution = transform_income(income, ruleset, request.employment)

    if (
        ruleset.allowance_withdrawal_threshold is not None
        and ruleset.allowance_withdrawal_rate is not None
        and ruleset.allowance_withdrawal_rate <= 0
    ):
        _note(issues, Issue.DEGENERATE_PARAMETER, f"{ruleset.name}: allowance withdrawal rate <= 0")
    allowance = personal_allowance(taxable_income, ruleset, request.mode)

    income_tax_total, breakdown = band_tax(max(0.0, taxable_income - allowance), ruleset.income_tax)
    if not ruleset.income_tax:
        _note(issues, Issue.MISSING_REFERENCE_DATA, f"{ruleset.name}: no income tax bands")

    contribution_total = 0.0
    schedule = contribution_schedule(ruleset, request.employment)
    if schedule is not None:
        bands, class_label = schedule
        if not bands:
            _note(issues, Issue.MISSING_REFERENCE_DATA, f"{ruleset.name}: no {class_label} bands")
        contribution_total, contribution_bands = band_tax(taxable_income, bands, class_label)
        breakdown = breakdown + contribution_bands

        if request.employment.is_self_employed:
            flat = flat_contribution(taxable_income, ruleset.self_employed_flat)
            if flat > 0:
                contribution_total += flat
                breakdown.append(
                    BandAmount(
                        schedule=Schedule.CONTRIBUTIONS,
                        label=f"{FLAT_CLASS_LABEL} - Flat rate",
                        amount=flat,
                    )
                )

    adjustments = _adjustments(request, ruleset, taxable_income, issues)

    total_tax = (
        income_tax_total
        + contribution_total
        + sum(a.amount for a in adjustments)
        + employer_contribution
    )

    return EvaluationResult(
        gross_income=income,
        taxable_income=taxable_income,
        employer_contribution=employer_contribution,
        personal_allowance=allowance,
        income_tax_total=income_tax_total,
        contribution_total=contribution_total,
        band_breakdown=breakdown,
        adjustments=adjustments,
        total_tax=total_tax,
        issues=issues,
    )


def recompute(request: EvaluationRequest, catalog: Mapping[str, RuleSet]) -> EvaluationResult:
    """Resolve the request's rule set by name and evaluate.

    Callers invoke this whenever any request field changes; nothing is
    cached between calls.
    """
    return evaluate(request, catalog.get(request.ruleset))
