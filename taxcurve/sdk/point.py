"""Exact single-income evaluation and two-rule-set comparison.

Point queries run the pipeline in STEPPED mode. The marginal rate is the
forward difference to ``income + STEP``, the same step the curve uses, so
a highlighted point sits on (or very near) the swept curve.
"""

import logging
import math
from typing import Dict, List, Mapping, Optional

from .curve import STEP, valid_step
from .engine import evaluate
from .schemas import (
    AdjustmentEntry,
    AdjustmentKind,
    ComparisonDelta,
    EvaluationMode,
    EvaluationRequest,
    FormattedAdjustment,
    Issue,
    LineItem,
    PointBreakdown,
    PointSummary,
    RuleSet,
    Schedule,
)
from .taxes import child_benefit_amount, employer_line_label

logger = logging.getLogger(__name__)

CHILD_BENEFIT_LABEL = "Child benefit"


# =============================================================================
# Formatting
# =============================================================================


def round_to_pound(amount: float) -> int:
    """Round to nearest pound (0.50+ rounds away from zero)."""
    return int(amount + 0.5) if amount >= 0 else int(amount - 0.5)


def format_currency(value: float) -> str:
    return f"£{round_to_pound(value):,}"


def format_percent(value: Optional[float]) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "-"
    return f"{value:.1f}%"


def _sign(value: float) -> str:
    return "+" if value > 0 else "-" if value < 0 else ""


def format_delta_currency(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{_sign(value)}{format_currency(abs(value))}"


def format_delta_percent(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{_sign(value)}{abs(value):.1f}%"


def format_adjustment(entry: AdjustmentEntry) -> FormattedAdjustment:
    """Credits show as '+£x', debits as '-£x' (effect on net income)."""
    absolute = abs(entry.amount)
    if entry.kind == AdjustmentKind.CREDIT:
        sign, raw = "+", absolute
    else:
        sign, raw = "-", -absolute
    return FormattedAdjustment(
        label=entry.label,
        amount=f"{sign}{format_currency(absolute)}",
        kind=entry.kind,
        raw_amount=raw,
    )


def summary_strings(summary: PointSummary) -> Dict[str, str]:
    """Headline figures as display strings."""
    return {
        "after_tax_income": format_currency(summary.net_income),
        "total_tax": format_currency(summary.total_tax),
        "effective_rate": format_percent(summary.effective_rate),
        "marginal_rate": format_percent(summary.marginal_rate),
    }


# =============================================================================
# Point evaluation
# =============================================================================


def _adjusted_tax(request: EvaluationRequest, ruleset: RuleSet, child_benefit: float) -> float:
    return evaluate(request, ruleset).total_tax - child_benefit


def evaluate_point(
    request: EvaluationRequest,
    catalog: Mapping[str, RuleSet],
    step: float = STEP,
) -> Optional[PointSummary]:
    """Itemised STEPPED evaluation at request.gross_income.

    Returns:
        PointSummary, or None if the rule set is unknown
    """
    ruleset = catalog.get(request.ruleset)
    if ruleset is None:
        return None

    request = request.model_copy(update={"mode": EvaluationMode.STEPPED})
    result = evaluate(request, ruleset)
    issues = list(result.issues)
    if not valid_step(step):
        logger.debug(f"degenerate_parameter: marginal step {step!r}, using {STEP}")
        if Issue.DEGENERATE_PARAMETER not in issues:
            issues.append(Issue.DEGENERATE_PARAMETER)
        step = STEP
    income = result.gross_income

    child_benefit = child_benefit_amount(ruleset, request.children)
    total_tax = result.total_tax
    displayed_total = total_tax - min(child_benefit, total_tax)
    adjusted = total_tax - child_benefit

    next_adjusted = _adjusted_tax(request.at(income + step), ruleset, child_benefit)
    marginal_rate = (next_adjusted - adjusted) / step * 100
    effective_rate = 0.0 if income == 0 else adjusted / income * 100

    contribution_bands = [
        LineItem(label=b.label, amount=format_currency(b.amount))
        for b in result.bands_for(Schedule.CONTRIBUTIONS)
    ]
    if result.employer_contribution > 0:
        contribution_bands.append(
            LineItem(
                label=employer_line_label(request.employment),
                amount=format_currency(result.employer_contribution),
            )
        )

    entries: List[AdjustmentEntry] = list(result.adjustments)
    if child_benefit > 0:
        entries.insert(
            0,
            AdjustmentEntry(label=CHILD_BENEFIT_LABEL, amount=-child_benefit, kind=AdjustmentKind.CREDIT),
        )
    adjustments = [format_adjustment(e) for e in entries]
    adjustments_total = sum(a.raw_amount for a in adjustments)

    allowance = result.personal_allowance
    if allowance is None:
        allowance = ruleset.statutory_personal_allowance

    breakdown = PointBreakdown(
        income_tax_bands=[
            LineItem(label=b.label, amount=format_currency(b.amount))
            for b in result.bands_for(Schedule.INCOME_TAX)
        ],
        income_tax_total=format_currency(result.income_tax_total),
        contribution_bands=contribution_bands,
        contribution_total=format_currency(result.contribution_total + result.employer_contribution),
        personal_allowance=round_to_pound(allowance),
        adjustments=adjustments,
        adjustments_total=format_delta_currency(adjustments_total),
    )

    return PointSummary(
        ruleset=ruleset.name,
        income=income,
        net_income=income - adjusted,
        total_tax=displayed_total,
        adjusted_tax=adjusted,
        effective_rate=effective_rate,
        marginal_rate=marginal_rate,
        breakdown=breakdown,
        issues=issues,
    )


def compare_point(
    request: EvaluationRequest,
    compare_ruleset: str,
    catalog: Mapping[str, RuleSet],
    step: float = STEP,
) -> Optional[ComparisonDelta]:
    """Evaluate the same request under a second rule set.

    Deltas are compare minus primary: a positive delta_net_income means the
    comparison rule set leaves more income.

    Returns:
        ComparisonDelta, or None if either rule set is unknown
    """
    primary = evaluate_point(request, catalog, step)
    if primary is None:
        return None
    compare = evaluate_point(request.model_copy(update={"ruleset": compare_ruleset}), catalog, step)
    if compare is None:
        return None

    delta_net = compare.net_income - primary.net_income
    delta_tax = compare.total_tax - primary.total_tax

    return ComparisonDelta(
        ruleset=primary.ruleset,
        compare_ruleset=compare.ruleset,
        income=primary.income,
        delta_net_income=delta_net,
        delta_total_tax=delta_tax,
        compare_total_tax=compare.total_tax,
        compare_effective_rate=compare.effective_rate,
        compare_marginal_rate=compare.marginal_rate,
        display={
            "after_tax": format_delta_currency(delta_net),
            "total_tax_delta": format_delta_currency(delta_tax),
            "total_tax": format_currency(compare.total_tax),
            "effective_rate": format_percent(compare.effective_rate),
            "marginal_rate": format_percent(compare.marginal_rate),
        },
    )
