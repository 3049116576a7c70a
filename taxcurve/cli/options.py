"""Shared options for commands that evaluate a household."""

import math
from typing import Optional

import click

from taxcurve.sdk import (
    ConfigError,
    EmploymentCategory,
    EvaluationRequest,
    RuleSetNotFoundError,
    RuleSetValidationError,
    get_catalog,
    get_setting,
    list_loan_plans,
    list_ruleset_names,
)
from taxcurve.sdk.taxes import childcare_options

EMPLOYMENT_CHOICES = [c.value for c in EmploymentCategory]


def household_options(f):
    """Attach the rule set and household options to a command."""
    decorators = [
        click.option("--ruleset", "-r", help="Rule set name (default: settings default_ruleset, else newest)"),
        click.option("--employment", "-e", type=click.Choice(EMPLOYMENT_CHOICES, case_sensitive=False),
                     help="Employment category (default: settings default_employment, else Employed)"),
        click.option("--children", type=click.IntRange(min=0), default=0, show_default=True,
                     help="Number of dependent children"),
        click.option("--childcare", type=click.FloatRange(min=0), default=0, show_default=True,
                     help="Childcare subsidy per child (£)"),
        click.option("--loan-plan", type=click.Choice([p.id for p in list_loan_plans()]),
                     help="Student loan plan"),
        click.option("--marriage", is_flag=True, help="Include marriage allowance credit"),
        click.option("--compare", "-c", "compare_ruleset", help="Second rule set to compare against"),
    ]
    for decorator in reversed(decorators):
        f = decorator(f)
    return f


def require_finite(ctx, param, value):
    """Option callback rejecting inf and nan, which FloatRange lets through."""
    if value is not None and not math.isfinite(value):
        raise click.BadParameter(f"{value} is not a finite number")
    return value


def load_catalog():
    """Load rule sets, converting ingestion errors to CLI errors."""
    try:
        catalog = get_catalog()
    except (RuleSetNotFoundError, RuleSetValidationError, ConfigError) as e:
        raise click.ClickException(str(e))
    if not catalog:
        raise click.ClickException("No rule sets found. Check 'tax-curve settings show'.")
    return catalog


def resolve_ruleset(name: Optional[str], catalog: dict, param: str = "--ruleset") -> str:
    name = name or get_setting("default_ruleset") or list_ruleset_names(catalog)[0]
    if name not in catalog:
        available = ", ".join(list_ruleset_names(catalog))
        raise click.BadParameter(f"Unknown rule set '{name}'. Available: {available}", param_hint=param)
    return name


def build_request(
    income: float,
    ruleset_name: str,
    catalog: dict,
    employment: Optional[str],
    children: int,
    childcare: float,
    loan_plan: Optional[str],
    marriage: bool,
) -> EvaluationRequest:
    employment = employment or get_setting("default_employment") or EmploymentCategory.EMPLOYED.value
    try:
        category = EmploymentCategory(employment)
    except ValueError:
        raise click.BadParameter(f"Unknown employment category '{employment}'", param_hint="--employment")

    if childcare:
        if children == 0:
            raise click.BadParameter("Childcare subsidy needs at least one child", param_hint="--childcare")
        options = childcare_options(catalog[ruleset_name])
        if childcare not in options:
            raise click.BadParameter(
                f"{ruleset_name} supports: {', '.join(str(o) for o in options)}",
                param_hint="--childcare",
            )

    return EvaluationRequest(
        gross_income=income,
        ruleset=ruleset_name,
        employment=category,
        children=children,
        childcare_subsidy_per_child=childcare,
        loan_plan=loan_plan,
        marriage_credit=marriage,
    )
