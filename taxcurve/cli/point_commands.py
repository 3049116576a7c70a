"""Point evaluation command."""

import json

import click
from rich.console import Console

from taxcurve.sdk import compare_point, evaluate_point, summary_strings

from .options import build_request, household_options, load_catalog, resolve_ruleset
from .renderers.point_renderer import render_point


@click.command("point")
@click.argument("income", type=click.FloatRange(min=0))
@household_options
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table",
              help="Output format (default: table)")
def point(income, ruleset, employment, children, childcare, loan_plan, marriage, compare_ruleset, output_format):
    """Exact tax breakdown at one INCOME.

    Uses the statutory staircase rules (allowance lost £1 per £2, child
    benefit charge in whole percent). The marginal rate is measured over
    the next £100.

    Examples:
        tax-curve point 60000
        tax-curve point 110000 --children 2 --loan-plan plan2 -c "2024-25 UK"
        tax-curve point 150000 -e "Within IR35" --format json
    """
    catalog = load_catalog()
    ruleset_name = resolve_ruleset(ruleset, catalog)
    if compare_ruleset:
        compare_ruleset = resolve_ruleset(compare_ruleset, catalog, param="--compare")

    request = build_request(income, ruleset_name, catalog, employment, children, childcare, loan_plan, marriage)
    summary = evaluate_point(request, catalog)
    comparison = compare_point(request, compare_ruleset, catalog) if compare_ruleset else None

    if output_format == "json":
        output = {
            "summary": summary.model_dump(mode="json"),
            "display": summary_strings(summary),
        }
        if comparison is not None:
            output["comparison"] = comparison.model_dump(mode="json")
        click.echo(json.dumps(output, indent=2))
        return

    render_point(Console(), summary, comparison)
