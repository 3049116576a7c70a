"""Curve sweep command."""

import sys

import click
from rich.console import Console

from taxcurve.sdk import (
    STEP,
    EvaluationRequest,
    curve_csv_filename,
    generate_curve,
    write_curve_csv,
)

from .options import (
    build_request,
    household_options,
    load_catalog,
    require_finite,
    resolve_ruleset,
)
from .renderers.curve_renderer import render_curve


@click.command("curve")
@household_options
@click.option("--series", "-s", type=click.Choice(["net", "marginal", "effective"]), default="marginal",
              show_default=True, help="Series to output")
@click.option("--highlight", type=click.FloatRange(min=0), default=None, callback=require_finite,
              help="Income to keep on the grid (extends the ceiling past £170,000)")
@click.option("--max-income", type=click.FloatRange(min=0), default=None, callback=require_finite,
              help="Grid ceiling (default £180,000, extended for --highlight)")
@click.option("--step", type=click.FloatRange(min=1), default=STEP, show_default=True, callback=require_finite,
              help="Grid spacing (£)")
@click.option("--every", type=click.FloatRange(min=1), default=10_000, show_default=True, callback=require_finite,
              help="Table sampling interval (£)")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False),
              help="Write the full series to CSV ('-' for stdout, 'auto' for <ruleset>-<series>.csv)")
def curve(ruleset, employment, children, childcare, loan_plan, marriage, compare_ruleset,
          series, highlight, max_income, step, every, csv_path):
    """Net income, marginal or effective rate across incomes.

    Income is swept from £0 in --step increments using smoothed rules, so
    the curve has no staircase artifacts.

    Examples:
        tax-curve curve --series marginal
        tax-curve curve -s net --children 3 -c "2024-25 UK" --csv auto
    """
    catalog = load_catalog()
    ruleset_name = resolve_ruleset(ruleset, catalog)
    if compare_ruleset:
        compare_ruleset = resolve_ruleset(compare_ruleset, catalog, param="--compare")

    request: EvaluationRequest = build_request(
        highlight or 0, ruleset_name, catalog, employment, children, childcare, loan_plan, marriage
    )
    primary = generate_curve(request, catalog, max_income=max_income, step=step)
    compare = (
        generate_curve(request, catalog, max_income=max_income, step=step, ruleset_name=compare_ruleset)
        if compare_ruleset else None
    )

    if csv_path == "-":
        write_curve_csv(sys.stdout, primary, series, request.employment, compare)
        return
    if csv_path:
        if csv_path == "auto":
            csv_path = curve_csv_filename(ruleset_name, series)
        write_curve_csv(csv_path, primary, series, request.employment, compare)
        click.echo(f"Wrote {len(primary.gross)} rows to {csv_path}")
        return

    render_curve(Console(), primary, series, every=every, compare=compare)
