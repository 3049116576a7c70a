"""Tax Curve CLI - marginal and effective tax rates from the command line."""

import click

from taxcurve import __version__
from taxcurve.sdk import get_ruleset, list_loan_plans, list_ruleset_names
from taxcurve.sdk.taxes import childcare_options

from .curve_commands import curve as curve_command
from .options import load_catalog
from .point_commands import point as point_command
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="tax-curve")
def cli():
    """Tax Curve - UK income tax, NI and benefit interactions by income.

    Rule sets are loaded from (in order):

    \b
    1. TAX_CURVE_RULES_DIR environment variable
    2. settings.json 'rules_dir' key
    3. the tax-rules/ directory shipped with the package

    Run 'tax-curve rulesets' to see what is available.
    """
    pass


cli.add_command(point_command)
cli.add_command(curve_command)
cli.add_command(settings_group)


@cli.command("rulesets")
def rulesets():
    """List available rule sets, newest first."""
    catalog = load_catalog()
    for name in list_ruleset_names(catalog):
        ruleset = catalog[name]
        extras = []
        if ruleset.employer_contributions is not None:
            extras.append("employer NI")
        options = childcare_options(ruleset)
        if len(options) > 1:
            extras.append(f"childcare up to £{options[-1]:,}")
        suffix = f"  [{', '.join(extras)}]" if extras else ""
        click.echo(f"{name}{suffix}")


@cli.command("loans")
@click.option("--ruleset", "-r", help="Resolve thresholds against this rule set")
def loans(ruleset):
    """List student loan plans and their repayment components."""
    resolved = None
    if ruleset:
        resolved = get_ruleset(ruleset, load_catalog())
        if resolved is None:
            raise click.BadParameter(f"Unknown rule set '{ruleset}'", param_hint="--ruleset")

    for plan in list_loan_plans(resolved):
        parts = ", ".join(f"{c.rate:.0%} over £{c.threshold:,.0f}" for c in plan.components)
        click.echo(f"{plan.id:<10} {plan.label}: {parts}")


def main():
    cli()


if __name__ == "__main__":
    main()
