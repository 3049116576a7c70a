"""Rich renderer for point evaluations and comparisons.

Transforms SDK PointSummary / ComparisonDelta output into formatted tables.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from taxcurve.sdk.point import summary_strings
from taxcurve.sdk.schemas import ComparisonDelta, PointSummary


def render_point(console: Console, summary: PointSummary, comparison: Optional[ComparisonDelta] = None) -> None:
    """Render headline figures, the itemised breakdown and any comparison."""
    for issue in summary.issues:
        console.print(Panel(
            f"[yellow]{issue.value.replace('_', ' ')}[/yellow]",
            title="Note",
            border_style="yellow"
        ))

    _render_summary(console, summary)
    _render_breakdown(console, summary)
    if comparison is not None:
        _render_comparison(console, comparison)


def _render_summary(console: Console, summary: PointSummary) -> None:
    strings = summary_strings(summary)
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value", justify="right")

    table.add_row("After-tax income", f"[bold green]{strings['after_tax_income']}[/bold green]")
    table.add_row("Total tax", strings["total_tax"])
    table.add_row("Effective rate", strings["effective_rate"])
    table.add_row("Marginal rate", strings["marginal_rate"])

    console.print(Panel(
        table,
        title=f"{summary.ruleset}: £{summary.income:,.0f}",
        border_style="dim",
    ))


def _render_breakdown(console: Console, summary: PointSummary) -> None:
    b = summary.breakdown
    table = Table(title="Breakdown", box=box.ROUNDED)
    table.add_column("", style="bold", min_width=32)
    table.add_column("Amount", justify="right", min_width=12)

    table.add_row("Personal allowance", f"£{b.personal_allowance:,}", style="dim")
    table.add_row("", "")

    table.add_row("[bold]INCOME TAX[/bold]", "")
    for item in b.income_tax_bands:
        table.add_row(f"  {item.label}", item.amount)
    table.add_row("  [dim]Total[/dim]", f"[dim]{b.income_tax_total}[/dim]")
    table.add_row("", "")

    if b.contribution_bands:
        table.add_row("[bold]NATIONAL INSURANCE[/bold]", "")
        for item in b.contribution_bands:
            table.add_row(f"  {item.label}", item.amount)
        table.add_row("  [dim]Total[/dim]", f"[dim]{b.contribution_total}[/dim]")
        table.add_row("", "")

    if b.adjustments:
        table.add_row("[bold]ADJUSTMENTS[/bold]", "")
        for adj in b.adjustments:
            colour = "green" if adj.kind.value == "credit" else "red"
            table.add_row(f"  {adj.label}", f"[{colour}]{adj.amount}[/{colour}]")
        table.add_row("  [dim]Net effect[/dim]", f"[dim]{b.adjustments_total}[/dim]")

    console.print(table)


def _render_comparison(console: Console, comparison: ComparisonDelta) -> None:
    d = comparison.display
    table = Table(
        title=f"Compared with {comparison.compare_ruleset}",
        box=box.ROUNDED,
    )
    table.add_column("", style="bold", min_width=20)
    table.add_column(comparison.compare_ruleset, justify="right", min_width=12)

    style = "red" if comparison.delta_net_income < 0 else "green"
    table.add_row("After-tax change", f"[{style}]{d['after_tax']}[/{style}]")
    table.add_row("Total tax", d["total_tax"])
    table.add_row("Effective rate", d["effective_rate"])
    table.add_row("Marginal rate", d["marginal_rate"])

    console.print(table)
