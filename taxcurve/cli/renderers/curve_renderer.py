"""Rich renderer for swept curves (sampled rows)."""

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from taxcurve.sdk.export import SERIES_TITLES
from taxcurve.sdk.schemas import CurveSeries


def render_curve(
    console: Console,
    primary: CurveSeries,
    series: str,
    every: float = 10_000,
    compare: Optional[CurveSeries] = None,
) -> None:
    """Print one row per ``every`` pounds of income."""
    title = SERIES_TITLES[series]
    table = Table(title=f"{title} ({primary.ruleset})", box=box.ROUNDED)
    table.add_column("Income", justify="right", style="bold")
    table.add_column(primary.ruleset, justify="right")
    if compare is not None and compare.gross:
        table.add_column(compare.ruleset, justify="right")

    values = primary.series(series)
    compare_values = compare.series(series) if compare is not None else []
    for i, income in enumerate(primary.gross):
        if income % every:
            continue
        row = [f"£{income:,.0f}", _fmt(values[i], series)]
        if i < len(compare_values):
            row.append(_fmt(compare_values[i], series))
        table.add_row(*row)

    console.print(table)


def _fmt(value: float, series: str) -> str:
    if series == "net":
        return f"£{value:,.0f}"
    return f"{value:.1f}%"
