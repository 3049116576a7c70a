"""Tabular export of curve series.

Two columns (income, primary series) or three with a comparison series,
headed with slugified titles so the file opens cleanly in a spreadsheet.
"""

import csv
from pathlib import Path
from typing import IO, List, Optional, Union

from .schemas import CurveSeries, EmploymentCategory

SERIES_TITLES = {
    "net": "Net income",
    "marginal": "Marginal tax rate",
    "effective": "Effective tax rate",
}


def slugify_label(label: Optional[str]) -> str:
    """'2025-26 UK - Net income' -> '2025-26_uk_-_net_income'."""
    if not label:
        return ""
    return "_".join(str(label).strip().lower().split())


def curve_headers(
    primary: CurveSeries,
    series: str,
    employment: EmploymentCategory,
    compare: Optional[CurveSeries] = None,
) -> List[str]:
    title = SERIES_TITLES[series]
    headers = [
        slugify_label(f"Gross {employment.term} income"),
        slugify_label(f"{primary.ruleset} - {title}"),
    ]
    if compare is not None and compare.gross:
        headers.append(slugify_label(f"{compare.ruleset} - {title}"))
    return headers


def curve_rows(primary: CurveSeries, series: str, compare: Optional[CurveSeries] = None) -> List[list]:
    values = primary.series(series)
    compare_values = compare.series(series) if compare is not None else []
    rows = []
    for i, income in enumerate(primary.gross):
        row = [income, values[i]]
        if i < len(compare_values):
            row.append(compare_values[i])
        rows.append(row)
    return rows


def write_curve_csv(
    out: Union[str, Path, IO[str]],
    primary: CurveSeries,
    series: str,
    employment: EmploymentCategory = EmploymentCategory.EMPLOYED,
    compare: Optional[CurveSeries] = None,
) -> None:
    """Write a curve to a path or an open text stream.

    Raises:
        KeyError: If series is not one of net/marginal/effective
    """
    if series not in SERIES_TITLES:
        raise KeyError(f"Unknown series: {series}")

    if isinstance(out, (str, Path)):
        with open(out, "w", newline="") as csvfile:
            _write(csv.writer(csvfile), primary, series, employment, compare)
    else:
        _write(csv.writer(out), primary, series, employment, compare)


def _write(writer, primary, series, employment, compare) -> None:
    writer.writerow(curve_headers(primary, series, employment, compare))
    writer.writerows(curve_rows(primary, series, compare))


def curve_csv_filename(ruleset: str, series: str) -> str:
    return f"{slugify_label(ruleset)}-{slugify_label(SERIES_TITLES.get(series, series))}.csv"
