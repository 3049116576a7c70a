"""Progressive band evaluation shared by income tax and contribution schedules."""

import re
from typing import List, Optional, Sequence, Tuple

from ..schemas import BandAmount, Schedule, TaxBand


def title_case(text: Optional[str]) -> str:
    """Capitalise each word, lower-casing the rest ("basic rate" -> "Basic Rate")."""
    if not text:
        return ""
    return re.sub(r"\w\S*", lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


def band_label(band: TaxBand, class_label: Optional[str] = None) -> str:
    if band.name:
        label = title_case(band.name)
        return f"{class_label} - {label}" if class_label else label
    return f"{class_label} band" if class_label else "Income Tax band"


def band_tax(
    taxable_income: float,
    bands: Sequence[TaxBand],
    class_label: Optional[str] = None,
) -> Tuple[float, List[BandAmount]]:
    """Sum rate x overlap over ascending bands.

    Args:
        taxable_income: Income the schedule applies to
        bands: Bands in ascending order; the last band's threshold is ignored
            (treated as unbounded)
        class_label: Contribution class label ("NI Class 1"); None for income tax

    Returns:
        Tuple of (total, breakdown). Only bands that receive income appear
        in the breakdown.
    """
    if taxable_income <= 0 or not bands:
        return 0.0, []

    schedule = Schedule.CONTRIBUTIONS if class_label else Schedule.INCOME_TAX
    total = 0.0
    breakdown = []
    lower = 0.0
    last = len(bands) - 1

    for i, band in enumerate(bands):
        upper = float("inf") if i == last or band.threshold is None else band.threshold
        if taxable_income > lower:
            amount = (min(taxable_income, upper) - lower) * band.rate
            total += amount
            breakdown.append(
                BandAmount(schedule=schedule, label=band_label(band, class_label), amount=amount)
            )
        lower = upper

    return total, breakdown
