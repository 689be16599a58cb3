"""Combine relief and bracket results into the final calculation output."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from payetax.backend.app.models import CalcOutputs, LineItem, Period
from payetax.backend.config.year_config import RuleSet

from .utils import ZERO, round_currency

GROSS_INCOME_LABEL = "Gross Annual Income"
TAXABLE_INCOME_LABEL = "Taxable Income"


def build_assumptions_note(rules: RuleSet, period: Period) -> str:
    """Return the disclosure shown alongside every result."""

    parts = [
        f"Estimate based on the {rules.year} PAYE rule set ({rules.currency}); "
        "figures are indicative and not a final tax assessment."
    ]
    if period is Period.MONTHLY:
        parts.append("Monthly amounts were annualised over 12 months.")
    if rules.notes.strip():
        parts.append(rules.notes.strip())
    return " ".join(parts)


def assemble_result(
    gross_annual: Decimal,
    relief_items: Sequence[LineItem],
    total_reliefs: Decimal,
    taxable_income: Decimal,
    bracket_items: Sequence[LineItem],
    total_tax: Decimal,
    period: Period,
    rules: RuleSet,
) -> CalcOutputs:
    annual_tax = total_tax
    monthly_tax = round_currency(annual_tax / 12)
    effective_rate = ZERO if gross_annual == 0 else annual_tax / gross_annual

    line_items = (
        LineItem(label=GROSS_INCOME_LABEL, amount=gross_annual),
        *relief_items,
        LineItem(label=TAXABLE_INCOME_LABEL, amount=taxable_income),
        *bracket_items,
    )

    return CalcOutputs(
        year=rules.year,
        gross_income=gross_annual,
        total_reliefs=total_reliefs,
        taxable_income=taxable_income,
        annual_tax=annual_tax,
        monthly_tax=monthly_tax,
        effective_rate=effective_rate,
        line_items=line_items,
        assumptions_note=build_assumptions_note(rules, period),
    )
