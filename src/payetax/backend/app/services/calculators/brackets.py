"""Progressive bracket taxation."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from payetax.backend.app.models import BracketBreakdown, LineItem
from payetax.backend.config.year_config import ConfigurationError, TaxBracket

from .utils import ZERO, format_percentage


def bracket_label(rate: Decimal) -> str:
    return f"Tax @ {format_percentage(rate)}"


def _ensure_brackets(brackets: Sequence[TaxBracket]) -> None:
    if not brackets:
        raise ConfigurationError("At least one tax bracket must be defined")

    last_index = len(brackets) - 1
    lower_bound = ZERO
    for index, bracket in enumerate(brackets):
        if bracket.rate < 0 or bracket.rate > 1:
            raise ConfigurationError(
                f"Tax bracket {index} rate {bracket.rate} must be between 0 and 1"
            )
        if bracket.is_unbounded:
            if index != last_index:
                raise ConfigurationError("Only the final tax bracket may be unbounded")
            continue
        upper = bracket.upper_bound
        if upper <= lower_bound and index != last_index:
            raise ConfigurationError(
                f"Tax bracket {index} upper bound {upper} does not exceed {lower_bound}"
            )
        lower_bound = max(lower_bound, upper)


def apply_brackets(
    taxable_income: Decimal, brackets: Sequence[TaxBracket]
) -> BracketBreakdown:
    """Apply graduated marginal ``brackets`` to ``taxable_income``.

    Walks the brackets once in ascending order, taxing the slice of income that
    falls inside each band. Bands that receive income produce a line item; the
    walk stops as soon as all income has been allocated.
    """

    _ensure_brackets(brackets)

    if taxable_income <= 0:
        return BracketBreakdown()

    remaining = taxable_income
    lower_bound = ZERO
    items: list[LineItem] = []
    total = ZERO

    for bracket in brackets:
        upper = bracket.upper_bound
        if bracket.is_unbounded:
            width = remaining
        else:
            width = max(ZERO, upper - lower_bound)

        taxed = min(remaining, width)
        if taxed > 0:
            tax = taxed * bracket.rate
            items.append(LineItem(label=bracket_label(bracket.rate), amount=tax))
            total += tax

        remaining -= taxed
        if not bracket.is_unbounded:
            lower_bound = upper
        if remaining <= 0:
            break

    if remaining > 0:
        # Only reachable when the final bracket is bounded.
        raise ConfigurationError(
            f"Taxable income exceeds the final bracket bound {lower_bound}"
        )

    return BracketBreakdown(items=tuple(items), total=total)
