"""Normalise period-scoped amounts into annual figures."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from payetax.backend.app.models import MAX_MONEY_AMOUNT, InputValidationError, Period


def coerce_amount(value: Any, field_name: str) -> Decimal:
    """Return ``value`` as a finite ``Decimal`` or raise ``InputValidationError``."""

    if isinstance(value, bool):
        raise InputValidationError(f"Field '{field_name}' must be numeric")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise InputValidationError(f"Field '{field_name}' must be numeric") from exc

    if not amount.is_finite():
        raise InputValidationError(f"Field '{field_name}' must be a finite number")
    if amount < 0:
        raise InputValidationError(f"Field '{field_name}' cannot be negative")
    if amount > MAX_MONEY_AMOUNT:
        raise InputValidationError(
            f"Field '{field_name}' cannot exceed {MAX_MONEY_AMOUNT}"
        )
    return amount


def coerce_period(period: Period | str) -> Period:
    if isinstance(period, Period):
        return period
    try:
        return Period(str(period).strip().lower())
    except ValueError as exc:
        raise InputValidationError(
            f"Unknown period '{period}'; expected 'monthly' or 'annual'"
        ) from exc


def normalize_income(
    amount: Any, period: Period | str, field_name: str = "gross_amount"
) -> Decimal:
    """Convert ``amount`` expressed per ``period`` into an annual amount.

    Annual amounts are returned unchanged; monthly amounts are multiplied by 12.
    """

    value = coerce_amount(amount, field_name)
    return value * coerce_period(period).periods_per_year
