"""Utility helpers for calculator modules."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
CURRENCY_QUANTUM = Decimal("0.01")
RATE_QUANTUM = Decimal("0.0001")


def format_percentage(value: Decimal) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = value * 100
    if percentage == percentage.to_integral_value():
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def round_currency(value: Decimal) -> Decimal:
    """Round monetary amounts half-up to the smallest currency unit."""

    return value.quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def round_rate(value: Decimal) -> Decimal:
    """Round rate values half-up to four decimals."""

    return value.quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)
