"""Unit tests for the income normaliser."""

from __future__ import annotations

from decimal import Decimal

import pytest

from payetax.backend.app.models import MAX_MONEY_AMOUNT, InputValidationError, Period
from payetax.backend.app.services.calculators import coerce_period, normalize_income


def test_annual_amount_is_returned_unchanged() -> None:
    assert normalize_income(Decimal("1200000"), Period.ANNUAL) == Decimal("1200000")


def test_monthly_amount_is_multiplied_by_twelve() -> None:
    assert normalize_income(Decimal("250000"), Period.MONTHLY) == Decimal("3000000")


@pytest.mark.parametrize("amount", ["0", "1", "83333.33", "250000"])
def test_monthly_matches_twelve_times_annual(amount: str) -> None:
    value = Decimal(amount)

    assert normalize_income(value, Period.MONTHLY) == normalize_income(
        value * 12, Period.ANNUAL
    )


def test_period_strings_are_accepted() -> None:
    assert normalize_income(1_000, "monthly") == Decimal("12000")
    assert normalize_income(1_000, " Annual ") == Decimal("1000")


def test_float_inputs_keep_their_decimal_representation() -> None:
    assert normalize_income(0.1, Period.MONTHLY) == Decimal("1.2")


def test_negative_amount_is_rejected() -> None:
    with pytest.raises(InputValidationError, match="cannot be negative"):
        normalize_income(Decimal("-1"), Period.ANNUAL)


@pytest.mark.parametrize("amount", ["abc", True, float("nan"), float("inf")])
def test_non_numeric_amounts_are_rejected(amount: object) -> None:
    with pytest.raises(InputValidationError):
        normalize_income(amount, Period.ANNUAL)


def test_unknown_period_is_rejected() -> None:
    with pytest.raises(InputValidationError, match="Unknown period"):
        coerce_period("weekly")


def test_amounts_up_to_the_ceiling_are_accepted() -> None:
    assert normalize_income(MAX_MONEY_AMOUNT, Period.MONTHLY) == MAX_MONEY_AMOUNT * 12


@pytest.mark.parametrize("amount", [MAX_MONEY_AMOUNT + 1, Decimal("1e28"), 1e27])
def test_amounts_above_the_ceiling_are_rejected(amount: object) -> None:
    with pytest.raises(InputValidationError, match="cannot exceed"):
        normalize_income(amount, Period.ANNUAL, "gross_amount")
