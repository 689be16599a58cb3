"""Unit tests for the progressive bracket engine."""

from __future__ import annotations

from decimal import Decimal

import pytest

from payetax.backend.app.services.calculators import apply_brackets
from payetax.backend.config.year_config import ConfigurationError, RuleSet, TaxBracket


def test_taxable_income_walks_the_schedule(illustrative_rules: RuleSet) -> None:
    breakdown = apply_brackets(Decimal("2170000"), illustrative_rules.brackets)

    assert [(item.label, item.amount) for item in breakdown.items] == [
        ("Tax @ 7%", Decimal("21000")),
        ("Tax @ 11%", Decimal("33000")),
        ("Tax @ 15%", Decimal("75000")),
        ("Tax @ 19%", Decimal("95000")),
        ("Tax @ 21%", Decimal("119700")),
    ]
    assert breakdown.total == Decimal("343700")
    assert not any(item.is_deduction for item in breakdown.items)


def test_income_above_the_last_bound_uses_open_bracket(
    illustrative_rules: RuleSet,
) -> None:
    breakdown = apply_brackets(Decimal("4200000"), illustrative_rules.brackets)

    assert breakdown.items[-1].label == "Tax @ 24%"
    assert breakdown.items[-1].amount == Decimal("240000")
    assert breakdown.total == Decimal("800000")


def test_income_exactly_on_a_boundary_stops_there(simple_rules: RuleSet) -> None:
    breakdown = apply_brackets(Decimal("300000"), simple_rules.brackets)

    assert len(breakdown.items) == 1
    assert breakdown.total == Decimal("21000")


@pytest.mark.parametrize("taxable", [Decimal("0"), Decimal("-5")])
def test_non_positive_income_produces_no_items(
    simple_rules: RuleSet, taxable: Decimal
) -> None:
    breakdown = apply_brackets(taxable, simple_rules.brackets)

    assert breakdown.items == ()
    assert breakdown.total == Decimal("0")


def test_zero_rate_band_still_reports_its_slice() -> None:
    brackets = (TaxBracket(upper=800_000, rate=0), TaxBracket(rate=0.15))

    breakdown = apply_brackets(Decimal("1000000"), brackets)

    assert [item.label for item in breakdown.items] == ["Tax @ 0%", "Tax @ 15%"]
    assert breakdown.total == Decimal("30000")


def test_fractional_rates_are_labelled_with_two_decimals() -> None:
    brackets = (TaxBracket(upper=100, rate=0.075), TaxBracket(rate=0.1))

    breakdown = apply_brackets(Decimal("50"), brackets)

    assert breakdown.items[0].label == "Tax @ 7.50%"


def test_bracket_sum_matches_total(illustrative_rules: RuleSet) -> None:
    for taxable in range(0, 6_000_000, 137_000):
        breakdown = apply_brackets(Decimal(taxable), illustrative_rules.brackets)
        assert breakdown.total == sum(
            (item.amount for item in breakdown.items), Decimal("0")
        )


def test_non_increasing_inner_bracket_is_a_configuration_error() -> None:
    brackets = (
        TaxBracket(upper=300_000, rate=0.07),
        TaxBracket(upper=300_000, rate=0.11),
        TaxBracket(rate=0.15),
    )

    with pytest.raises(ConfigurationError, match="does not exceed"):
        apply_brackets(Decimal("100000"), brackets)


def test_unbounded_bracket_before_the_end_is_a_configuration_error() -> None:
    brackets = (TaxBracket(rate=0.07), TaxBracket(upper=300_000, rate=0.11))

    with pytest.raises(ConfigurationError, match="final tax bracket"):
        apply_brackets(Decimal("100000"), brackets)


def test_out_of_range_rate_is_a_configuration_error() -> None:
    bracket = TaxBracket(rate=0.5).model_copy(update={"rate": Decimal("1.2")})

    with pytest.raises(ConfigurationError, match="between 0 and 1"):
        apply_brackets(Decimal("100"), (bracket,))


def test_degenerate_final_bracket_is_skipped() -> None:
    brackets = (
        TaxBracket(upper=300_000, rate=0.07),
        TaxBracket(upper=200_000, rate=0.11),
    )

    breakdown = apply_brackets(Decimal("250000"), brackets)

    assert [item.label for item in breakdown.items] == ["Tax @ 7%"]
    assert breakdown.total == Decimal("17500")


def test_income_beyond_a_bounded_final_bracket_is_a_configuration_error() -> None:
    brackets = (TaxBracket(upper=300_000, rate=0.07),)

    with pytest.raises(ConfigurationError, match="exceeds the final bracket"):
        apply_brackets(Decimal("400000"), brackets)
