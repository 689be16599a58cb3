"""Statutory relief calculations applied before the progressive scale."""

from __future__ import annotations

from decimal import Decimal

from payetax.backend.app.models import (
    CalcInputs,
    InputValidationError,
    LineItem,
    ReliefBreakdown,
)
from payetax.backend.config.year_config import ConfigurationError, ReliefRule, RuleSet

from .income import normalize_income
from .utils import ZERO

PENSION_LABEL = "Pension Contribution"
HOUSING_FUND_LABEL = "National Housing Fund"
CONSOLIDATED_RELIEF_LABEL = "Consolidated Relief Allowance"
OTHER_RELIEFS_LABEL = "Other Reliefs"


def _ensure_fraction(value: Decimal, label: str) -> None:
    if value < 0:
        raise ConfigurationError(f"{label} must be non-negative")
    if value > 1:
        raise ConfigurationError(f"{label} cannot exceed 100%")


def _ensure_relief_rules(rules: RuleSet) -> None:
    _ensure_fraction(rules.pension_rate, "Pension rate")
    _ensure_fraction(rules.housing_fund_rate, "Housing fund rate")

    relief = rules.consolidated_relief
    _ensure_fraction(relief.percent_of_gross, "Consolidated relief percentage")
    _ensure_fraction(
        relief.additional_percent_of_gross, "Consolidated relief additional percentage"
    )
    if relief.flat_amount < 0:
        raise ConfigurationError("Consolidated relief flat amount must be non-negative")
    if relief.cap is not None and relief.cap < 0:
        raise ConfigurationError("Consolidated relief cap must be non-negative")
    if rules.additional_relief_cap is not None and rules.additional_relief_cap < 0:
        raise ConfigurationError("Additional relief cap must be non-negative")


def consolidated_relief_amount(gross_annual: Decimal, rule: ReliefRule) -> Decimal:
    """Apply the consolidated relief formula to ``gross_annual``."""

    relief = max(rule.flat_amount, rule.percent_of_gross * gross_annual)
    relief += rule.additional_percent_of_gross * gross_annual
    if rule.cap is not None:
        relief = min(relief, rule.cap)
    return relief


def _contribution(
    declared: Decimal | None,
    default_rate: Decimal,
    gross_annual: Decimal,
    inputs: CalcInputs,
    field_name: str,
) -> Decimal:
    if declared is None:
        amount = gross_annual * default_rate
    else:
        amount = normalize_income(declared, inputs.period, field_name)
    return min(amount, gross_annual)


def compute_reliefs(
    gross_annual: Decimal, inputs: CalcInputs, rules: RuleSet
) -> ReliefBreakdown:
    """Derive the ordered relief line items for ``gross_annual``.

    Contributions supplied on ``inputs`` share the period of the gross amount
    and are annualised the same way. When a contribution is omitted the rule
    set's default rate applies. Other reliefs are limited so that the total
    never exceeds gross income.
    """

    _ensure_relief_rules(rules)
    if gross_annual < 0:
        raise InputValidationError("Gross annual income cannot be negative")

    pension = _contribution(
        inputs.pension_contribution,
        rules.pension_rate,
        gross_annual,
        inputs,
        "pension_contribution",
    )
    housing_fund = _contribution(
        inputs.housing_fund_contribution,
        rules.housing_fund_rate,
        gross_annual,
        inputs,
        "housing_fund_contribution",
    )
    consolidated = consolidated_relief_amount(gross_annual, rules.consolidated_relief)

    other = ZERO
    if inputs.other_reliefs is not None:
        other = normalize_income(inputs.other_reliefs, inputs.period, "other_reliefs")
        if rules.additional_relief_cap is not None:
            other = min(other, rules.additional_relief_cap)
        room = max(ZERO, gross_annual - (pension + housing_fund + consolidated))
        other = min(other, room)

    items: list[LineItem] = []
    total = ZERO
    for label, amount in (
        (PENSION_LABEL, pension),
        (HOUSING_FUND_LABEL, housing_fund),
        (CONSOLIDATED_RELIEF_LABEL, consolidated),
        (OTHER_RELIEFS_LABEL, other),
    ):
        if amount > 0:
            items.append(LineItem(label=label, amount=amount, is_deduction=True))
            total += amount

    return ReliefBreakdown(items=tuple(items), total=total)
