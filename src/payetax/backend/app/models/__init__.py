"""Typed value objects shared across the calculation services.

Request payloads are validated with Pydantic (see ``api``); the engine itself
works on the frozen dataclasses defined here so that every computation is a
pure function of a ``CalcInputs`` value and an immutable ``RuleSet``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from .api import (
    MAX_MONEY_AMOUNT,
    CalculationRequest,
    CalculationResponse,
    IncomeComponentsInput,
    LineItemPayload,
    ReliefEntryInput,
    ResponseMeta,
    Summary,
    format_validation_error,
)

__all__ = [
    "MAX_MONEY_AMOUNT",
    "BracketBreakdown",
    "CalcInputs",
    "CalcOutputs",
    "CalculationRequest",
    "CalculationResponse",
    "IncomeComponentsInput",
    "InputValidationError",
    "LineItem",
    "LineItemPayload",
    "Period",
    "ReliefBreakdown",
    "ReliefEntryInput",
    "ResponseMeta",
    "Summary",
    "format_validation_error",
]


class InputValidationError(ValueError):
    """Raised when user-supplied income inputs are invalid."""


class Period(str, Enum):
    """Period an input amount refers to."""

    MONTHLY = "monthly"
    ANNUAL = "annual"

    @property
    def periods_per_year(self) -> int:
        return 12 if self is Period.MONTHLY else 1


@dataclass(frozen=True, slots=True)
class CalcInputs:
    """Income inputs for a single computation, expressed in ``period`` terms."""

    gross_amount: Decimal
    period: Period = Period.ANNUAL
    pension_contribution: Decimal | None = None
    housing_fund_contribution: Decimal | None = None
    other_reliefs: Decimal | None = None


@dataclass(frozen=True, slots=True)
class LineItem:
    """One row of the auditable breakdown."""

    label: str
    amount: Decimal
    is_deduction: bool = False


@dataclass(frozen=True, slots=True)
class ReliefBreakdown:
    items: tuple[LineItem, ...] = ()
    total: Decimal = Decimal("0")


@dataclass(frozen=True, slots=True)
class BracketBreakdown:
    items: tuple[LineItem, ...] = ()
    total: Decimal = Decimal("0")


@dataclass(frozen=True, slots=True)
class CalcOutputs:
    """Final result of a tax computation."""

    year: int
    gross_income: Decimal
    total_reliefs: Decimal
    taxable_income: Decimal
    annual_tax: Decimal
    monthly_tax: Decimal
    effective_rate: Decimal
    line_items: tuple[LineItem, ...] = field(default_factory=tuple)
    assumptions_note: str = ""
