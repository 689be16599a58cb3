"""Pydantic models describing the public API surface."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

__all__ = [
    "MAX_MONEY_AMOUNT",
    "IncomeComponentsInput",
    "ReliefEntryInput",
    "CalculationRequest",
    "LineItemPayload",
    "Summary",
    "ResponseMeta",
    "CalculationResponse",
    "format_validation_error",
]


# Amounts are held as Decimals with two places under the default 28-digit
# context; one quadrillion leaves headroom for annualising and summing.
MAX_MONEY_AMOUNT = Decimal("1000000000000000")


def _decimal_from_json(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("Input should be a number")
    if isinstance(value, float):
        return Decimal(str(value))
    return value


class IncomeComponentsInput(BaseModel):
    """Salary components that add up to the gross amount."""

    model_config = ConfigDict(extra="forbid")

    basic: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_MONEY_AMOUNT)
    housing: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_MONEY_AMOUNT)
    transport: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_MONEY_AMOUNT)
    other: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_MONEY_AMOUNT)
    bonus: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_MONEY_AMOUNT)

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any) -> Any:
        return _decimal_from_json(value)

    @property
    def total(self) -> Decimal:
        return self.basic + self.housing + self.transport + self.other + self.bonus


class ReliefEntryInput(BaseModel):
    """Single itemised relief claimed on top of the statutory ones."""

    model_config = ConfigDict(extra="forbid")

    type: str = Field(min_length=1, max_length=64)
    amount: Decimal = Field(ge=0, le=MAX_MONEY_AMOUNT)

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> Any:
        return _decimal_from_json(value)


class CalculationRequest(BaseModel):
    """Validated calculation payload submitted by API clients.

    Money fields accept JSON numbers between 0 and ``MAX_MONEY_AMOUNT`` in the
    terms of ``period``. ``pension_percent`` is an alternative to
    ``pension_contribution`` expressed as a percentage of gross pay.
    """

    model_config = ConfigDict(extra="forbid")

    year: int | None = Field(default=None, ge=1900, le=2100)
    period: Literal["monthly", "annual"] = "annual"
    gross_amount: Decimal | None = Field(default=None, ge=0, le=MAX_MONEY_AMOUNT)
    components: IncomeComponentsInput | None = None
    pension_contribution: Decimal | None = Field(
        default=None, ge=0, le=MAX_MONEY_AMOUNT
    )
    pension_percent: Decimal | None = Field(default=None, ge=0, le=100)
    housing_fund_contribution: Decimal | None = Field(
        default=None, ge=0, le=MAX_MONEY_AMOUNT
    )
    other_reliefs: Decimal | list[ReliefEntryInput] | None = None

    @field_validator(
        "gross_amount",
        "pension_contribution",
        "pension_percent",
        "housing_fund_contribution",
        mode="before",
    )
    @classmethod
    def _coerce_amounts(cls, value: Any) -> Any:
        return _decimal_from_json(value)

    @field_validator("other_reliefs", mode="before")
    @classmethod
    def _coerce_other_reliefs(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return list(value)
        return _decimal_from_json(value)

    @field_validator("other_reliefs", mode="after")
    @classmethod
    def _check_other_reliefs_range(cls, value: Any) -> Any:
        if isinstance(value, Decimal):
            if value < 0:
                raise ValueError("value cannot be negative")
            if value > MAX_MONEY_AMOUNT:
                raise ValueError(f"value cannot exceed {MAX_MONEY_AMOUNT}")
        return value

    @model_validator(mode="after")
    def _require_single_sources(self) -> "CalculationRequest":
        if self.gross_amount is None and self.components is None:
            raise ValueError("Provide either 'gross_amount' or 'components'")
        if self.gross_amount is not None and self.components is not None:
            raise ValueError("Provide 'gross_amount' or 'components', not both")
        if self.pension_contribution is not None and self.pension_percent is not None:
            raise ValueError(
                "Provide 'pension_contribution' or 'pension_percent', not both"
            )
        return self

    @property
    def resolved_gross_amount(self) -> Decimal:
        if self.components is not None:
            return self.components.total
        return self.gross_amount if self.gross_amount is not None else Decimal("0")

    @property
    def resolved_other_reliefs(self) -> Decimal | None:
        if isinstance(self.other_reliefs, list):
            return sum((entry.amount for entry in self.other_reliefs), Decimal("0"))
        return self.other_reliefs


class LineItemPayload(BaseModel):
    """Serialised breakdown row."""

    model_config = ConfigDict(extra="forbid")

    label: str
    amount: float
    is_deduction: bool


class Summary(BaseModel):
    """Aggregated calculation results."""

    model_config = ConfigDict(extra="forbid")

    gross_income: float
    total_reliefs: float
    taxable_income: float
    annual_tax: float
    monthly_tax: float
    effective_rate: float


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int | None = None
    rules_year: int
    rules_substituted: bool = False
    currency: str
    period: str


class CalculationResponse(BaseModel):
    """Full response payload produced by the calculation service."""

    model_config = ConfigDict(extra="forbid")

    summary: Summary
    line_items: list[LineItemPayload]
    assumptions_note: str
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        elif issue.get("type") == "less_than_equal":
            limit = issue.get("ctx", {}).get("le")
            message = f"value cannot exceed {limit}"
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
