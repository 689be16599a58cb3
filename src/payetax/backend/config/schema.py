"""Pydantic models describing the PAYE rule set schema."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when rule set values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _coerce_decimal(value: Any) -> Any:
    # YAML floats go through ``str`` so 0.07 stays 0.07 rather than its binary
    # approximation.
    if value is None or isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ConfigurationError("Monetary values and rates must be numeric")
    if isinstance(value, (int, float, str)):
        try:
            return Decimal(str(value))
        except InvalidOperation as exc:
            raise ConfigurationError(f"'{value}' is not a valid number") from exc
    return value


def _check_fraction(value: Decimal, label: str) -> None:
    if value < 0:
        raise ConfigurationError(f"{label} must be non-negative")
    if value > 1:
        raise ConfigurationError(f"{label} cannot exceed 100%")


class TaxBracket(ImmutableModel):
    """Represents a single progressive tax bracket.

    ``upper_bound`` of ``None`` marks the open-ended top band.
    """

    upper_bound: Decimal | None = Field(default=None, alias="upper")
    rate: Decimal

    @field_validator("upper_bound", "rate", mode="before")
    @classmethod
    def _coerce_numbers(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        _check_fraction(self.rate, "Tax rates")
        if self.upper_bound is not None and self.upper_bound <= 0:
            raise ConfigurationError("Upper bounds must be positive values")
        return self

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is None


class ReliefRule(ImmutableModel):
    """Consolidated relief allowance formula.

    relief = max(flat_amount, percent_of_gross * gross)
             + additional_percent_of_gross * gross, clamped to ``cap``.
    """

    flat_amount: Decimal = Decimal("0")
    percent_of_gross: Decimal = Decimal("0")
    additional_percent_of_gross: Decimal = Decimal("0")
    cap: Decimal | None = None

    @field_validator(
        "flat_amount",
        "percent_of_gross",
        "additional_percent_of_gross",
        "cap",
        mode="before",
    )
    @classmethod
    def _coerce_numbers(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    @model_validator(mode="after")
    def _validate_values(self) -> ReliefRule:
        if self.flat_amount < 0:
            raise ConfigurationError("Relief flat amounts must be non-negative")
        _check_fraction(self.percent_of_gross, "Relief percentages")
        _check_fraction(self.additional_percent_of_gross, "Relief percentages")
        if self.cap is not None and self.cap < 0:
            raise ConfigurationError("Relief caps must be non-negative")
        return self


class RuleSet(ImmutableModel):
    """Structured representation of one tax year's PAYE rules."""

    year: int
    currency: str = "NGN"
    brackets: Sequence[TaxBracket] = Field(alias="tax_brackets")
    consolidated_relief: ReliefRule = Field(default_factory=ReliefRule)
    pension_rate: Decimal = Decimal("0")
    housing_fund_rate: Decimal = Decimal("0")
    additional_relief_cap: Decimal | None = None
    notes: str = ""

    @field_validator("brackets", mode="before")
    @classmethod
    def _coerce_brackets(cls, value: Any) -> Any:
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
            return tuple(value)
        raise ConfigurationError("'tax_brackets' must be a list of bracket mappings")

    @field_validator(
        "pension_rate", "housing_fund_rate", "additional_relief_cap", mode="before"
    )
    @classmethod
    def _coerce_numbers(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _default_notes(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value

    @model_validator(mode="after")
    def _validate_rules(self) -> Self:
        _check_fraction(self.pension_rate, "Pension rate")
        _check_fraction(self.housing_fund_rate, "Housing fund rate")
        if self.additional_relief_cap is not None and self.additional_relief_cap < 0:
            raise ConfigurationError("Additional relief cap must be non-negative")
        self._validate_bracket_sequence(self.brackets)
        return self

    @staticmethod
    def _validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
        if not brackets:
            raise ConfigurationError("At least one tax bracket must be defined")
        last_upper: Decimal | None = None
        last_rate: Decimal | None = None
        for index, bracket in enumerate(brackets):
            upper = bracket.upper_bound
            if upper is None and index != len(brackets) - 1:
                raise ConfigurationError("Only the final tax bracket may be unbounded")
            if last_upper is not None and upper is not None and upper <= last_upper:
                raise ConfigurationError("Tax brackets must be in ascending order")
            if last_rate is not None and bracket.rate < last_rate:
                raise ConfigurationError("Tax rates must not decrease across brackets")
            last_upper = upper if upper is not None else last_upper
            last_rate = bracket.rate
        if brackets[-1].upper_bound is not None:
            raise ConfigurationError("Final tax bracket must have an open upper bound")


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    default: bool = False
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available rule set files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        defaults = 0
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
            if entry.default:
                defaults += 1
        if defaults > 1:
            raise ConfigurationError("At most one manifest entry may be marked as default")
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))

    @computed_field
    @property
    def default_year(self) -> int | None:
        for entry in self.years:
            if entry.default:
                return entry.year
        supported = self.supported_years
        return supported[-1] if supported else None


__all__ = [
    "ConfigurationError",
    "ImmutableModel",
    "ReliefRule",
    "RuleSet",
    "TaxBracket",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
]
