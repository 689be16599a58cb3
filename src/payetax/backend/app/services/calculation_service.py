"""Orchestrate request validation, rule set selection, and tax calculations.

``compute_tax`` is the pure engine entry point: it runs the normaliser, relief
calculator, bracket engine, and assembler in sequence over a ``CalcInputs``
value and an immutable ``RuleSet``. ``calculate_tax`` wraps it for the HTTP
layer by validating the payload, resolving the rule set for the requested
year, and serialising the result.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from payetax.backend.app.models import (
    CalcInputs,
    CalcOutputs,
    CalculationRequest,
    CalculationResponse,
    InputValidationError,
    Period,
    format_validation_error,
)
from payetax.backend.config.year_config import RuleSet, resolve_rule_set

from .calculators import (
    apply_brackets,
    assemble_result,
    coerce_period,
    compute_reliefs,
    normalize_income,
    round_currency,
    round_rate,
)
from .calculators.utils import ZERO

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("PAYETAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def compute_tax(inputs: CalcInputs, rules: RuleSet) -> CalcOutputs:
    """Compute PAYE for ``inputs`` under ``rules``.

    Raises ``InputValidationError`` for bad income inputs and
    ``ConfigurationError`` for malformed rules; nothing partial is returned.
    """

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    period = coerce_period(inputs.period)

    with _profile_section("normalise", timings):
        gross_annual = normalize_income(inputs.gross_amount, period)

    with _profile_section("reliefs", timings):
        reliefs = compute_reliefs(gross_annual, inputs, rules)

    taxable_income = max(ZERO, gross_annual - reliefs.total)

    with _profile_section("brackets", timings):
        brackets = apply_brackets(taxable_income, rules.brackets)

    result = assemble_result(
        gross_annual,
        reliefs.items,
        reliefs.total,
        taxable_income,
        brackets.items,
        brackets.total,
        period,
        rules,
    )

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "compute_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    return result


def _validate_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    if isinstance(payload, CalculationRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise InputValidationError("Payload must be a mapping")
    try:
        return CalculationRequest.model_validate(payload)
    except ValidationError as exc:
        raise InputValidationError(format_validation_error(exc)) from exc


def build_inputs(request: CalculationRequest) -> CalcInputs:
    """Translate a validated API request into engine inputs.

    A ``pension_percent`` is turned into a contribution on the gross amount
    for the same period.
    """

    gross_amount = request.resolved_gross_amount
    pension_contribution = request.pension_contribution
    if request.pension_percent is not None:
        pension_contribution = gross_amount * request.pension_percent / 100

    return CalcInputs(
        gross_amount=gross_amount,
        period=Period(request.period),
        pension_contribution=pension_contribution,
        housing_fund_contribution=request.housing_fund_contribution,
        other_reliefs=request.resolved_other_reliefs,
    )


def serialise_outputs(
    outputs: CalcOutputs,
    *,
    requested_year: int | None,
    substituted: bool,
    currency: str,
    period: Period,
) -> dict[str, Any]:
    """Return the JSON-ready representation of ``outputs``."""

    response_model = CalculationResponse.model_validate(
        {
            "summary": {
                "gross_income": float(round_currency(outputs.gross_income)),
                "total_reliefs": float(round_currency(outputs.total_reliefs)),
                "taxable_income": float(round_currency(outputs.taxable_income)),
                "annual_tax": float(round_currency(outputs.annual_tax)),
                "monthly_tax": float(round_currency(outputs.monthly_tax)),
                "effective_rate": float(round_rate(outputs.effective_rate)),
            },
            "line_items": [
                {
                    "label": item.label,
                    "amount": float(round_currency(item.amount)),
                    "is_deduction": item.is_deduction,
                }
                for item in outputs.line_items
            ],
            "assumptions_note": outputs.assumptions_note,
            "meta": {
                "year": requested_year,
                "rules_year": outputs.year,
                "rules_substituted": substituted,
                "currency": currency,
                "period": period.value,
            },
        }
    )

    return response_model.model_dump(mode="json")


def calculate_tax(payload: Mapping[str, Any] | CalculationRequest) -> dict[str, Any]:
    """Compute a serialised tax result for the provided payload."""

    request_model = _validate_request(payload)
    resolved = resolve_rule_set(request_model.year)
    inputs = build_inputs(request_model)

    outputs = compute_tax(inputs, resolved.rules)

    _LOGGER.debug(
        "Computed PAYE for year %s (rules %s): annual tax %s",
        request_model.year,
        resolved.rules.year,
        outputs.annual_tax,
    )

    return serialise_outputs(
        outputs,
        requested_year=resolved.requested_year,
        substituted=resolved.substituted,
        currency=resolved.rules.currency,
        period=inputs.period,
    )


__all__ = [
    "build_inputs",
    "calculate_tax",
    "compute_tax",
    "serialise_outputs",
]
