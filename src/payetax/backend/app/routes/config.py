"""Expose rule set metadata consumed by the front-end calculator and admin views.

The payloads mirror the YAML rule sets so clients can display brackets and
relief parameters without duplicating them.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from flask import Blueprint, jsonify

from payetax.backend.app.http import problem_response
from payetax.backend.config.year_config import (
    RuleSet,
    available_years,
    load_manifest,
    load_rule_set,
)
from payetax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    return {
        "version": get_project_version(),
        "supported_years": list(manifest.supported_years),
        "default_year": manifest.default_year,
    }


def _number(value: Decimal | None) -> float | int | None:
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _serialise_rule_set(rules: RuleSet) -> dict[str, Any]:
    manifest_entry = load_manifest().get_entry(rules.year)
    relief = rules.consolidated_relief
    return {
        "year": rules.year,
        "status": manifest_entry.status,
        "currency": rules.currency,
        "notes": rules.notes,
        "brackets": [
            {"upper": _number(bracket.upper_bound), "rate": _number(bracket.rate)}
            for bracket in rules.brackets
        ],
        "consolidated_relief": {
            "flat_amount": _number(relief.flat_amount),
            "percent_of_gross": _number(relief.percent_of_gross),
            "additional_percent_of_gross": _number(relief.additional_percent_of_gross),
            "cap": _number(relief.cap),
        },
        "pension_rate": _number(rules.pension_rate),
        "housing_fund_rate": _number(rules.housing_fund_rate),
        "additional_relief_cap": _number(rules.additional_relief_cap),
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return all configured rule sets."""

    years = [_serialise_rule_set(load_rule_set(year)) for year in available_years()]
    metadata = get_configuration_metadata()
    payload = {
        "years": years,
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>")
def get_year(year: int) -> tuple[Any, int]:
    """Return the rule set configured for ``year``."""

    try:
        rules = load_rule_set(year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc)).to_response()

    return jsonify(_serialise_rule_set(rules)), 200
