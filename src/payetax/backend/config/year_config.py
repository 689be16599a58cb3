"""Rule set loader wrapping the shared schema models.

This module is the configuration collaborator for the tax engine: it reads
versioned YAML rule sets, validates them once, and hands out immutable
``RuleSet`` snapshots. The engine itself never selects a year.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, NamedTuple, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    ConfigurationError,
    ReliefRule,
    RuleSet,
    TaxBracket,
    TaxYearManifest,
    TaxYearManifestEntry,
)

_LOGGER = logging.getLogger(__name__)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


class ResolvedRuleSet(NamedTuple):
    """Rule set chosen for a request together with how it was selected."""

    rules: RuleSet
    requested_year: int | None
    substituted: bool


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> TaxYearManifest:
    """Load and cache the configuration manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return TaxYearManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[TaxYearManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().years


def parse_rule_set(raw_config: dict[str, Any]) -> RuleSet:
    """Validate a raw rule set mapping, surfacing failures as ``ConfigurationError``."""

    try:
        return RuleSet.model_validate(raw_config)
    except ValidationError as error:
        year = raw_config.get("year", "unknown")
        raise ConfigurationError(
            f"Configuration validation failed for {year}: {error}"
        ) from error


@lru_cache(maxsize=8)
def load_rule_set(year: int) -> RuleSet:
    """Load the rule set for the specified tax year from disk."""

    try:
        manifest_entry = load_manifest().get_entry(year)
    except KeyError as exc:
        raise FileNotFoundError(f"Configuration for year {year} not declared in manifest") from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file for year {year} missing: {config_file.name}"
        )

    raw_config = _load_yaml(config_file)
    raw_config.setdefault("year", year)

    rules = parse_rule_set(raw_config)

    if rules.year != year:
        raise ConfigurationError(
            f"Configuration year mismatch: expected {year}, found {rules.year}"
        )

    return rules


def available_years() -> Sequence[int]:
    """Return the tax years declared in the manifest."""

    return load_manifest().supported_years


def default_year() -> int:
    """Return the year flagged as default in the manifest (latest otherwise)."""

    year = load_manifest().default_year
    if year is None:
        raise ConfigurationError("Configuration manifest does not declare any years")
    return year


def default_rule_set() -> RuleSet:
    """Return the documented default rule set."""

    return load_rule_set(default_year())


def resolve_rule_set(year: int | None) -> ResolvedRuleSet:
    """Pick the rule set for ``year``, substituting the default when absent.

    An omitted year silently uses the default. A year that is not declared in
    the manifest also falls back to the default, but is logged and flagged so
    the response can disclose the substitution.
    """

    if year is None:
        return ResolvedRuleSet(default_rule_set(), None, False)

    if year in available_years():
        return ResolvedRuleSet(load_rule_set(year), year, False)

    fallback = default_rule_set()
    _LOGGER.warning(
        "No rule set configured for %s; substituting default year %s",
        year,
        fallback.year,
    )
    return ResolvedRuleSet(fallback, year, True)


__all__ = [
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "MANIFEST_FILE",
    "ReliefRule",
    "ResolvedRuleSet",
    "RuleSet",
    "TaxBracket",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "available_years",
    "default_rule_set",
    "default_year",
    "load_manifest",
    "load_rule_set",
    "manifest_entries",
    "parse_rule_set",
    "resolve_rule_set",
]
