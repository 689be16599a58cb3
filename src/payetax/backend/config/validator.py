"""Contributor-facing lint for rule set data.

Structural rules (rate ranges, bracket ordering, an open final bracket) are
enforced by the schema when a rule set loads; a file breaking them fails in
``load_rule_set`` and is reported as a load failure. The checks here cover
values that load fine but are almost certainly mistakes.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from .year_config import (
    ReliefRule,
    RuleSet,
    TaxBracket,
    TaxYearManifestEntry,
    available_years,
    load_rule_set,
    manifest_entries,
)

_VALID_STATUSES = {"active", "preview", "archived"}


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_brackets(brackets: Sequence[TaxBracket]) -> list[str]:
    errors: list[str] = []

    top = brackets[-1]
    if top.is_unbounded and top.rate == 0:
        errors.append(
            _format_scope("tax_brackets", "open final bracket has a 0% rate")
        )

    return errors


def _validate_consolidated_relief(rule: ReliefRule) -> list[str]:
    if rule.cap is not None and rule.cap < rule.flat_amount:
        return [
            _format_scope(
                "consolidated_relief", "cap cannot be lower than the flat amount"
            )
        ]
    return []


def _validate_contributions(rules: RuleSet) -> list[str]:
    if rules.pension_rate + rules.housing_fund_rate > 1:
        return [
            _format_scope(
                "contributions",
                "combined pension and housing fund rates exceed 100%",
            )
        ]
    return []


def _validate_metadata(rules: RuleSet) -> list[str]:
    errors: list[str] = []

    currency = rules.currency
    if len(currency) != 3 or not currency.isalpha() or not currency.isupper():
        errors.append(
            _format_scope("currency", f"'{currency}' is not an ISO 4217 code")
        )

    if not rules.notes.strip():
        errors.append(
            _format_scope("notes", "a disclosure note should be provided")
        )

    return errors


def _validate_manifest_entry(entry: TaxYearManifestEntry) -> list[str]:
    errors: list[str] = []
    scope = f"manifest[{entry.year}]"

    if entry.status not in _VALID_STATUSES:
        errors.append(
            _format_scope(scope, f"status '{entry.status}' is not recognised")
        )

    if entry.notes_url and not entry.notes_url.startswith(("http://", "https://")):
        errors.append(_format_scope(scope, "notes URL must be absolute"))

    return errors


def validate_rule_set(rules: RuleSet) -> list[str]:
    """Return a list of validation issues for the provided rule set."""

    errors: list[str] = []

    errors.extend(_validate_brackets(rules.brackets))
    errors.extend(_validate_consolidated_relief(rules.consolidated_relief))
    errors.extend(_validate_contributions(rules))
    errors.extend(_validate_metadata(rules))

    return errors


def _validate_year(year: int) -> list[str]:
    issues = validate_rule_set(load_rule_set(year))
    for entry in manifest_entries():
        if entry.year == year:
            issues.extend(_validate_manifest_entry(entry))
    return issues


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    return {int(year): _validate_year(int(year)) for year in targets}


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured PAYE rule sets and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            issues = _validate_year(year)
        except (FileNotFoundError, ValueError) as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
