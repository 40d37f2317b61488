"""Cross-field checks for published rate tables, runnable from the command line."""

from __future__ import annotations

import argparse
from datetime import date
from typing import Any, Sequence

from .year_config import (
    TAX_YEAR_PATTERN,
    IncomeTaxConfig,
    NationalInsuranceConfig,
    PersonalAllowanceConfig,
    RateTable,
    UnknownTaxYearError,
    available_tax_years,
    load_rate_table,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_meta(tax_year: str, meta: dict[str, Any]) -> list[str]:
    errors: list[str] = []
    match = TAX_YEAR_PATTERN.match(tax_year)
    if match is None:
        return [_format_scope("tax_year", f"identifier '{tax_year}' is malformed")]

    start_year = int(match.group(1))
    expected = {
        "start_date": date(start_year, 4, 6),
        "end_date": date(start_year + 1, 4, 5),
    }
    for key, expected_date in expected.items():
        raw = meta.get(key)
        if raw is None:
            continue
        try:
            declared = raw if isinstance(raw, date) else date.fromisoformat(str(raw))
        except ValueError:
            errors.append(_format_scope(f"meta.{key}", f"'{raw}' is not an ISO date"))
            continue
        if declared != expected_date:
            errors.append(
                _format_scope(
                    f"meta.{key}",
                    f"declared {declared.isoformat()} but tax year implies {expected_date.isoformat()}",
                )
            )
    return errors


def _validate_allowance(allowance: PersonalAllowanceConfig) -> list[str]:
    errors: list[str] = []
    if allowance.amount <= 0:
        errors.append(_format_scope("personal_allowance", "amount must be positive"))
    if allowance.zero_allowance_income <= allowance.taper_threshold:
        errors.append(
            _format_scope(
                "personal_allowance",
                "allowance must still be available at the taper threshold",
            )
        )
    return errors


def _validate_bands(scope: str, config: IncomeTaxConfig) -> list[str]:
    errors: list[str] = []
    previous_rate = None
    for band in config.bands:
        if previous_rate is not None and band.rate < previous_rate:
            errors.append(
                _format_scope(
                    f"{scope}.{band.name}",
                    f"rate {band.rate} is lower than the preceding band's {previous_rate}",
                )
            )
        previous_rate = band.rate
    if config.bands and config.bands[0].rate == 0:
        errors.append(_format_scope(scope, "first band must charge a positive rate"))
    return errors


def _validate_national_insurance(config: NationalInsuranceConfig) -> list[str]:
    errors: list[str] = []
    class2 = config.class2
    class4 = config.class4

    if class2.small_profits_threshold > class4.lower_profits_limit:
        errors.append(
            _format_scope(
                "national_insurance.class2",
                "small profits threshold exceeds the Class 4 lower profits limit",
            )
        )
    if class2.weeks != 52:
        errors.append(
            _format_scope("national_insurance.class2", f"expected 52 weeks, found {class2.weeks}")
        )
    if class4.additional_rate > class4.main_rate:
        errors.append(
            _format_scope(
                "national_insurance.class4",
                "additional rate must not exceed the main rate",
            )
        )
    return errors


def validate_rate_table(table: RateTable) -> list[str]:
    """Return a list of validation issues for the provided rate table."""

    errors: list[str] = []

    errors.extend(_validate_meta(table.tax_year, dict(table.meta)))
    errors.extend(_validate_allowance(table.personal_allowance))
    errors.extend(_validate_bands("income_tax", table.income_tax))
    if table.scottish_income_tax is not None:
        errors.extend(_validate_bands("scottish_income_tax", table.scottish_income_tax))
    errors.extend(_validate_national_insurance(table.national_insurance))

    if table.payments_on_account.threshold <= 0:
        errors.append(_format_scope("payments_on_account", "threshold must be positive"))

    return errors


def validate_all_tax_years(tax_years: Sequence[str] | None = None) -> dict[str, list[str]]:
    """Validate the published rate tables and return issues keyed by tax year."""

    targets = tax_years or available_tax_years()
    return {tax_year: validate_rate_table(load_rate_table(tax_year)) for tax_year in targets}


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate published rate tables and report issues helpful to contributors."
    )
    parser.add_argument(
        "tax_years",
        nargs="*",
        help="Specific tax years (YYYY-YY) to validate; defaults to every published year",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    tax_years = list(args.tax_years or available_tax_years())

    if not tax_years:
        parser.print_help()
        return 1

    exit_code = 0

    for tax_year in tax_years:
        try:
            table = load_rate_table(tax_year)
        except (FileNotFoundError, UnknownTaxYearError, ValueError) as error:
            print(f"[{tax_year}] failed to load rate table: {error}")
            exit_code = 1
            continue

        issues = validate_rate_table(table)
        if issues:
            exit_code = 1
            print(f"[{tax_year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{tax_year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
