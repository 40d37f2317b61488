"""Tests for the rate table validator and its command line entry point."""

from __future__ import annotations

import pytest

from uktax.backend.config import validator
from uktax.backend.config.schema import Class4Config, PaymentsOnAccountConfig
from uktax.backend.config.year_config import load_rate_table


def test_published_rate_tables_are_valid() -> None:
    results = validator.validate_all_tax_years()

    assert set(results) == {"2024-25", "2025-26"}
    assert all(issues == [] for issues in results.values())


def test_meta_dates_must_match_tax_year() -> None:
    table = load_rate_table("2025-26")
    broken = table.model_copy(update={"meta": {"start_date": "2025-04-05"}})

    issues = validator.validate_rate_table(broken)

    assert issues == [
        "meta.start_date: declared 2025-04-05 but tax year implies 2025-04-06",
    ]


def test_national_insurance_cross_checks() -> None:
    table = load_rate_table("2025-26")
    class4 = Class4Config(
        lower_profits_limit=5000,
        upper_profits_limit=50270,
        main_rate="0.02",
        additional_rate="0.06",
    )
    national_insurance = table.national_insurance.model_copy(update={"class4": class4})
    broken = table.model_copy(update={"national_insurance": national_insurance})

    issues = validator.validate_rate_table(broken)

    assert (
        "national_insurance.class2: small profits threshold exceeds the Class 4 lower profits limit"
        in issues
    )
    assert "national_insurance.class4: additional rate must not exceed the main rate" in issues


def test_zero_payments_on_account_threshold_is_flagged() -> None:
    table = load_rate_table("2025-26")
    broken = table.model_copy(
        update={"payments_on_account": PaymentsOnAccountConfig(threshold=0)}
    )

    assert validator.validate_rate_table(broken) == [
        "payments_on_account: threshold must be positive"
    ]


def test_cli_reports_success(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = validator.main(["2025-26"])

    assert exit_code == 0
    assert "[2025-26] OK" in capsys.readouterr().out


def test_cli_reports_unknown_tax_year(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = validator.main(["2031-32"])

    assert exit_code == 1
    assert "[2031-32] failed to load rate table" in capsys.readouterr().out
