"""Unit tests for the report builder and its module-level wrappers."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

import pytest

from uktax.backend.app.models import LedgerSummary, serialise_report
from uktax.backend.app.services.ledger import InMemoryLedger, LedgerError
from uktax.backend.app.services.report_service import (
    ReportBuilder,
    generate_self_assessment_for_month,
    generate_self_assessment_for_quarter,
    generate_self_assessment_for_tax_year,
    generate_self_assessment_summary,
)
from uktax.backend.config.schema import UnknownTaxYearError


class StubLedger:
    """Ledger returning fixed totals and recording each request."""

    def __init__(self, income: int, expenses: int) -> None:
        self.summary = LedgerSummary.from_totals(income, expenses)
        self.calls: list[tuple[str, date, date]] = []

    def get_net_profit(self, account_key: str, start_date: date, end_date: date) -> LedgerSummary:
        self.calls.append((account_key, start_date, end_date))
        return self.summary


class FailingLedger:
    def get_net_profit(self, account_key: str, start_date: date, end_date: date) -> LedgerSummary:
        raise LedgerError("transaction store offline")


def test_end_to_end_tax_year_report() -> None:
    ledger = StubLedger(income=5_000_000, expenses=2_000_000)

    report = ReportBuilder(ledger).for_tax_year("acme", "2025-26")

    assert ledger.calls == [("acme", date(2025, 4, 6), date(2026, 4, 5))]
    assert report.period.tax_year == "2025-26"
    assert report.profit.net_profit == 3_000_000
    assert report.income_tax.total_tax == 348_600
    assert report.national_insurance.class2.annual_amount == 17_940
    assert report.national_insurance.class4.total_amount == 104_580

    summary = report.summary
    assert summary.total_ni == 122_520
    assert summary.total_tax_liability == 471_120
    assert summary.take_home == 2_528_880
    assert summary.effective_total_rate == Decimal("0.1570")

    assert report.payments_on_account.required is True
    assert report.payments_on_account.first_payment == 235_560
    assert report.deadlines.online_return_deadline == date(2027, 1, 31)


def test_loss_is_floored_for_calculators_but_not_for_take_home() -> None:
    ledger = StubLedger(income=100_000, expenses=300_000)

    report = ReportBuilder(ledger).for_tax_year("acme", "2025-26")

    assert report.profit.net_profit == -200_000
    assert report.income_tax.gross_income == 0
    assert report.income_tax.total_tax == 0
    assert report.national_insurance.total == 0
    assert report.summary.total_tax_liability == 0
    assert report.summary.take_home == -200_000
    assert report.summary.effective_total_rate == Decimal("0")
    assert report.payments_on_account.required is False


def test_month_and_quarter_resolve_calendar_bounds() -> None:
    ledger = StubLedger(income=500_000, expenses=0)
    builder = ReportBuilder(ledger)

    month = builder.for_month("acme", 2025, 2)
    quarter = builder.for_quarter("acme", 2025, 2)

    assert ledger.calls == [
        ("acme", date(2025, 2, 1), date(2025, 2, 28)),
        ("acme", date(2025, 4, 1), date(2025, 6, 30)),
    ]
    assert month.period.tax_year == "2024-25"
    assert quarter.period.tax_year == "2024-25"


def test_invalid_quarter_fails_before_ledger_is_called() -> None:
    ledger = StubLedger(income=500_000, expenses=0)

    with pytest.raises(ValueError, match="Invalid quarter"):
        ReportBuilder(ledger).for_quarter("acme", 2025, 5)

    assert ledger.calls == []


def test_start_date_tax_year_governs_straddling_period(caplog: pytest.LogCaptureFixture) -> None:
    ledger = StubLedger(income=500_000, expenses=0)

    with caplog.at_level(logging.WARNING, logger="uktax.backend.app.services.report_service"):
        report = ReportBuilder(ledger).for_date_range("acme", "2025-01-01", "2025-12-31")

    assert report.period.tax_year == "2024-25"
    assert "spans more than one tax year" in caplog.text


def test_date_range_validation_names_field() -> None:
    with pytest.raises(ValueError, match="end_date"):
        ReportBuilder(StubLedger(0, 0)).for_date_range("acme", "2025-05-01", "2025-05-32")


def test_unknown_tax_year_propagates() -> None:
    with pytest.raises(UnknownTaxYearError):
        ReportBuilder(StubLedger(0, 0)).for_tax_year("acme", "2030-31")


def test_ledger_failure_aborts_the_report() -> None:
    with pytest.raises(LedgerError):
        ReportBuilder(FailingLedger()).for_tax_year("acme", "2025-26")


def test_unknown_region_is_rejected() -> None:
    with pytest.raises(ValueError, match="region"):
        ReportBuilder(StubLedger(0, 0), region="atlantis")


def test_reports_are_idempotent() -> None:
    builder = ReportBuilder(StubLedger(income=9_000_000, expenses=1_234_567))

    first = builder.for_tax_year("acme", "2025-26")
    second = builder.for_tax_year("acme", "2025-26")

    assert first == second


def test_wrappers_delegate_to_the_builder(ledger: InMemoryLedger) -> None:
    by_range = generate_self_assessment_summary(ledger, "acme", "2025-04-06", "2026-04-05")
    by_year = generate_self_assessment_for_tax_year(ledger, "acme", "2025-26")
    by_month = generate_self_assessment_for_month(ledger, "acme", 2025, 4)
    by_quarter = generate_self_assessment_for_quarter(ledger, "acme", 2025, 3, region="scotland")

    assert by_range == by_year
    assert by_year.summary.take_home == 2_528_880
    assert by_month.profit.income == 3_000_000
    assert by_quarter.profit.expenses == 1_500_000
    assert by_quarter.income_tax.region == "scotland"


def test_serialised_report_is_json_ready() -> None:
    report = ReportBuilder(StubLedger(income=5_000_000, expenses=2_000_000)).for_tax_year(
        "acme", "2025-26"
    )

    payload = serialise_report(report)

    assert payload["period"] == {
        "start_date": "2025-04-06",
        "end_date": "2026-04-05",
        "tax_year": "2025-26",
    }
    assert payload["summary"]["effective_total_rate"] == pytest.approx(0.157)
    assert payload["income_tax"]["bands"][0]["rate"] == pytest.approx(0.2)
    assert payload["payments_on_account"]["second_payment_date"] == "2027-07-31"
    assert payload["deadlines"]["deadlines"][0]["type"] == "registration"
