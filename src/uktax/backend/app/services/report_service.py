"""Assemble Self Assessment reports from ledger totals and the rate tables.

Every entry point resolves a concrete ``(start, end)`` window and funnels into
:meth:`ReportBuilder._build`, which fetches the ledger summary once and runs the
calculators over the profit. The tax year of the window's start date decides
which rate table applies.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from datetime import date
from time import perf_counter

from uktax.backend.app.models import (
    SUPPORTED_REGIONS,
    ReportPeriod,
    ReportSummary,
    SelfAssessmentReport,
)

from .calculators import (
    calculate_deadlines,
    calculate_income_tax,
    calculate_national_insurance,
    calculate_payments_on_account,
    get_tax_year_dates,
    get_tax_year_for_date,
    month_bounds,
    quarter_bounds,
    round_rate,
    validate_date_range,
)
from .ledger import LedgerAggregator

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when report profiling should be captured."""

    flag = os.getenv("UKTAX_PROFILE_REPORTS", "")
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


class ReportBuilder:
    """Produce :class:`SelfAssessmentReport` values for one ledger."""

    def __init__(self, ledger: LedgerAggregator, *, region: str = "england") -> None:
        if region not in SUPPORTED_REGIONS:
            raise ValueError(
                f"Field 'region' must be one of: {', '.join(SUPPORTED_REGIONS)} (got '{region}')"
            )
        self._ledger = ledger
        self._region = region

    @property
    def region(self) -> str:
        return self._region

    def for_date_range(
        self, ledger_key: str, start: date | str, end: date | str
    ) -> SelfAssessmentReport:
        start_date, end_date = validate_date_range(start, end)
        return self._build(ledger_key, start_date, end_date)

    def for_tax_year(self, ledger_key: str, tax_year: str) -> SelfAssessmentReport:
        start_date, end_date = get_tax_year_dates(tax_year)
        return self._build(ledger_key, start_date, end_date)

    def for_month(self, ledger_key: str, year: int, month: int) -> SelfAssessmentReport:
        start_date, end_date = month_bounds(year, month)
        return self._build(ledger_key, start_date, end_date)

    def for_quarter(self, ledger_key: str, year: int, quarter: int) -> SelfAssessmentReport:
        start_date, end_date = quarter_bounds(year, quarter)
        return self._build(ledger_key, start_date, end_date)

    def _build(self, ledger_key: str, start_date: date, end_date: date) -> SelfAssessmentReport:
        if not isinstance(ledger_key, str) or not ledger_key.strip():
            raise ValueError("Field 'account_key' must be a non-empty string")

        timings: dict[str, float] | None = {} if _profiling_enabled() else None
        tax_year = get_tax_year_for_date(start_date)
        if get_tax_year_for_date(end_date) != tax_year:
            _LOGGER.warning(
                "Report period %s to %s spans more than one tax year; using %s rates",
                start_date,
                end_date,
                tax_year,
            )

        with _profile_section("ledger", timings):
            profit = self._ledger.get_net_profit(ledger_key, start_date, end_date)

        taxable_profit = max(0, profit.net_profit)

        with _profile_section("income_tax", timings):
            income_tax = calculate_income_tax(taxable_profit, tax_year, region=self._region)

        with _profile_section("national_insurance", timings):
            national_insurance = calculate_national_insurance(taxable_profit, tax_year)

        total_liability = income_tax.total_tax + national_insurance.total

        with _profile_section("payments_on_account", timings):
            payments_on_account = calculate_payments_on_account(total_liability, tax_year)

        with _profile_section("deadlines", timings):
            deadlines = calculate_deadlines(tax_year)

        summary = ReportSummary(
            net_profit=profit.net_profit,
            income_tax=income_tax.total_tax,
            class2_ni=national_insurance.class2.annual_amount,
            class4_ni=national_insurance.class4.total_amount,
            total_ni=national_insurance.total,
            total_tax_liability=total_liability,
            effective_total_rate=round_rate(total_liability, profit.net_profit),
            take_home=profit.net_profit - total_liability,
        )

        if timings is not None:
            _LOGGER.debug(
                "Report timings for %s (%s): %s",
                ledger_key,
                tax_year,
                ", ".join(f"{name}={duration * 1000:.2f}ms" for name, duration in timings.items()),
            )

        return SelfAssessmentReport(
            period=ReportPeriod(start_date=start_date, end_date=end_date, tax_year=tax_year),
            profit=profit,
            income_tax=income_tax,
            national_insurance=national_insurance,
            payments_on_account=payments_on_account,
            deadlines=deadlines,
            summary=summary,
        )


def generate_self_assessment_summary(
    ledger: LedgerAggregator,
    account_key: str,
    start: date | str,
    end: date | str,
    *,
    region: str = "england",
) -> SelfAssessmentReport:
    """Build a report for an arbitrary inclusive date range."""

    return ReportBuilder(ledger, region=region).for_date_range(account_key, start, end)


def generate_self_assessment_for_tax_year(
    ledger: LedgerAggregator,
    account_key: str,
    tax_year: str,
    *,
    region: str = "england",
) -> SelfAssessmentReport:
    return ReportBuilder(ledger, region=region).for_tax_year(account_key, tax_year)


def generate_self_assessment_for_month(
    ledger: LedgerAggregator,
    account_key: str,
    year: int,
    month: int,
    *,
    region: str = "england",
) -> SelfAssessmentReport:
    return ReportBuilder(ledger, region=region).for_month(account_key, year, month)


def generate_self_assessment_for_quarter(
    ledger: LedgerAggregator,
    account_key: str,
    year: int,
    quarter: int,
    *,
    region: str = "england",
) -> SelfAssessmentReport:
    return ReportBuilder(ledger, region=region).for_quarter(account_key, year, quarter)


__all__ = [
    "ReportBuilder",
    "generate_self_assessment_for_month",
    "generate_self_assessment_for_quarter",
    "generate_self_assessment_for_tax_year",
    "generate_self_assessment_summary",
]
