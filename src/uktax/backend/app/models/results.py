"""Immutable result values produced by the Self Assessment calculators.

Every monetary field is an integer number of pence. Rates are ``Decimal``
fractions that serialise to JSON numbers; dates serialise to ISO strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Annotated, Any

from pydantic import PlainSerializer, TypeAdapter

Rate = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Descriptions = dict[str, str]


@dataclass(frozen=True)
class ReportPeriod:
    """Resolved reporting window and the tax year governing its rates."""

    start_date: date
    end_date: date
    tax_year: str


@dataclass(frozen=True)
class LedgerSummary:
    """Aggregate income and expenses for a date range.

    ``net_profit`` may be negative when expenses exceed income.
    """

    income: int
    expenses: int
    net_profit: int

    def __post_init__(self) -> None:
        if self.net_profit != self.income - self.expenses:
            raise ValueError("Ledger net profit must equal income minus expenses")

    @classmethod
    def from_totals(cls, income: int, expenses: int) -> LedgerSummary:
        return cls(income=income, expenses=expenses, net_profit=income - expenses)


@dataclass(frozen=True)
class PersonalAllowanceResult:
    base_allowance: int
    reduction: int
    adjusted_allowance: int


@dataclass(frozen=True)
class IncomeTaxBandResult:
    name: str
    rate: Rate
    taxable_amount: int
    tax: int
    description: Descriptions


@dataclass(frozen=True)
class IncomeTaxResult:
    gross_income: int
    personal_allowance: PersonalAllowanceResult
    taxable_income: int
    bands: tuple[IncomeTaxBandResult, ...]
    total_tax: int
    effective_rate: Rate
    region: str


@dataclass(frozen=True)
class Class2Result:
    is_liable: bool
    weekly_rate: int
    weeks: int
    annual_amount: int
    small_profits_threshold: int
    is_voluntary: bool
    description: Descriptions


@dataclass(frozen=True)
class Class4BandResult:
    """Profits charged at one Class 4 rate.

    ``upper`` is the profit itself for the additional band, which has no
    statutory ceiling.
    """

    band: str
    lower: int
    upper: int
    rate: Rate
    profits: int
    contribution: int
    description: Descriptions


@dataclass(frozen=True)
class Class4Result:
    lower_profits_limit: int
    upper_profits_limit: int
    main_rate: Rate
    additional_rate: Rate
    main_rate_amount: int
    additional_rate_amount: int
    total_amount: int
    breakdown: tuple[Class4BandResult, ...]
    description: Descriptions


@dataclass(frozen=True)
class NationalInsuranceResult:
    class2: Class2Result
    class4: Class4Result
    total: int


@dataclass(frozen=True)
class Deadline:
    type: str
    date: date
    description: Descriptions


@dataclass(frozen=True)
class DeadlineSet:
    tax_year: str
    registration_deadline: date
    paper_return_deadline: date
    online_return_deadline: date
    balancing_payment_deadline: date
    second_payment_on_account_deadline: date
    deadlines: tuple[Deadline, ...]


@dataclass(frozen=True)
class PaymentsOnAccountResult:
    required: bool
    threshold: int
    first_payment: int
    second_payment: int
    total: int
    first_payment_date: date | None
    second_payment_date: date | None
    description: Descriptions


@dataclass(frozen=True)
class ReportSummary:
    net_profit: int
    income_tax: int
    class2_ni: int
    class4_ni: int
    total_ni: int
    total_tax_liability: int
    effective_total_rate: Rate
    take_home: int


@dataclass(frozen=True)
class SelfAssessmentReport:
    period: ReportPeriod
    profit: LedgerSummary
    income_tax: IncomeTaxResult
    national_insurance: NationalInsuranceResult
    payments_on_account: PaymentsOnAccountResult
    deadlines: DeadlineSet
    summary: ReportSummary


_REPORT_ADAPTER: TypeAdapter[SelfAssessmentReport] = TypeAdapter(SelfAssessmentReport)


def serialise_report(report: SelfAssessmentReport) -> dict[str, Any]:
    """Return a JSON-ready mapping for ``report``."""

    return _REPORT_ADAPTER.dump_python(report, mode="json")


__all__ = [
    "Class2Result",
    "Class4BandResult",
    "Class4Result",
    "Deadline",
    "DeadlineSet",
    "Descriptions",
    "IncomeTaxBandResult",
    "IncomeTaxResult",
    "LedgerSummary",
    "NationalInsuranceResult",
    "PaymentsOnAccountResult",
    "PersonalAllowanceResult",
    "Rate",
    "ReportPeriod",
    "ReportSummary",
    "SelfAssessmentReport",
    "serialise_report",
]
