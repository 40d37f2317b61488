"""Typed request models and immutable result values for Self Assessment reports.

Requests arriving over HTTP are validated with Pydantic; everything the
calculators produce is a frozen dataclass so reports can be shared between
threads and serialised without further copying.
"""

from __future__ import annotations

from .api import (
    SUPPORTED_REGIONS,
    DateRangeQuery,
    ReportOptions,
    format_validation_error,
)
from .results import (
    Class2Result,
    Class4BandResult,
    Class4Result,
    Deadline,
    DeadlineSet,
    Descriptions,
    IncomeTaxBandResult,
    IncomeTaxResult,
    LedgerSummary,
    NationalInsuranceResult,
    PaymentsOnAccountResult,
    PersonalAllowanceResult,
    Rate,
    ReportPeriod,
    ReportSummary,
    SelfAssessmentReport,
    serialise_report,
)

__all__ = [
    "Class2Result",
    "Class4BandResult",
    "Class4Result",
    "DateRangeQuery",
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
    "ReportOptions",
    "ReportPeriod",
    "ReportSummary",
    "SUPPORTED_REGIONS",
    "SelfAssessmentReport",
    "format_validation_error",
    "serialise_report",
]
