"""REST endpoints producing Self Assessment reports for a ledger account."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app, request

from uktax.backend import services
from uktax.backend.app.services.ledger import LedgerAggregator
from uktax.backend.app.services.report_service import ReportBuilder

LEDGER_EXTENSION_KEY = "uktax.ledger"

blueprint = Blueprint("reports", __name__, url_prefix="/api/v1/self-assessment")


def _ledger() -> LedgerAggregator:
    return current_app.extensions[LEDGER_EXTENSION_KEY]


@blueprint.get("/<string:account_key>")
def get_date_range_report(account_key: str) -> tuple[Any, int]:
    """Report on ``start_date``..``end_date`` taken from the query string."""

    query = services.parse_date_range_query(request)
    builder = ReportBuilder(_ledger(), region=query.region)
    report = builder.for_date_range(account_key, query.start_date, query.end_date)
    return services.build_report_response(report, query)


@blueprint.get("/<string:account_key>/tax-years/<string:tax_year>")
def get_tax_year_report(account_key: str, tax_year: str) -> tuple[Any, int]:
    options = services.parse_report_options(request)
    report = ReportBuilder(_ledger(), region=options.region).for_tax_year(account_key, tax_year)
    return services.build_report_response(report, options)


@blueprint.get("/<string:account_key>/months/<int:year>/<int:month>")
def get_month_report(account_key: str, year: int, month: int) -> tuple[Any, int]:
    options = services.parse_report_options(request)
    report = ReportBuilder(_ledger(), region=options.region).for_month(account_key, year, month)
    return services.build_report_response(report, options)


@blueprint.get("/<string:account_key>/quarters/<int:year>/<int:quarter>")
def get_quarter_report(account_key: str, year: int, quarter: int) -> tuple[Any, int]:
    options = services.parse_report_options(request)
    report = ReportBuilder(_ledger(), region=options.region).for_quarter(
        account_key, year, quarter
    )
    return services.build_report_response(report, options)
