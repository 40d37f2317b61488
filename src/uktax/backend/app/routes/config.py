"""Expose the published rate tables and manifest metadata.

Monetary values are reported in pence and rates as decimal fractions, matching
the report payloads so clients can reuse one formatter.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from uktax.backend.app.localization import get_translator
from uktax.backend.config.schema import IncomeTaxConfig, RateTable
from uktax.backend.config.year_config import (
    available_tax_years,
    current_tax_year,
    load_rate_table,
    manifest_entries,
)
from uktax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    return {
        "version": get_project_version(),
        "supported_tax_years": list(available_tax_years()),
        "default_tax_year": current_tax_year(),
    }


def _serialise_bands(config: IncomeTaxConfig, translate) -> dict[str, Any]:
    return {
        "label": translate(config.label_key) if config.label_key else None,
        "bands": [
            {
                "name": band.name,
                "label": translate(band.label_key),
                "upper": band.upper_bound,
                "rate": float(band.rate),
            }
            for band in config.bands
        ],
    }


def _serialise_rate_table(table: RateTable, locale: str | None) -> dict[str, Any]:
    translate = get_translator(locale)
    allowance = table.personal_allowance
    class2 = table.national_insurance.class2
    class4 = table.national_insurance.class4

    regions = {"england": _serialise_bands(table.income_tax, translate)}
    if table.scottish_income_tax is not None:
        regions["scotland"] = _serialise_bands(table.scottish_income_tax, translate)

    return {
        "tax_year": table.tax_year,
        "locale": translate.locale,
        "meta": dict(table.meta),
        "personal_allowance": {
            "label": translate(allowance.label_key),
            "amount": allowance.amount,
            "taper_threshold": allowance.taper_threshold,
            "taper_rate": float(allowance.taper_rate),
            "zero_allowance_income": allowance.zero_allowance_income,
        },
        "income_tax": regions,
        "national_insurance": {
            "class2": {
                "label": translate("national_insurance.class2.description"),
                "weekly_rate": class2.weekly_rate,
                "small_profits_threshold": class2.small_profits_threshold,
                "weeks": class2.weeks,
                "voluntary": class2.voluntary,
            },
            "class4": {
                "label": translate("national_insurance.class4.description"),
                "lower_profits_limit": class4.lower_profits_limit,
                "upper_profits_limit": class4.upper_profits_limit,
                "main_rate": float(class4.main_rate),
                "additional_rate": float(class4.additional_rate),
            },
        },
        "payments_on_account": {"threshold": table.payments_on_account.threshold},
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/tax-years")
def list_tax_years() -> tuple[Any, int]:
    """Return the manifest entries with their publication status."""

    metadata = get_configuration_metadata()
    payload = {
        "tax_years": [
            {
                "tax_year": entry.tax_year,
                "status": entry.status,
                "notes_url": entry.notes_url,
            }
            for entry in sorted(manifest_entries(), key=lambda item: item.tax_year)
        ],
        "default_tax_year": metadata["default_tax_year"],
        "supported_tax_years": metadata["supported_tax_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/tax-years/<string:tax_year>")
def get_tax_year(tax_year: str) -> tuple[Any, int]:
    """Return one rate table with locale-aware labels."""

    table = load_rate_table(tax_year)
    return jsonify(_serialise_rate_table(table, request.args.get("locale"))), 200
