"""Helpers for normalising incoming report requests."""

from __future__ import annotations

from typing import Any

from flask import Request
from pydantic import ValidationError

from uktax.backend.app.localization import normalise_locale
from uktax.backend.app.models import DateRangeQuery, ReportOptions, format_validation_error


def _resolve_locale(req: Request, params: dict[str, Any]) -> None:
    """Populate the locale field in ``params`` based on hints in ``req``."""

    locale_param = params.get("locale")
    if isinstance(locale_param, str) and locale_param.strip():
        params["locale"] = normalise_locale(locale_param)
        return

    accept_language = req.headers.get("Accept-Language")
    if accept_language:
        primary = accept_language.split(",")[0].split(";")[0].strip()
        if primary:
            params["locale"] = normalise_locale(primary)
            return

    params["locale"] = normalise_locale(None)


def _query_params(req: Request) -> dict[str, Any]:
    params: dict[str, Any] = {key: value for key, value in req.args.items()}
    _resolve_locale(req, params)
    return params


def parse_report_options(req: Request) -> ReportOptions:
    """Return the region and locale requested for a report."""

    try:
        return ReportOptions.model_validate(_query_params(req))
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def parse_date_range_query(req: Request) -> DateRangeQuery:
    """Return the date range report query; dates are validated by the builder."""

    try:
        return DateRangeQuery.model_validate(_query_params(req))
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc
