"""Utilities for serialising report responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Tuple

from flask import jsonify

from uktax.backend.app.models import ReportOptions, SelfAssessmentReport, serialise_report

ResponseTuple = Tuple[Any, int]

_FALLBACK_LOCALE = "en"


def _attach_labels(value: Any, locale: str) -> Any:
    """Add a ``label`` beside every ``description`` map, rendered in ``locale``."""

    if isinstance(value, Mapping):
        payload = {key: _attach_labels(item, locale) for key, item in value.items()}
        description = value.get("description")
        if isinstance(description, Mapping):
            payload["label"] = description.get(locale) or description.get(_FALLBACK_LOCALE)
        return payload
    if isinstance(value, list):
        return [_attach_labels(item, locale) for item in value]
    return value


def build_report_payload(report: SelfAssessmentReport, options: ReportOptions) -> dict[str, Any]:
    """Return the JSON-ready report with labels for the requested locale."""

    locale = options.locale or _FALLBACK_LOCALE
    payload = _attach_labels(serialise_report(report), locale)
    payload["meta"] = {"locale": locale, "region": options.region}
    return payload


def build_report_response(report: SelfAssessmentReport, options: ReportOptions) -> ResponseTuple:
    """Return a Flask JSON response for ``report``."""

    return jsonify(build_report_payload(report, options)), 200
