"""Service-layer helpers for the UK tax backend."""

from .request_parser import parse_date_range_query, parse_report_options
from .response_builder import build_report_payload, build_report_response

__all__ = [
    "build_report_payload",
    "build_report_response",
    "parse_date_range_query",
    "parse_report_options",
]
