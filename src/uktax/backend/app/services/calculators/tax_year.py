"""Map calendar dates onto UK tax years and resolve reporting windows."""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime

from uktax.backend.config.schema import TAX_YEAR_PATTERN

_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TAX_YEAR_START = (4, 6)
_TAX_YEAR_END = (4, 5)
_QUARTER_ERROR = "Invalid quarter. Must be 1, 2, 3, or 4."


def format_tax_year(start_year: int) -> str:
    """Return the ``YYYY-YY`` identifier for the tax year starting in ``start_year``."""

    return f"{start_year}-{(start_year + 1) % 100:02d}"


def parse_tax_year(tax_year: str) -> int:
    """Validate ``tax_year`` and return the calendar year in which it starts."""

    if not isinstance(tax_year, str):
        raise ValueError("Field 'tax_year' must be a string in YYYY-YY format")
    match = TAX_YEAR_PATTERN.match(tax_year)
    if match is None:
        raise ValueError(f"Field 'tax_year' must use the YYYY-YY format (got '{tax_year}')")
    start_year = int(match.group(1))
    if int(match.group(2)) != (start_year + 1) % 100:
        raise ValueError(f"Field 'tax_year' must span consecutive years (got '{tax_year}')")
    return start_year


def parse_date(value: date | str, field_name: str) -> date:
    """Return ``value`` as a :class:`date`, accepting ISO ``YYYY-MM-DD`` strings."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    message = f"Field '{field_name}' must be a valid date in YYYY-MM-DD format"
    if not isinstance(value, str) or _ISO_DATE_PATTERN.fullmatch(value) is None:
        raise ValueError(message)
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(message) from exc


def get_tax_year_for_date(value: date | str) -> str:
    """Return the tax year containing ``value``; 6 April opens a new year."""

    resolved = parse_date(value, "date")
    start_year = resolved.year
    if (resolved.month, resolved.day) < _TAX_YEAR_START:
        start_year -= 1
    return format_tax_year(start_year)


def get_tax_year_dates(tax_year: str) -> tuple[date, date]:
    """Return the first and last day of ``tax_year``."""

    start_year = parse_tax_year(tax_year)
    return (
        date(start_year, *_TAX_YEAR_START),
        date(start_year + 1, *_TAX_YEAR_END),
    )


def validate_date_range(start: date | str, end: date | str) -> tuple[date, date]:
    """Parse both ends of a reporting window and ensure it is not inverted."""

    start_date = parse_date(start, "start_date")
    end_date = parse_date(end, "end_date")
    if start_date > end_date:
        raise ValueError("Field 'start_date' must be on or before 'end_date'")
    return start_date, end_date


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last calendar day of ``month`` in ``year``."""

    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ValueError("Invalid month. Must be between 1 and 12.")
    _validate_year(year)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def quarter_bounds(year: int, quarter: int) -> tuple[date, date]:
    """Return the span of calendar quarter ``quarter`` (Q1 is January to March)."""

    if isinstance(quarter, bool) or not isinstance(quarter, int) or not 1 <= quarter <= 4:
        raise ValueError(_QUARTER_ERROR)
    _validate_year(year)
    first_month = (quarter - 1) * 3 + 1
    start, _ = month_bounds(year, first_month)
    _, end = month_bounds(year, first_month + 2)
    return start, end


def get_month_name(month: int) -> str:
    """Return the English name of ``month``."""

    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ValueError("Invalid month. Must be between 1 and 12.")
    return calendar.month_name[month]


def _validate_year(year: int) -> None:
    if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9998:
        raise ValueError("Field 'year' must be a calendar year between 1 and 9998")


__all__ = [
    "format_tax_year",
    "get_month_name",
    "get_tax_year_dates",
    "get_tax_year_for_date",
    "month_bounds",
    "parse_date",
    "parse_tax_year",
    "quarter_bounds",
    "validate_date_range",
]
