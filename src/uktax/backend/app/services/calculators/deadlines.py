"""Statutory registration, filing and payment dates for a tax year."""

from __future__ import annotations

from datetime import date

from uktax.backend.app.localization import describe
from uktax.backend.app.models import Deadline, DeadlineSet

from .tax_year import get_tax_year_dates


def calculate_deadlines(tax_year: str) -> DeadlineSet:
    """Return the Self Assessment deadlines that follow ``tax_year``.

    Dates derive from the calendar year in which the tax year ends; no rate
    table is consulted.
    """

    _, end = get_tax_year_dates(tax_year)
    end_year = end.year

    registration = date(end_year, 10, 5)
    paper_return = date(end_year, 10, 31)
    online_return = date(end_year + 1, 1, 31)
    second_payment = date(end_year + 1, 7, 31)

    entries = (
        ("registration", registration),
        ("paper_return", paper_return),
        ("online_return", online_return),
        ("payment", online_return),
        ("second_payment", second_payment),
    )

    return DeadlineSet(
        tax_year=tax_year,
        registration_deadline=registration,
        paper_return_deadline=paper_return,
        online_return_deadline=online_return,
        balancing_payment_deadline=online_return,
        second_payment_on_account_deadline=second_payment,
        deadlines=tuple(
            Deadline(type=kind, date=when, description=describe(f"deadlines.{kind}"))
            for kind, when in entries
        ),
    )


__all__ = ["calculate_deadlines"]
