"""Advance payments towards the next year's bill."""

from __future__ import annotations

from uktax.backend.app.localization import describe
from uktax.backend.app.models import PaymentsOnAccountResult
from uktax.backend.config.year_config import load_rate_table

from .deadlines import calculate_deadlines
from .utils import format_pounds, halve, require_pence


def calculate_payments_on_account(
    total_tax_liability: int, tax_year: str
) -> PaymentsOnAccountResult:
    """Return the payments on account due when the liability exceeds the threshold.

    Each payment is half the liability rounded half-up to the penny, due on the
    balancing payment date and the second payment on account date.
    """

    total_tax_liability = require_pence(total_tax_liability, "total_tax_liability")
    threshold = load_rate_table(tax_year).payments_on_account.threshold
    label_params = {"threshold": format_pounds(threshold)}

    if total_tax_liability <= threshold:
        return PaymentsOnAccountResult(
            required=False,
            threshold=threshold,
            first_payment=0,
            second_payment=0,
            total=0,
            first_payment_date=None,
            second_payment_date=None,
            description=describe("payments_on_account.not_required", **label_params),
        )

    deadlines = calculate_deadlines(tax_year)
    instalment = halve(total_tax_liability)
    return PaymentsOnAccountResult(
        required=True,
        threshold=threshold,
        first_payment=instalment,
        second_payment=instalment,
        total=instalment * 2,
        first_payment_date=deadlines.balancing_payment_deadline,
        second_payment_date=deadlines.second_payment_on_account_deadline,
        description=describe("payments_on_account.required", **label_params),
    )


__all__ = ["calculate_payments_on_account"]
