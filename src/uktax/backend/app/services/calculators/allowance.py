"""Personal Allowance with the high-income taper."""

from __future__ import annotations

from uktax.backend.app.models import PersonalAllowanceResult
from uktax.backend.config.year_config import load_rate_table

from .utils import apply_rate_floor, require_pence


def calculate_personal_allowance(gross_income: int, tax_year: str) -> PersonalAllowanceResult:
    """Return the allowance left after tapering ``gross_income`` above the threshold.

    The reduction is ``floor(excess * taper_rate)`` and never exceeds the base
    allowance, so the adjusted allowance bottoms out at zero.
    """

    gross_income = require_pence(gross_income, "gross_income")
    config = load_rate_table(tax_year).personal_allowance
    base = config.amount

    reduction = 0
    if gross_income > config.taper_threshold:
        excess = gross_income - config.taper_threshold
        reduction = min(apply_rate_floor(excess, config.taper_rate), base)

    return PersonalAllowanceResult(
        base_allowance=base,
        reduction=reduction,
        adjusted_allowance=base - reduction,
    )


__all__ = ["calculate_personal_allowance"]
