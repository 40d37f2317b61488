"""Class 2 and Class 4 National Insurance for the self-employed."""

from __future__ import annotations

from uktax.backend.app.localization import describe
from uktax.backend.app.models import (
    Class2Result,
    Class4BandResult,
    Class4Result,
    NationalInsuranceResult,
)
from uktax.backend.config.year_config import load_rate_table

from .utils import apply_rate, format_percentage, format_pounds, require_pence


def calculate_class2_ni(profit: int, tax_year: str) -> Class2Result:
    """Return the flat-rate Class 2 position for ``profit``.

    Liability starts at the Small Profits Threshold itself. The threshold and
    weekly rate are reported whether or not the contribution is due.
    """

    profit = require_pence(profit, "profit")
    config = load_rate_table(tax_year).national_insurance.class2
    is_liable = profit >= config.small_profits_threshold

    return Class2Result(
        is_liable=is_liable,
        weekly_rate=config.weekly_rate,
        weeks=config.weeks,
        annual_amount=config.weekly_rate * config.weeks if is_liable else 0,
        small_profits_threshold=config.small_profits_threshold,
        is_voluntary=config.voluntary,
        description=describe("national_insurance.class2.description"),
    )


def calculate_class4_ni(profit: int, tax_year: str) -> Class4Result:
    """Return Class 4 contributions split between the main and additional rates."""

    profit = require_pence(profit, "profit")
    config = load_rate_table(tax_year).national_insurance.class4
    lower = config.lower_profits_limit
    upper = config.upper_profits_limit

    main_profits = max(0, min(profit, upper) - lower)
    additional_profits = max(0, profit - upper)
    main_amount = apply_rate(main_profits, config.main_rate)
    additional_amount = apply_rate(additional_profits, config.additional_rate)

    breakdown: list[Class4BandResult] = []
    if main_profits > 0:
        breakdown.append(
            Class4BandResult(
                band="main",
                lower=lower,
                upper=min(profit, upper),
                rate=config.main_rate,
                profits=main_profits,
                contribution=main_amount,
                description=describe(
                    "national_insurance.class4.main",
                    percent=format_percentage(config.main_rate),
                    lower=format_pounds(lower),
                    upper=format_pounds(upper),
                ),
            )
        )
    if additional_profits > 0:
        breakdown.append(
            Class4BandResult(
                band="additional",
                lower=upper,
                upper=profit,
                rate=config.additional_rate,
                profits=additional_profits,
                contribution=additional_amount,
                description=describe(
                    "national_insurance.class4.additional",
                    percent=format_percentage(config.additional_rate),
                    upper=format_pounds(upper),
                ),
            )
        )

    return Class4Result(
        lower_profits_limit=lower,
        upper_profits_limit=upper,
        main_rate=config.main_rate,
        additional_rate=config.additional_rate,
        main_rate_amount=main_amount,
        additional_rate_amount=additional_amount,
        total_amount=main_amount + additional_amount,
        breakdown=tuple(breakdown),
        description=describe("national_insurance.class4.description"),
    )


def calculate_national_insurance(profit: int, tax_year: str) -> NationalInsuranceResult:
    """Return both classes of contribution and their combined total."""

    class2 = calculate_class2_ni(profit, tax_year)
    class4 = calculate_class4_ni(profit, tax_year)
    return NationalInsuranceResult(
        class2=class2,
        class4=class4,
        total=class2.annual_amount + class4.total_amount,
    )


__all__ = [
    "calculate_class2_ni",
    "calculate_class4_ni",
    "calculate_national_insurance",
]
