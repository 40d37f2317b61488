"""Domain-specific calculation helpers."""

from .allowance import calculate_personal_allowance
from .deadlines import calculate_deadlines
from .income_tax import calculate_income_tax
from .national_insurance import (
    calculate_class2_ni,
    calculate_class4_ni,
    calculate_national_insurance,
)
from .payments_on_account import calculate_payments_on_account
from .tax_year import (
    get_month_name,
    get_tax_year_dates,
    get_tax_year_for_date,
    month_bounds,
    parse_tax_year,
    quarter_bounds,
    validate_date_range,
)
from .utils import format_percentage, format_pounds, round_rate

__all__ = [
    "calculate_class2_ni",
    "calculate_class4_ni",
    "calculate_deadlines",
    "calculate_income_tax",
    "calculate_national_insurance",
    "calculate_payments_on_account",
    "calculate_personal_allowance",
    "format_percentage",
    "format_pounds",
    "get_month_name",
    "get_tax_year_dates",
    "get_tax_year_for_date",
    "month_bounds",
    "parse_tax_year",
    "quarter_bounds",
    "round_rate",
    "validate_date_range",
]
