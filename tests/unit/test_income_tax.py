"""Unit tests for the progressive Income Tax calculator."""

from __future__ import annotations

from decimal import Decimal

import pytest

from uktax.backend.app.services.calculators import calculate_income_tax
from uktax.backend.config.schema import UnknownTaxYearError

TAX_YEAR = "2025-26"


def test_basic_rate_example() -> None:
    result = calculate_income_tax(3_000_000, TAX_YEAR)

    assert result.personal_allowance.adjusted_allowance == 1_257_000
    assert result.taxable_income == 1_743_000
    assert [band.name for band in result.bands] == ["basic"]
    assert result.bands[0].taxable_amount == 1_743_000
    assert result.bands[0].tax == 348_600
    assert result.total_tax == 348_600
    assert result.effective_rate == Decimal("0.1162")
    assert result.region == "england"


def test_higher_rate_band_starts_at_cumulative_boundary() -> None:
    result = calculate_income_tax(6_000_000, TAX_YEAR)

    assert [(band.name, band.taxable_amount, band.tax) for band in result.bands] == [
        ("basic", 3_770_000, 754_000),
        ("higher", 973_000, 389_200),
    ]
    assert result.total_tax == 1_143_200


def test_band_widths_do_not_shrink_when_allowance_is_tapered() -> None:
    result = calculate_income_tax(12_514_000, TAX_YEAR)

    assert result.personal_allowance.adjusted_allowance == 0
    assert result.taxable_income == 12_514_000
    assert [(band.name, band.taxable_amount) for band in result.bands] == [
        ("basic", 3_770_000),
        ("higher", 7_487_000),
        ("additional", 1_257_000),
    ]
    assert result.total_tax == 754_000 + 2_994_800 + 565_650


def test_each_band_rounds_half_up_to_the_penny() -> None:
    result = calculate_income_tax(12_514_010, TAX_YEAR)

    additional = result.bands[-1]
    assert additional.taxable_amount == 1_257_010
    assert additional.tax == 565_655
    assert result.total_tax == 754_000 + 2_994_800 + 565_655


@pytest.mark.parametrize("gross_income", [0, 500_000, 1_257_000])
def test_income_within_allowance_pays_nothing(gross_income: int) -> None:
    result = calculate_income_tax(gross_income, TAX_YEAR)

    assert result.taxable_income == 0
    assert result.bands == ()
    assert result.total_tax == 0
    assert result.effective_rate == Decimal("0")


def test_scottish_bands_are_selected_by_region() -> None:
    result = calculate_income_tax(3_000_000, TAX_YEAR, region="scotland")

    assert [(band.name, band.taxable_amount, band.tax) for band in result.bands] == [
        ("starter", 282_700, 53_713),
        ("basic", 1_209_400, 241_880),
        ("intermediate", 250_900, 52_689),
    ]
    assert result.total_tax == 348_282
    assert result.region == "scotland"


def test_band_descriptions_cover_every_locale() -> None:
    result = calculate_income_tax(3_000_000, TAX_YEAR)

    assert result.bands[0].description == {"en": "Basic Rate", "tr": "Temel Oran"}


def test_total_tax_is_monotonic_in_gross_income() -> None:
    previous = -1
    for gross_income in range(0, 20_000_000, 12_345):
        total = calculate_income_tax(gross_income, TAX_YEAR).total_tax
        assert total >= previous
        previous = total


def test_total_equals_sum_of_band_tax() -> None:
    for gross_income in (1_300_001, 4_999_999, 10_500_003, 15_000_007):
        result = calculate_income_tax(gross_income, TAX_YEAR)
        assert result.total_tax == sum(band.tax for band in result.bands)
        assert sum(band.taxable_amount for band in result.bands) == result.taxable_income


def test_unknown_region_is_rejected() -> None:
    with pytest.raises(ValueError, match="region"):
        calculate_income_tax(3_000_000, TAX_YEAR, region="wales")


def test_unknown_tax_year_does_not_fall_back() -> None:
    with pytest.raises(UnknownTaxYearError):
        calculate_income_tax(3_000_000, "2019-20")


def test_negative_income_is_rejected() -> None:
    with pytest.raises(ValueError, match="gross_income"):
        calculate_income_tax(-1, TAX_YEAR)
