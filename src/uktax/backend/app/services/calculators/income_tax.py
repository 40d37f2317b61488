"""Progressive Income Tax over cumulative band boundaries."""

from __future__ import annotations

from uktax.backend.app.localization import describe
from uktax.backend.app.models import IncomeTaxBandResult, IncomeTaxResult
from uktax.backend.config.schema import TaxBand
from uktax.backend.config.year_config import load_rate_table

from .allowance import calculate_personal_allowance
from .utils import apply_rate, require_pence, round_rate


def _walk_bands(taxable_income: int, bands: tuple[TaxBand, ...]) -> list[IncomeTaxBandResult]:
    """Fold ``taxable_income`` over ``bands``, dropping bands with nothing taxed."""

    results: list[IncomeTaxBandResult] = []
    lower = 0
    for band in bands:
        upper = taxable_income if band.upper_bound is None else min(taxable_income, band.upper_bound)
        amount = max(0, upper - lower)
        if amount > 0:
            results.append(
                IncomeTaxBandResult(
                    name=band.name,
                    rate=band.rate,
                    taxable_amount=amount,
                    tax=apply_rate(amount, band.rate),
                    description=describe(band.label_key or f"income_tax.bands.{band.name}"),
                )
            )
        if band.upper_bound is None or taxable_income <= band.upper_bound:
            break
        lower = band.upper_bound
    return results


def calculate_income_tax(
    gross_income: int,
    tax_year: str,
    *,
    region: str = "england",
) -> IncomeTaxResult:
    """Return Income Tax due on ``gross_income`` for ``tax_year``.

    Band boundaries are measured from zero taxable income and do not move when
    the Personal Allowance tapers. Each band's tax is rounded half-up to the
    penny before summing.
    """

    gross_income = require_pence(gross_income, "gross_income")
    rate_table = load_rate_table(tax_year)
    bands = tuple(rate_table.bands_for_region(region).bands)

    allowance = calculate_personal_allowance(gross_income, tax_year)
    taxable_income = max(0, gross_income - allowance.adjusted_allowance)
    band_results = _walk_bands(taxable_income, bands)
    total_tax = sum(band.tax for band in band_results)

    return IncomeTaxResult(
        gross_income=gross_income,
        personal_allowance=allowance,
        taxable_income=taxable_income,
        bands=tuple(band_results),
        total_tax=total_tax,
        effective_rate=round_rate(total_tax, gross_income),
        region=region,
    )


__all__ = ["calculate_income_tax"]
