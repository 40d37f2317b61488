"""Pydantic models describing the per-tax-year rate table schema."""

from __future__ import annotations

import re
from decimal import ROUND_CEILING, Decimal, InvalidOperation
from typing import Any, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self

TAX_YEAR_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class UnknownTaxYearError(LookupError):
    """Raised when no rate table has been published for a tax year."""

    def __init__(self, tax_year: str) -> None:
        super().__init__(f"No rate table published for tax year {tax_year}")
        self.tax_year = tax_year


def _coerce_pence(value: Any) -> int:
    """Convert a pound amount from configuration into exact integer pence."""

    if isinstance(value, bool) or value is None:
        raise ConfigurationError("Monetary amounts must be numeric")
    try:
        pounds = Decimal(str(value))
    except InvalidOperation as exc:
        raise ConfigurationError(f"Invalid monetary amount: {value!r}") from exc
    pence = pounds * 100
    if pence != pence.to_integral_value():
        raise ConfigurationError(f"Monetary amount {value!r} is not a whole number of pence")
    if pence < 0:
        raise ConfigurationError("Monetary amounts must be non-negative")
    return int(pence)


def _coerce_rate(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ConfigurationError("Rates must be numeric")
    try:
        rate = Decimal(str(value))
    except InvalidOperation as exc:
        raise ConfigurationError(f"Invalid rate: {value!r}") from exc
    if rate < 0 or rate > 1:
        raise ConfigurationError(f"Rate {value!r} must be between 0 and 1")
    return rate


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class PersonalAllowanceConfig(ImmutableModel):
    """Tax-free allowance with its high-income taper."""

    amount: int
    taper_threshold: int = Field(alias="income_limit")
    taper_rate: Decimal
    label_key: str = "personal_allowance.label"

    @field_validator("amount", "taper_threshold", mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any) -> int:
        return _coerce_pence(value)

    @field_validator("taper_rate", mode="before")
    @classmethod
    def _coerce_taper(cls, value: Any) -> Decimal:
        return _coerce_rate(value)

    @model_validator(mode="after")
    def _validate_taper(self) -> Self:
        if self.taper_rate == 0:
            raise ConfigurationError("Personal allowance taper rate must be positive")
        return self

    @computed_field
    @property
    def zero_allowance_income(self) -> int:
        """Smallest income (pence) at which the allowance is fully withdrawn."""

        excess = Decimal(self.amount) / self.taper_rate
        return self.taper_threshold + int(excess.to_integral_value(rounding=ROUND_CEILING))


class TaxBand(ImmutableModel):
    """A marginal band measured cumulatively from zero taxable income."""

    name: str
    upper_bound: int | None = Field(default=None, alias="upper")
    rate: Decimal
    label_key: str | None = None

    @field_validator("upper_bound", mode="before")
    @classmethod
    def _coerce_upper(cls, value: Any) -> int | None:
        if value is None:
            return None
        return _coerce_pence(value)

    @field_validator("rate", mode="before")
    @classmethod
    def _coerce_band_rate(cls, value: Any) -> Decimal:
        return _coerce_rate(value)

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        if self.upper_bound is not None and self.upper_bound <= 0:
            raise ConfigurationError("Upper bounds must be positive values")
        if self.label_key is None:
            object.__setattr__(self, "label_key", f"income_tax.bands.{self.name}")
        return self


class IncomeTaxConfig(ImmutableModel):
    """Ordered income tax bands for one region."""

    bands: Sequence[TaxBand]
    label_key: str | None = None

    @field_validator("bands", mode="before")
    @classmethod
    def _coerce_bands(cls, value: Any) -> Sequence[Any]:
        if not isinstance(value, (list, tuple)):
            raise ConfigurationError("Income tax 'bands' must be a list")
        return tuple(value)

    @model_validator(mode="after")
    def _validate_bands(self) -> Self:
        if not self.bands:
            raise ConfigurationError("At least one income tax band must be defined")
        last_upper: int | None = None
        seen: set[str] = set()
        for index, band in enumerate(self.bands):
            if band.name in seen:
                raise ConfigurationError(f"Duplicate income tax band '{band.name}'")
            seen.add(band.name)
            is_last = index == len(self.bands) - 1
            if band.upper_bound is None and not is_last:
                raise ConfigurationError("Only the final income tax band may be open")
            if band.upper_bound is not None:
                if last_upper is not None and band.upper_bound <= last_upper:
                    raise ConfigurationError("Income tax bands must be in ascending order")
                last_upper = band.upper_bound
        if self.bands[-1].upper_bound is not None:
            raise ConfigurationError("Final income tax band must have an open upper bound")
        return self


class Class2Config(ImmutableModel):
    """Flat weekly Class 2 contribution gated by the Small Profits Threshold."""

    weekly_rate: int
    small_profits_threshold: int
    weeks: int = 52
    voluntary: bool = False

    @field_validator("weekly_rate", "small_profits_threshold", mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any) -> int:
        return _coerce_pence(value)

    @model_validator(mode="after")
    def _validate_weeks(self) -> Self:
        if self.weeks <= 0:
            raise ConfigurationError("Class 2 'weeks' must be a positive integer")
        return self


class Class4Config(ImmutableModel):
    """Two-tier Class 4 contribution on profits."""

    lower_profits_limit: int
    upper_profits_limit: int
    main_rate: Decimal
    additional_rate: Decimal

    @field_validator("lower_profits_limit", "upper_profits_limit", mode="before")
    @classmethod
    def _coerce_limits(cls, value: Any) -> int:
        return _coerce_pence(value)

    @field_validator("main_rate", "additional_rate", mode="before")
    @classmethod
    def _coerce_rates(cls, value: Any) -> Decimal:
        return _coerce_rate(value)

    @model_validator(mode="after")
    def _validate_limits(self) -> Self:
        if self.lower_profits_limit >= self.upper_profits_limit:
            raise ConfigurationError(
                "Class 4 lower profits limit must be below the upper profits limit"
            )
        return self


class NationalInsuranceConfig(ImmutableModel):
    """Self-employed National Insurance settings."""

    class2: Class2Config
    class4: Class4Config


class PaymentsOnAccountConfig(ImmutableModel):
    """Liability threshold above which advance payments are due."""

    threshold: int

    @field_validator("threshold", mode="before")
    @classmethod
    def _coerce_threshold(cls, value: Any) -> int:
        return _coerce_pence(value)


class RateTable(ImmutableModel):
    """Structured representation of one tax year's published rates."""

    tax_year: str
    meta: dict[str, Any] = Field(default_factory=dict)
    personal_allowance: PersonalAllowanceConfig
    income_tax: IncomeTaxConfig
    scottish_income_tax: IncomeTaxConfig | None = None
    national_insurance: NationalInsuranceConfig
    payments_on_account: PaymentsOnAccountConfig

    @field_validator("tax_year", mode="before")
    @classmethod
    def _validate_tax_year(cls, value: Any) -> str:
        text = str(value)
        match = TAX_YEAR_PATTERN.match(text)
        if match is None:
            raise ConfigurationError(f"Tax year '{text}' must use the YYYY-YY format")
        start_year = int(match.group(1))
        if int(match.group(2)) != (start_year + 1) % 100:
            raise ConfigurationError(f"Tax year '{text}' does not span consecutive years")
        return text

    @model_validator(mode="before")
    @classmethod
    def _prepare(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ConfigurationError("Rate table must define a mapping at the top level")
        prepared = dict(data)
        if prepared.get("meta") is None:
            prepared["meta"] = {}
        return prepared

    def bands_for_region(self, region: str) -> IncomeTaxConfig:
        """Return the income tax bands applicable to ``region``."""

        if region == "england":
            return self.income_tax
        if region == "scotland":
            if self.scottish_income_tax is None:
                raise ConfigurationError(
                    f"Scottish income tax bands are not published for {self.tax_year}"
                )
            return self.scottish_income_tax
        raise ValueError(f"Field 'region' must be one of: england, scotland (got '{region}')")


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a published tax year in the manifest."""

    tax_year: str
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.tax_year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available rate table files."""

    current: str | None = None
    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> Self:
        seen: set[str] = set()
        for entry in self.years:
            if entry.tax_year in seen:
                raise ConfigurationError(
                    f"Duplicate tax year {entry.tax_year} declared in the configuration manifest"
                )
            seen.add(entry.tax_year)
        if self.current is not None and self.current not in seen:
            raise ConfigurationError(
                f"Current tax year {self.current} is not declared in the manifest"
            )
        return self

    def get_entry(self, tax_year: str) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.tax_year == tax_year:
                return entry
        raise KeyError(tax_year)

    @computed_field
    @property
    def supported_tax_years(self) -> tuple[str, ...]:
        return tuple(sorted(entry.tax_year for entry in self.years))


__all__ = [
    "Class2Config",
    "Class4Config",
    "ConfigurationError",
    "ImmutableModel",
    "IncomeTaxConfig",
    "NationalInsuranceConfig",
    "PaymentsOnAccountConfig",
    "PersonalAllowanceConfig",
    "RateTable",
    "TAX_YEAR_PATTERN",
    "TaxBand",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "UnknownTaxYearError",
    "ValidationError",
]
