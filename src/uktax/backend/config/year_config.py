"""Rate table loader wrapping the shared schema models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    TAX_YEAR_PATTERN,
    Class2Config,
    Class4Config,
    ConfigurationError,
    IncomeTaxConfig,
    NationalInsuranceConfig,
    PaymentsOnAccountConfig,
    PersonalAllowanceConfig,
    RateTable,
    TaxBand,
    TaxYearManifest,
    TaxYearManifestEntry,
    UnknownTaxYearError,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> TaxYearManifest:
    """Load and cache the configuration manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return TaxYearManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[TaxYearManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().years


@lru_cache(maxsize=16)
def load_rate_table(tax_year: str) -> RateTable:
    """Load the published rate table for ``tax_year`` from disk.

    Unknown tax years raise :class:`UnknownTaxYearError`; there is no fallback
    to a neighbouring year.
    """

    if not isinstance(tax_year, str) or TAX_YEAR_PATTERN.match(tax_year) is None:
        raise ValueError(f"Field 'tax_year' must use the YYYY-YY format (got {tax_year!r})")

    try:
        manifest_entry = load_manifest().get_entry(tax_year)
    except KeyError as exc:
        raise UnknownTaxYearError(tax_year) from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Rate table file for {tax_year} missing: {config_file.name}"
        )

    raw_config = _load_yaml(config_file)
    raw_config.setdefault("tax_year", tax_year)

    try:
        rate_table = RateTable.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(f"Rate table validation failed for {tax_year}: {error}") from error

    if rate_table.tax_year != tax_year:
        raise ConfigurationError(
            f"Rate table mismatch: expected {tax_year}, found {rate_table.tax_year}"
        )

    return rate_table


def available_tax_years() -> Sequence[str]:
    """Return the tax years declared in the manifest."""

    return load_manifest().supported_tax_years


def current_tax_year() -> str | None:
    """Return the manifest's current tax year, or the latest published one."""

    manifest = load_manifest()
    if manifest.current:
        return manifest.current
    supported = manifest.supported_tax_years
    return supported[-1] if supported else None


__all__ = [
    "CONFIG_DIRECTORY",
    "Class2Config",
    "Class4Config",
    "ConfigurationError",
    "IncomeTaxConfig",
    "MANIFEST_FILE",
    "NationalInsuranceConfig",
    "PaymentsOnAccountConfig",
    "PersonalAllowanceConfig",
    "TAX_YEAR_PATTERN",
    "RateTable",
    "TaxBand",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "UnknownTaxYearError",
    "available_tax_years",
    "current_tax_year",
    "load_manifest",
    "load_rate_table",
    "manifest_entries",
]
