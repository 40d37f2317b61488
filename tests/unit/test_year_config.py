"""Unit coverage for rate table discovery and parsing utilities."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from shutil import copy2

import pytest
import yaml

from uktax.backend.config import year_config
from uktax.backend.config.schema import ConfigurationError, UnknownTaxYearError


@pytest.fixture()
def isolated_config_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Return a temporary configuration directory patched into ``year_config``."""

    original_directory = year_config.CONFIG_DIRECTORY
    for filename in ("2024-25.yaml", "2025-26.yaml", "manifest.yaml"):
        copy2(original_directory / filename, tmp_path / filename)

    monkeypatch.setattr(year_config, "CONFIG_DIRECTORY", tmp_path)
    monkeypatch.setattr(year_config, "MANIFEST_FILE", tmp_path / "manifest.yaml")
    year_config.load_rate_table.cache_clear()
    year_config.load_manifest.cache_clear()

    yield tmp_path

    year_config.load_rate_table.cache_clear()
    year_config.load_manifest.cache_clear()


def _publish(directory: Path, tax_year: str, data: dict) -> None:
    (directory / f"{tax_year}.yaml").write_text(yaml.safe_dump(data, sort_keys=False))
    manifest_path = directory / "manifest.yaml"
    manifest = yaml.safe_load(manifest_path.read_text())
    manifest["years"].append({"tax_year": tax_year})
    manifest_path.write_text(yaml.safe_dump(manifest, sort_keys=False))
    year_config.load_manifest.cache_clear()


def test_rate_table_amounts_are_converted_to_pence() -> None:
    table = year_config.load_rate_table("2025-26")

    assert table.personal_allowance.amount == 1_257_000
    assert table.personal_allowance.taper_threshold == 10_000_000
    assert table.personal_allowance.taper_rate == Decimal("0.5")
    assert table.personal_allowance.zero_allowance_income == 12_514_000
    assert table.national_insurance.class2.weekly_rate == 345
    assert table.national_insurance.class4.upper_profits_limit == 5_027_000
    assert table.payments_on_account.threshold == 100_000
    assert [band.upper_bound for band in table.income_tax.bands] == [3_770_000, 11_257_000, None]


def test_rate_tables_are_cached_per_tax_year() -> None:
    assert year_config.load_rate_table("2025-26") is year_config.load_rate_table("2025-26")


def test_scottish_bands_differ_between_years() -> None:
    current = year_config.load_rate_table("2025-26").bands_for_region("scotland")
    previous = year_config.load_rate_table("2024-25").bands_for_region("scotland")

    assert current.bands[0].upper_bound == 282_700
    assert previous.bands[0].upper_bound == 230_600
    assert [band.name for band in current.bands] == [band.name for band in previous.bands]


def test_manifest_helpers() -> None:
    assert year_config.available_tax_years() == ("2024-25", "2025-26")
    assert year_config.current_tax_year() == "2025-26"
    statuses = {entry.tax_year: entry.status for entry in year_config.manifest_entries()}
    assert statuses == {"2024-25": "archived", "2025-26": "active"}


def test_unknown_tax_year_is_an_error() -> None:
    with pytest.raises(UnknownTaxYearError) as excinfo:
        year_config.load_rate_table("2019-20")

    assert excinfo.value.tax_year == "2019-20"


@pytest.mark.parametrize("tax_year", ["2025", "26-27", "2025_26"])
def test_malformed_tax_year_is_a_validation_error(tax_year: str) -> None:
    with pytest.raises(ValueError, match="tax_year"):
        year_config.load_rate_table(tax_year)


def test_newly_published_year_is_discovered(isolated_config_directory: Path) -> None:
    data = yaml.safe_load((isolated_config_directory / "2025-26.yaml").read_text())
    data["tax_year"] = "2026-27"
    data["meta"] = {"start_date": "2026-04-06", "end_date": "2027-04-05"}
    _publish(isolated_config_directory, "2026-27", data)

    assert year_config.available_tax_years() == ("2024-25", "2025-26", "2026-27")
    assert year_config.load_rate_table("2026-27").tax_year == "2026-27"


@pytest.mark.parametrize(
    ("mutate", "message"),
    [
        (lambda data: data["income_tax"]["bands"].reverse(), "Only the final income tax band"),
        (
            lambda data: data["income_tax"]["bands"][1].update(upper=30000),
            "ascending order",
        ),
        (
            lambda data: data["national_insurance"]["class4"].update(lower_profits_limit=60000),
            "lower profits limit",
        ),
        (lambda data: data["personal_allowance"].update(amount=-1), "non-negative"),
        (lambda data: data["payments_on_account"].update(threshold="1000.001"), "whole number"),
        (lambda data: data["national_insurance"]["class4"].update(main_rate="1.5"), "between 0 and 1"),
    ],
)
def test_invalid_rate_tables_raise_configuration_error(
    isolated_config_directory: Path, mutate, message: str
) -> None:
    data = yaml.safe_load((isolated_config_directory / "2025-26.yaml").read_text())
    data["tax_year"] = "2026-27"
    mutate(data)
    _publish(isolated_config_directory, "2026-27", data)

    with pytest.raises(ConfigurationError, match=message):
        year_config.load_rate_table("2026-27")


def test_mismatched_tax_year_in_file_is_rejected(isolated_config_directory: Path) -> None:
    data = yaml.safe_load((isolated_config_directory / "2025-26.yaml").read_text())
    _publish(isolated_config_directory, "2026-27", data)

    with pytest.raises(ConfigurationError, match="mismatch"):
        year_config.load_rate_table("2026-27")
