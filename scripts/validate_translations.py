#!/usr/bin/env python3
"""Check translation catalogues for missing keys and mismatched placeholders.

Every label key referenced by the rate tables must also resolve in every
catalogue, so report descriptions never fall back to raw keys.
"""

from __future__ import annotations

import argparse
import json
import re
import sys
from collections import defaultdict
from pathlib import Path

import yaml

REPO_ROOT = Path(__file__).resolve().parents[1]
TRANSLATIONS_DIR = REPO_ROOT / "src" / "uktax" / "translations"
CONFIG_DATA_DIR = REPO_ROOT / "src" / "uktax" / "backend" / "config" / "data"
BASE_LOCALE = "en"

PLACEHOLDER_PATTERN = re.compile(r"{{\s*([a-zA-Z0-9_.-]+)\s*}}")


class ValidationError(Exception):
    """Raised when validation detects unrecoverable issues."""


def _load_catalogues() -> dict[str, dict[str, str]]:
    if not TRANSLATIONS_DIR.is_dir():
        raise ValidationError(f"Missing translations directory: {TRANSLATIONS_DIR}")

    catalogues: dict[str, dict[str, str]] = {}
    for path in sorted(TRANSLATIONS_DIR.glob("*.json")):
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        backend = payload.get("backend") if isinstance(payload, dict) else None
        if not isinstance(backend, dict):
            raise ValidationError(f"Translation payload must define a backend mapping: {path}")
        catalogues[path.stem] = {key: str(value) for key, value in backend.items()}

    if not catalogues:
        raise ValidationError("No translation catalogues discovered")
    return catalogues


def _missing_keys(catalogues: dict[str, dict[str, str]]) -> list[str]:
    issues: list[str] = []
    expected = set(catalogues.get(BASE_LOCALE, {}))
    for locale, messages in sorted(catalogues.items()):
        missing = expected - set(messages)
        if missing:
            issues.append(
                f"Locale '{locale}' missing {len(missing)} keys: {', '.join(sorted(missing))}"
            )
        extra = set(messages) - expected
        if extra:
            issues.append(
                f"Locale '{locale}' defines keys absent from '{BASE_LOCALE}': "
                f"{', '.join(sorted(extra))}"
            )
    return issues


def _placeholder_inconsistencies(catalogues: dict[str, dict[str, str]]) -> list[str]:
    by_key: dict[str, dict[str, frozenset[str]]] = defaultdict(dict)
    for locale, messages in catalogues.items():
        for key, message in messages.items():
            by_key[key][locale] = frozenset(PLACEHOLDER_PATTERN.findall(message))

    issues: list[str] = []
    for key, locale_map in sorted(by_key.items()):
        if len(set(locale_map.values())) <= 1:
            continue
        details = ", ".join(
            f"{locale}={{{', '.join(sorted(values))}}}"
            for locale, values in sorted(locale_map.items())
        )
        issues.append(f"{key} placeholders differ: {details}")
    return issues


def _rate_table_label_keys() -> set[str]:
    keys: set[str] = set()
    for path in sorted(CONFIG_DATA_DIR.glob("*.yaml")):
        if path.name == "manifest.yaml":
            continue
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        for section in ("income_tax", "scottish_income_tax"):
            config = data.get(section) or {}
            if config.get("label_key"):
                keys.add(config["label_key"])
            for band in config.get("bands") or []:
                keys.add(band.get("label_key") or f"income_tax.bands.{band['name']}")
    return keys


def _unresolved_label_keys(catalogues: dict[str, dict[str, str]]) -> list[str]:
    issues: list[str] = []
    for key in sorted(_rate_table_label_keys()):
        for locale, messages in sorted(catalogues.items()):
            if key not in messages:
                issues.append(f"Rate table label '{key}' is not translated for '{locale}'")
    return issues


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.parse_args(argv)

    try:
        catalogues = _load_catalogues()
    except ValidationError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1

    issues = [
        *_missing_keys(catalogues),
        *_placeholder_inconsistencies(catalogues),
        *_unresolved_label_keys(catalogues),
    ]
    if issues:
        print(f"{len(issues)} translation issue(s) detected:")
        for issue in issues:
            print(f"  - {issue}")
        return 1

    print(f"Translations OK for locales: {', '.join(sorted(catalogues))}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
