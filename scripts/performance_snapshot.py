#!/usr/bin/env python3
"""Time report generation against a synthetic in-memory ledger."""

from __future__ import annotations

import json
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta
from pathlib import Path
from time import perf_counter

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from uktax.backend.app.services.ledger import InMemoryLedger, LedgerEntry  # noqa: E402
from uktax.backend.app.services.report_service import ReportBuilder  # noqa: E402

ACCOUNT_KEY = "snapshot"
TAX_YEAR = "2025-26"


def build_ledger(entries_per_day: int) -> InMemoryLedger:
    """Return a ledger with daily income and expense postings across the tax year."""

    ledger = InMemoryLedger()
    day = date(2025, 4, 6)
    while day <= date(2026, 4, 5):
        for index in range(entries_per_day):
            ledger.add(LedgerEntry(ACCOUNT_KEY, "income", 25_000 + index, day))
            ledger.add(LedgerEntry(ACCOUNT_KEY, "expense", 7_500, day))
        day += timedelta(days=1)
    return ledger


def measure_reports(builder: ReportBuilder, iterations: int) -> dict[str, float]:
    """Return timing statistics for repeated tax year reports."""

    builder.for_tax_year(ACCOUNT_KEY, TAX_YEAR)  # Warm rate table cache
    start = perf_counter()
    for _ in range(iterations):
        builder.for_tax_year(ACCOUNT_KEY, TAX_YEAR)
    elapsed = perf_counter() - start
    return {
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "average_ms": (elapsed / iterations) * 1000,
    }


def measure_concurrent_quarters(builder: ReportBuilder, workers: int) -> dict[str, float]:
    """Build the four calendar quarters in parallel to exercise shared rate tables."""

    start = perf_counter()
    with ThreadPoolExecutor(max_workers=workers) as executor:
        reports = list(
            executor.map(lambda quarter: builder.for_quarter(ACCOUNT_KEY, 2025, quarter), range(1, 5))
        )
    elapsed = perf_counter() - start
    return {
        "workers": workers,
        "total_ms": elapsed * 1000,
        "total_liability_pence": sum(report.summary.total_tax_liability for report in reports),
    }


def main() -> None:
    iterations = int(os.getenv("UKTAX_PROFILE_ITERATIONS", "75"))
    entries_per_day = int(os.getenv("UKTAX_PROFILE_ENTRIES_PER_DAY", "4"))
    builder = ReportBuilder(build_ledger(entries_per_day))
    report = {
        "tax_year_reports": measure_reports(builder, iterations),
        "concurrent_quarters": measure_concurrent_quarters(builder, workers=4),
    }
    print(json.dumps(report, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
