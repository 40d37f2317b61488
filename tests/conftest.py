"""Test configuration utilities and shared fixtures."""

import sys
from datetime import date
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from uktax.backend.app import create_app  # noqa: E402
from uktax.backend.app.services.ledger import InMemoryLedger, LedgerEntry  # noqa: E402

ACCOUNT_KEY = "acme"


@pytest.fixture()
def ledger() -> InMemoryLedger:
    """Ledger with £50,000 income and £20,000 expenses in the 2025-26 tax year."""

    return InMemoryLedger(
        [
            LedgerEntry(ACCOUNT_KEY, "income", 3_000_000, date(2025, 4, 6)),
            LedgerEntry(ACCOUNT_KEY, "income", 2_000_000, date(2026, 4, 5)),
            LedgerEntry(ACCOUNT_KEY, "expense", 1_500_000, date(2025, 9, 14)),
            LedgerEntry(ACCOUNT_KEY, "expense", 500_000, date(2026, 1, 2)),
            LedgerEntry(ACCOUNT_KEY, "income", 9_999_999, date(2025, 7, 1), status="void"),
            LedgerEntry(ACCOUNT_KEY, "income", 700_000, date(2026, 4, 6)),
            LedgerEntry("other", "income", 4_200_000, date(2025, 10, 1)),
        ]
    )


@pytest.fixture()
def app(ledger: InMemoryLedger) -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app(ledger=ledger)
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()
