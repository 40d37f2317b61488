"""Ledger aggregators that total income and expenses for a reporting window."""

from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import closing
from dataclasses import dataclass
from datetime import date
from threading import Lock
from typing import Iterable, Protocol, runtime_checkable

from uktax.backend.app.models import LedgerSummary

from .calculators.tax_year import parse_date, validate_date_range
from .calculators.utils import require_pence

_LOGGER = logging.getLogger(__name__)

ENTRY_TYPES = frozenset({"income", "expense"})
VOID_STATUS = "void"


class LedgerError(RuntimeError):
    """Raised when the transaction store cannot produce a summary."""


@runtime_checkable
class LedgerAggregator(Protocol):
    """Source of aggregate profit figures for an account."""

    def get_net_profit(
        self, account_key: str, start_date: date, end_date: date
    ) -> LedgerSummary:
        """Return totals for non-void entries dated within the inclusive range."""
        ...


@dataclass(frozen=True)
class LedgerEntry:
    """Single income or expense posting."""

    account_key: str
    type: str
    amount: int
    transaction_date: date
    status: str = "posted"

    def __post_init__(self) -> None:
        if self.type not in ENTRY_TYPES:
            raise ValueError("Field 'type' must be one of: expense, income")
        require_pence(self.amount, "amount")
        object.__setattr__(
            self, "transaction_date", parse_date(self.transaction_date, "transaction_date")
        )

    @property
    def is_void(self) -> bool:
        return self.status == VOID_STATUS


class InMemoryLedger:
    """Thread-safe ledger held in process memory."""

    def __init__(self, entries: Iterable[LedgerEntry] = ()) -> None:
        self._entries: list[LedgerEntry] = list(entries)
        self._lock = Lock()

    def add(self, entry: LedgerEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def get_net_profit(
        self, account_key: str, start_date: date, end_date: date
    ) -> LedgerSummary:
        start_date, end_date = validate_date_range(start_date, end_date)
        income = 0
        expenses = 0
        with self._lock:
            entries = list(self._entries)
        for entry in entries:
            if entry.account_key != account_key or entry.is_void:
                continue
            if not start_date <= entry.transaction_date <= end_date:
                continue
            if entry.type == "income":
                income += entry.amount
            else:
                expenses += entry.amount
        return LedgerSummary.from_totals(income, expenses)


class SQLiteLedger:
    """Ledger reading postings from a SQLite ``transactions`` table.

    Amounts are stored as integer pence and dates as ISO ``YYYY-MM-DD`` text so
    range filtering can compare strings directly.
    """

    def __init__(self, path: str | os.PathLike[str], *, create: bool = True) -> None:
        self._path = str(path)
        self._lock = Lock()
        if create:
            self._initialise()

    def _connect(self) -> sqlite3.Connection:
        try:
            connection = sqlite3.connect(self._path, check_same_thread=False)
        except sqlite3.Error as exc:
            raise LedgerError(f"Unable to open ledger database: {exc}") from exc
        connection.row_factory = sqlite3.Row
        return connection

    def _initialise(self) -> None:
        try:
            with closing(self._connect()) as connection, connection:
                connection.execute(
                    """
                    CREATE TABLE IF NOT EXISTS transactions (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        account_key TEXT NOT NULL,
                        type TEXT NOT NULL CHECK (type IN ('income', 'expense')),
                        status TEXT NOT NULL DEFAULT 'posted',
                        amount INTEGER NOT NULL CHECK (amount >= 0),
                        transaction_date TEXT NOT NULL
                    )
                    """
                )
                connection.execute(
                    "CREATE INDEX IF NOT EXISTS idx_transactions_account_date"
                    " ON transactions (account_key, transaction_date)"
                )
        except sqlite3.Error as exc:
            raise LedgerError(f"Unable to initialise ledger database: {exc}") from exc

    def add_entries(self, entries: Iterable[LedgerEntry]) -> None:
        rows = [
            (
                entry.account_key,
                entry.type,
                entry.status,
                entry.amount,
                entry.transaction_date.isoformat(),
            )
            for entry in entries
        ]
        with self._lock:
            try:
                with closing(self._connect()) as connection, connection:
                    connection.executemany(
                        "INSERT INTO transactions"
                        " (account_key, type, status, amount, transaction_date)"
                        " VALUES (?, ?, ?, ?, ?)",
                        rows,
                    )
            except sqlite3.Error as exc:
                raise LedgerError(f"Unable to record ledger entries: {exc}") from exc

    def get_net_profit(
        self, account_key: str, start_date: date, end_date: date
    ) -> LedgerSummary:
        start_date, end_date = validate_date_range(start_date, end_date)
        try:
            with closing(self._connect()) as connection:
                row = connection.execute(
                    """
                    SELECT
                        COALESCE(SUM(CASE WHEN type = 'income' THEN amount END), 0) AS income,
                        COALESCE(SUM(CASE WHEN type = 'expense' THEN amount END), 0) AS expenses
                    FROM transactions
                    WHERE account_key = ?
                      AND status != ?
                      AND transaction_date BETWEEN ? AND ?
                    """,
                    (account_key, VOID_STATUS, start_date.isoformat(), end_date.isoformat()),
                ).fetchone()
        except sqlite3.Error as exc:
            raise LedgerError(f"Ledger query failed for account '{account_key}': {exc}") from exc

        _LOGGER.debug(
            "Ledger totals for %s between %s and %s: income=%s expenses=%s",
            account_key,
            start_date,
            end_date,
            row["income"],
            row["expenses"],
        )
        return LedgerSummary.from_totals(int(row["income"]), int(row["expenses"]))


__all__ = [
    "ENTRY_TYPES",
    "InMemoryLedger",
    "LedgerAggregator",
    "LedgerEntry",
    "LedgerError",
    "SQLiteLedger",
    "VOID_STATUS",
]
