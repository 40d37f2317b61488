"""Utility helpers for calculator modules."""

from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Any

_RATE_QUANTUM = Decimal("0.0001")


def require_pence(value: Any, field_name: str) -> int:
    """Return ``value`` when it is a non-negative whole number of pence."""

    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field '{field_name}' must be an integer amount in pence")
    if value < 0:
        raise ValueError(f"Field '{field_name}' cannot be negative")
    return value


def apply_rate(amount: int, rate: Decimal) -> int:
    """Return ``amount`` multiplied by ``rate`` rounded half-up to the penny."""

    return int((Decimal(amount) * rate).to_integral_value(rounding=ROUND_HALF_UP))


def apply_rate_floor(amount: int, rate: Decimal) -> int:
    """Return ``amount`` multiplied by ``rate`` rounded down to the penny."""

    return int((Decimal(amount) * rate).to_integral_value(rounding=ROUND_FLOOR))


def halve(amount: int) -> int:
    """Split ``amount`` in two, rounding half a penny upwards."""

    return int((Decimal(amount) / 2).to_integral_value(rounding=ROUND_HALF_UP))


def round_rate(numerator: int, denominator: int) -> Decimal:
    """Return ``numerator / denominator`` as a four-decimal fraction (zero when undefined)."""

    if denominator <= 0:
        return Decimal("0.0000")
    return (Decimal(numerator) / Decimal(denominator)).quantize(
        _RATE_QUANTUM, rounding=ROUND_HALF_UP
    )


def format_percentage(rate: Decimal) -> str:
    """Return ``rate`` as a percentage label without trailing zeros."""

    percentage = (rate * 100).normalize()
    if percentage == percentage.to_integral_value():
        return str(int(percentage))
    return format(percentage, "f")


def format_pounds(amount: int) -> str:
    """Render pence as a pound figure with thousands separators (``50,270``)."""

    pounds, pence = divmod(amount, 100)
    if pence:
        return f"{pounds:,}.{pence:02d}"
    return f"{pounds:,}"


__all__ = [
    "apply_rate",
    "apply_rate_floor",
    "format_percentage",
    "format_pounds",
    "halve",
    "require_pence",
    "round_rate",
]
