"""
Module: ledger_engines.money
Responsibility:
    Rounding-safe arithmetic for currency amounts and stock quantities.
    Every sum, ratio and display string in the other engines goes through
    these helpers, so accumulated float drift cannot leak into a balance.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ledger_kernel/domain/values and ledger_config.schema.

Invariants enforced:
    - Integer-cent arithmetic: amounts are converted to integer minor units
      before they are summed, then converted back.
    - ROUND_HALF_UP on the cent boundary (2.675 -> 2.68, never 2.67).
    - Ratios never produce NaN/Infinity: a zero denominator yields 0.

Failure modes:
    - ValueError on values that cannot be read as a number.

Usage:
    from ledger_engines.money import round2, sum_amounts, percentage

    round2(0.1 + 0.2)                 # Decimal("0.30")
    sum_amounts(["0.10", "0.20"])     # Decimal("0.30")
    percentage(1, 0)                  # Decimal("0")
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from ledger_config.schema import DEFAULT_SETTINGS, LedgerSettings
from ledger_kernel.domain.values import MONEY_DECIMAL_PLACES, round_money, to_decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_cents(value: Any, decimal_places: int = MONEY_DECIMAL_PLACES) -> int:
    """Convert an amount to integer minor units (half-up)."""
    rounded = round_money(to_decimal(value), decimal_places)
    return int(rounded.scaleb(decimal_places))


def from_cents(cents: int, decimal_places: int = MONEY_DECIMAL_PLACES) -> Decimal:
    """
    Convert integer minor units back to an amount.

    Example:
        from_cents(1050) -> Decimal("10.50")
    """
    return Decimal(cents).scaleb(-decimal_places).quantize(
        Decimal(1).scaleb(-decimal_places)
    )


def round2(value: Any) -> Decimal:
    """Round to 2 decimal places via integer cents, half-up."""
    return from_cents(to_cents(value))


def sum_amounts(values: Iterable[Any]) -> Decimal:
    """Sum currency amounts as integer cents. Empty input returns 0.00."""
    return from_cents(sum(to_cents(v) for v in values))


def sum_quantities(values: Iterable[Any]) -> Decimal:
    """Exact Decimal sum of stock quantities (no intermediate rounding)."""
    return sum((to_decimal(v) for v in values), ZERO)


def safe_ratio(part: Any, whole: Any) -> Decimal:
    """``part / whole``; 0 when ``whole`` is zero."""
    denominator = to_decimal(whole)
    if denominator == 0:
        return ZERO
    return to_decimal(part) / denominator


def percentage(part: Any, whole: Any) -> Decimal:
    """
    ``part`` as a percentage of ``whole``, rounded to 2 places.

    Returns 0 when ``whole`` is zero (never NaN or Infinity).
    """
    if to_decimal(whole) == 0:
        return ZERO
    return round2(safe_ratio(part, whole) * HUNDRED)


def format_currency(
    amount: Any,
    suffix: str | None = None,
    settings: LedgerSettings = DEFAULT_SETTINGS,
) -> str:
    """
    Render an amount with exactly 2 decimals, grouped thousands and the
    fixed currency suffix.

    Example:
        format_currency(1234.5) -> "1,234.50 DA"
    """
    return f"{round2(amount):,.2f} {suffix or settings.currency_suffix}"
