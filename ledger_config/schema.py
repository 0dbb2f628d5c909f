"""
Ledger settings schema.

Defines the typed, frozen settings the engines read.  YAML files are
parsed into ``LedgerSettings`` by the loader; ``DEFAULT_SETTINGS`` mirrors
``sets/default.yaml`` and is the default for every engine ``settings``
parameter, so engines stay usable without touching the filesystem.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class LedgerSettings:
    """Tunable values for money formatting, stock alerts and payments."""

    currency_code: str = "DZD"
    currency_suffix: str = "DA"
    low_stock_ratio: Decimal = Decimal("1.5")  # LOW while stock <= alert x ratio
    allow_overpayment: bool = True
    top_n: int = 5
    checksum: str = ""

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["low_stock_ratio"] = str(self.low_stock_ratio)
        return data


DEFAULT_SETTINGS = LedgerSettings()
