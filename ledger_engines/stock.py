"""
Module: ledger_engines.stock
Responsibility:
    Compute a raw material's effective stock by replaying its purchase and
    consumption events, classify stock against the material's alert
    threshold, and value the stock at the average purchase price.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ledger_kernel and ledger_config.schema.

Invariants enforced:
    - Effective stock = purchased - consumed over the same window; events
      for other materials never contribute.
    - Unfiltered effective stock must equal the API's cached
      ``current_stock``; ``reconcile_stock`` reports any drift.
    - Status thresholds never divide by the alert level, so an alert of 0
      cannot raise.
    - Average unit price is the UNWEIGHTED mean of purchase unit prices,
      not a quantity-weighted mean.

Failure modes:
    - MaterialNotFoundError from ``find_material`` for unknown ids.

Usage:
    from ledger_engines.stock import effective_stock, stock_status

    stock = effective_stock(material, purchases, consumptions)
    status = stock_status(material)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from ledger_config.schema import DEFAULT_SETTINGS, LedgerSettings
from ledger_engines.money import ZERO, round2, sum_amounts, sum_quantities
from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.records import (
    ConsumptionEvent,
    MaterialRecord,
    PurchaseEvent,
    RecordId,
)
from ledger_kernel.domain.values import DateRange
from ledger_kernel.exceptions import MaterialNotFoundError
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.stock")


class StockStatus(str, Enum):
    """Alert level of a material's stock."""

    CRITICAL = "CRITICAL"
    LOW = "LOW"
    GOOD = "GOOD"


@dataclass(frozen=True)
class StockReconciliation:
    """Cached snapshot versus the stock replayed from events."""

    material_id: RecordId
    cached_stock: Decimal
    computed_stock: Decimal

    @property
    def drift(self) -> Decimal:
        return self.cached_stock - self.computed_stock

    @property
    def is_consistent(self) -> bool:
        return self.drift == 0


@dataclass(frozen=True)
class StockSnapshot:
    """Derived stock figures for one material over an optional window."""

    material_id: RecordId
    name: str
    unit: str
    purchased: Decimal
    consumed: Decimal
    effective_stock: Decimal
    current_stock: Decimal
    status: StockStatus
    average_unit_price: Decimal
    valuation: Decimal
    spent: Decimal
    consumed_value: Decimal

    def as_dict(self) -> dict[str, str]:
        return {
            "material_id": str(self.material_id),
            "name": self.name,
            "unit": self.unit,
            "purchased": str(self.purchased),
            "consumed": str(self.consumed),
            "effective_stock": str(self.effective_stock),
            "current_stock": str(self.current_stock),
            "status": self.status.value,
            "average_unit_price": str(self.average_unit_price),
            "valuation": str(self.valuation),
            "spent": str(self.spent),
            "consumed_value": str(self.consumed_value),
        }


def _in_window(date_range: DateRange | None, event) -> bool:
    return date_range is None or date_range.contains(event.date)


def purchases_for(
    material_id: RecordId,
    purchases: Iterable[PurchaseEvent],
    date_range: DateRange | None = None,
) -> list[PurchaseEvent]:
    """Purchases of one material, optionally restricted to a window."""
    return [
        p for p in purchases
        if p.material_id == material_id and _in_window(date_range, p)
    ]


def consumptions_for(
    material_id: RecordId,
    consumptions: Iterable[ConsumptionEvent],
    date_range: DateRange | None = None,
) -> list[ConsumptionEvent]:
    """Consumptions of one material, optionally restricted to a window."""
    return [
        c for c in consumptions
        if c.material_id == material_id and _in_window(date_range, c)
    ]


def find_material(materials: Iterable[MaterialRecord], material_id: RecordId) -> MaterialRecord:
    """Look up a material by id or raise MaterialNotFoundError."""
    for material in materials:
        if material.id == material_id:
            return material
    raise MaterialNotFoundError(material_id)


@traced_engine(
    "stock", "1.0",
    fingerprint_fields=("material", "date_range"),
    entity_field="material",
)
def effective_stock(
    material: MaterialRecord,
    purchases: Iterable[PurchaseEvent],
    consumptions: Iterable[ConsumptionEvent],
    date_range: DateRange | None = None,
) -> Decimal:
    """
    Replay purchases and consumptions of ``material``.

    With ``date_range`` the result is the net movement inside the window;
    without it, the running total over all events, which must equal the
    persisted ``current_stock``.
    """
    purchased = sum_quantities(p.quantity for p in purchases_for(material.id, purchases, date_range))
    consumed = sum_quantities(c.quantity for c in consumptions_for(material.id, consumptions, date_range))
    return purchased - consumed


def stock_status(
    material: MaterialRecord,
    current_stock: Decimal | None = None,
    settings: LedgerSettings = DEFAULT_SETTINGS,
) -> StockStatus:
    """
    Classify stock against the alert threshold.

    CRITICAL at or below the alert, LOW at or below alert x ratio (150% by
    default), GOOD otherwise.  With an alert of 0 the ratio band is
    meaningless, so only CRITICAL (stock <= 0) or GOOD are possible.

    Args:
        material: Material carrying the alert threshold.
        current_stock: Stock to classify; defaults to the cached snapshot.
        settings: Supplies the LOW ratio.
    """
    stock = material.current_stock if current_stock is None else current_stock
    alert = material.min_stock_alert

    if alert == 0:
        return StockStatus.CRITICAL if stock <= 0 else StockStatus.GOOD
    if stock <= alert:
        return StockStatus.CRITICAL
    if stock <= alert * settings.low_stock_ratio:
        return StockStatus.LOW
    return StockStatus.GOOD


def average_unit_price(material_id: RecordId, purchases: Iterable[PurchaseEvent]) -> Decimal:
    """
    Unweighted mean of unit prices over every purchase of the material.

    Returns 0 when the material was never purchased.
    """
    prices = [p.unit_price for p in purchases if p.material_id == material_id]
    if not prices:
        return ZERO
    return sum(prices, ZERO) / len(prices)


def valuation(material: MaterialRecord, average_price: Decimal) -> Decimal:
    """Cached stock valued at ``average_price``, rounded to cents."""
    if average_price == 0:
        return ZERO
    return round2(material.current_stock * average_price)


def consumed_value(
    material_id: RecordId,
    purchases: Sequence[PurchaseEvent],
    consumptions: Iterable[ConsumptionEvent],
    date_range: DateRange | None = None,
) -> Decimal:
    """Quantity consumed in the window, valued at the average unit price."""
    average = average_unit_price(material_id, purchases)
    if average == 0:
        return ZERO
    consumed = sum_quantities(c.quantity for c in consumptions_for(material_id, consumptions, date_range))
    return round2(consumed * average)


@traced_engine("stock", "1.0", fingerprint_fields=("material",), entity_field="material")
def reconcile_stock(
    material: MaterialRecord,
    purchases: Iterable[PurchaseEvent],
    consumptions: Iterable[ConsumptionEvent],
) -> StockReconciliation:
    """Compare the cached ``current_stock`` with the replayed event stream."""
    result = StockReconciliation(
        material_id=material.id,
        cached_stock=material.current_stock,
        computed_stock=effective_stock(material, purchases, consumptions),
    )
    if not result.is_consistent:
        logger.warning("stock_snapshot_drift", extra={
            "material_id": str(material.id),
            "cached_stock": str(result.cached_stock),
            "computed_stock": str(result.computed_stock),
            "drift": str(result.drift),
        })
    return result


def stock_snapshot(
    material: MaterialRecord,
    purchases: Sequence[PurchaseEvent],
    consumptions: Sequence[ConsumptionEvent],
    date_range: DateRange | None = None,
    settings: LedgerSettings = DEFAULT_SETTINGS,
) -> StockSnapshot:
    """
    All derived stock figures for one material.

    Windowed figures (purchased, consumed, effective stock, spent, consumed
    value) honour ``date_range``; status and valuation use the cached
    snapshot and the all-time average price.
    """
    in_range_purchases = purchases_for(material.id, purchases, date_range)
    in_range_consumptions = consumptions_for(material.id, consumptions, date_range)
    purchased = sum_quantities(p.quantity for p in in_range_purchases)
    consumed = sum_quantities(c.quantity for c in in_range_consumptions)
    average = average_unit_price(material.id, purchases)

    return StockSnapshot(
        material_id=material.id,
        name=material.name,
        unit=material.unit.label,
        purchased=purchased,
        consumed=consumed,
        effective_stock=purchased - consumed,
        current_stock=material.current_stock,
        status=stock_status(material, settings=settings),
        average_unit_price=round2(average),
        valuation=valuation(material, average),
        spent=sum_amounts(p.total_price for p in in_range_purchases),
        consumed_value=consumed_value(material.id, purchases, consumptions, date_range),
    )


@traced_engine("stock", "1.0", fingerprint_fields=("date_range",))
def stock_report(
    materials: Iterable[MaterialRecord],
    purchases: Sequence[PurchaseEvent],
    consumptions: Sequence[ConsumptionEvent],
    date_range: DateRange | None = None,
    settings: LedgerSettings = DEFAULT_SETTINGS,
) -> list[StockSnapshot]:
    """Snapshot every material, in input order."""
    return [
        stock_snapshot(material, purchases, consumptions, date_range, settings)
        for material in materials
    ]


def low_stock_materials(materials: Iterable[MaterialRecord]) -> list[MaterialRecord]:
    """Materials at or below their alert threshold (dashboard alert list)."""
    return [m for m in materials if m.current_stock <= m.min_stock_alert]
