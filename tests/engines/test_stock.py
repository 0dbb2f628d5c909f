"""
Tests for the stock engine (ledger_engines/stock.py).

Covers:
- Effective stock replay, windowed and unfiltered
- Round trip: unfiltered replay equals the cached current_stock
- CRITICAL / LOW / GOOD thresholds, including a zero alert
- Unweighted average price and valuation
- Drift detection and material lookup
"""

from datetime import date
from decimal import Decimal

import pytest

from ledger_config.schema import LedgerSettings
from ledger_engines.stock import (
    StockStatus,
    average_unit_price,
    consumed_value,
    effective_stock,
    find_material,
    low_stock_materials,
    reconcile_stock,
    stock_report,
    stock_snapshot,
    stock_status,
    valuation,
)
from ledger_kernel.domain.values import DateRange
from ledger_kernel.exceptions import MaterialNotFoundError


class TestWorkedExample:
    """Purchases of 10 @ 5 and 20 @ 7, one consumption of 5."""

    @pytest.fixture(autouse=True)
    def _records(self, make_material, make_purchase, make_consumption):
        self.material = make_material(current_stock="25", min_stock_alert="5")
        self.purchases = [
            make_purchase(self.material.id, "10", "5", on=date(2024, 1, 5)),
            make_purchase(self.material.id, "20", "7", on=date(2024, 2, 5)),
        ]
        self.consumptions = [make_consumption(self.material.id, "5", on=date(2024, 2, 10))]

    def test_effective_stock(self):
        assert effective_stock(self.material, self.purchases, self.consumptions) == Decimal("25")

    def test_average_unit_price_is_unweighted(self):
        """(5 + 7) / 2, not the quantity-weighted 6.33."""
        assert average_unit_price(self.material.id, self.purchases) == Decimal("6")

    def test_valuation(self):
        average = average_unit_price(self.material.id, self.purchases)
        assert valuation(self.material, average) == Decimal("150.00")

    def test_unfiltered_replay_equals_cached_stock(self):
        computed = effective_stock(self.material, self.purchases, self.consumptions)
        assert computed == self.material.current_stock

        reconciliation = reconcile_stock(self.material, self.purchases, self.consumptions)
        assert reconciliation.is_consistent
        assert reconciliation.drift == 0

    def test_windowed_stock_is_net_movement(self):
        february = DateRange.of("2024-02-01", "2024-02-29")
        assert effective_stock(self.material, self.purchases, self.consumptions, february) == Decimal("15")

    def test_snapshot(self):
        snapshot = stock_snapshot(self.material, self.purchases, self.consumptions)

        assert snapshot.purchased == Decimal("30")
        assert snapshot.consumed == Decimal("5")
        assert snapshot.effective_stock == Decimal("25")
        assert snapshot.average_unit_price == Decimal("6.00")
        assert snapshot.valuation == Decimal("150.00")
        assert snapshot.spent == Decimal("190.00")
        assert snapshot.consumed_value == Decimal("30.00")
        assert snapshot.status is StockStatus.GOOD
        assert snapshot.as_dict()["unit"] == "kg"

    def test_consumed_value_in_window(self):
        january = DateRange.of("2024-01-01", "2024-01-31")
        assert consumed_value(self.material.id, self.purchases, self.consumptions, january) == Decimal("0.00")


class TestEventIsolation:
    def test_other_materials_ignored(self, make_material, make_purchase, make_consumption):
        oak = make_material(current_stock="4")
        pine = make_material(current_stock="100")
        purchases = [make_purchase(oak.id, "4"), make_purchase(pine.id, "100")]
        consumptions = [make_consumption(pine.id, "3")]

        assert effective_stock(oak, purchases, consumptions) == Decimal("4")

    def test_drift_reported(self, make_material, make_purchase, captured_logs):
        material = make_material(current_stock="12")
        purchases = [make_purchase(material.id, "10")]

        reconciliation = reconcile_stock(material, purchases, [])

        assert not reconciliation.is_consistent
        assert reconciliation.drift == Decimal("2")
        drift_logs = [r for r in captured_logs() if r["message"] == "stock_snapshot_drift"]
        assert drift_logs[0]["material_id"] == str(material.id)


class TestStockStatus:
    @pytest.mark.parametrize(
        "stock, expected",
        [
            ("0", StockStatus.CRITICAL),
            ("10", StockStatus.CRITICAL),
            ("10.01", StockStatus.LOW),
            ("15", StockStatus.LOW),
            ("15.01", StockStatus.GOOD),
        ],
    )
    def test_thresholds(self, make_material, stock, expected):
        material = make_material(current_stock=stock, min_stock_alert="10")
        assert stock_status(material) is expected

    @pytest.mark.parametrize(
        "stock, expected",
        [("0", StockStatus.CRITICAL), ("-1", StockStatus.CRITICAL), ("0.5", StockStatus.GOOD)],
    )
    def test_zero_alert(self, make_material, stock, expected):
        material = make_material(current_stock=stock, min_stock_alert="0")
        assert stock_status(material) is expected

    def test_explicit_stock_overrides_snapshot(self, make_material):
        material = make_material(current_stock="100", min_stock_alert="10")
        assert stock_status(material, current_stock=Decimal("9")) is StockStatus.CRITICAL

    def test_ratio_from_settings(self, make_material):
        material = make_material(current_stock="18", min_stock_alert="10")
        assert stock_status(material) is StockStatus.GOOD
        assert stock_status(material, settings=LedgerSettings(low_stock_ratio=Decimal("2"))) is StockStatus.LOW


class TestNoPurchases:
    def test_average_and_valuation_zero(self, make_material):
        material = make_material(current_stock="7")
        average = average_unit_price(material.id, [])

        assert average == 0
        assert valuation(material, average) == 0

    def test_snapshot_without_events(self, make_material):
        snapshot = stock_snapshot(make_material(current_stock="0"), [], [])
        assert snapshot.spent == Decimal("0.00")
        assert snapshot.consumed_value == 0


class TestLookupsAndLists:
    def test_find_material(self, make_material):
        materials = [make_material(id=1), make_material(id=2)]
        assert find_material(materials, 2).id == 2

    def test_unknown_material(self, make_material):
        with pytest.raises(MaterialNotFoundError) as exc_info:
            find_material([make_material(id=1)], 99)
        assert exc_info.value.entity_id == 99

    def test_low_stock_list(self, make_material):
        low = make_material(current_stock="2", min_stock_alert="5")
        at_alert = make_material(current_stock="5", min_stock_alert="5")
        fine = make_material(current_stock="50", min_stock_alert="5")

        assert low_stock_materials([low, at_alert, fine]) == [low, at_alert]

    def test_report_in_input_order(self, make_material):
        materials = [make_material(id=3), make_material(id=1)]
        assert [s.material_id for s in stock_report(materials, [], [])] == [3, 1]
