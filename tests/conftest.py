"""
Pytest fixtures for the workshop ledger test suite.

Provides:
- Structured logging configured once per session
- Log capture as parsed JSON dicts
- Record factories for materials, purchases, consumptions, payables,
  employees, allowances and production data
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from itertools import count

import pytest

from ledger_kernel.domain.records import (
    AllowanceEvent,
    ConsumptionEvent,
    DailyProduction,
    Employee,
    LineItem,
    MaterialRecord,
    MaterialUnit,
    PayableOrder,
    ProductionOrder,
    ProductionStatus,
    ProductionStep,
    PurchaseEvent,
)
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

_ids = count(1)


def next_id() -> int:
    return next(_ids)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            add_payment(order, Decimal("10"), payment_date=date(2024, 1, 1))
            logs = captured_logs()
            assert any(r["message"] == "payment_added" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Record factories
# =============================================================================


@pytest.fixture
def make_material():
    def _make(current_stock="0", min_stock_alert="0", unit=MaterialUnit.KG, name="Oak board", id=None):
        return MaterialRecord(
            id=id if id is not None else next_id(),
            name=name,
            unit=unit,
            current_stock=Decimal(current_stock),
            min_stock_alert=Decimal(min_stock_alert),
        )

    return _make


@pytest.fixture
def make_purchase():
    def _make(material_id, quantity, unit_price="10.00", on=date(2024, 1, 10), supplier=""):
        return PurchaseEvent(
            id=next_id(),
            material_id=material_id,
            date=on,
            quantity=Decimal(quantity),
            unit_price=Decimal(unit_price),
            supplier=supplier,
        )

    return _make


@pytest.fixture
def make_consumption():
    def _make(material_id, quantity, on=date(2024, 1, 15), order_id=None, step=None):
        return ConsumptionEvent(
            id=next_id(),
            material_id=material_id,
            date=on,
            quantity=Decimal(quantity),
            order_id=order_id,
            step=step,
        )

    return _make


@pytest.fixture
def make_payable():
    def _make(total="1000.00", owner_id=1, items=(), id=None, on=date(2024, 3, 1)):
        return PayableOrder(
            id=id if id is not None else next_id(),
            owner_id=owner_id,
            date=on,
            total_amount=None if items else Decimal(total),
            items=tuple(items),
        )

    return _make


@pytest.fixture
def make_line_item():
    def _make(quantity, unit_price, description="Item"):
        return LineItem(description=description, quantity=Decimal(quantity), unit_price=Decimal(unit_price))

    return _make


@pytest.fixture
def make_employee():
    def _make(hire_date=date(2023, 5, 31), salary="50000.00", status="ACTIVE", id=None):
        return Employee(
            id=id if id is not None else next_id(),
            hire_date=hire_date,
            monthly_salary=Decimal(salary),
            status=status,
            first_name="Amine",
            last_name="Haddad",
        )

    return _make


@pytest.fixture
def make_allowance():
    def _make(employee_id, amount, on):
        return AllowanceEvent(id=next_id(), employee_id=employee_id, date=on, amount=Decimal(amount))

    return _make


@pytest.fixture
def make_order():
    def _make(quantity=10, model_id=1, start_date=date(2024, 2, 1), status=ProductionStatus.IN_PROGRESS, id=None):
        return ProductionOrder(
            id=id if id is not None else next_id(),
            model_id=model_id,
            quantity=quantity,
            start_date=start_date,
            status=status,
        )

    return _make


@pytest.fixture
def make_entry():
    def _make(order_id, step=ProductionStep.CUTTING, entered=0, completed=0, lost=0, on=date(2024, 2, 5)):
        return DailyProduction(
            id=next_id(),
            order_id=order_id,
            step=step,
            date=on,
            quantity_entered=entered,
            quantity_completed=completed,
            quantity_lost=lost,
        )

    return _make
