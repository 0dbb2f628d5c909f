"""
Workshop Records (``ledger_kernel.domain.records``).

Responsibility
--------------
Frozen value objects for the raw transactional records the workshop API
returns: raw materials with their purchase and consumption events, payable
orders (supplier orders and piece-worker receipts) with line items and
payments, employees with salary allowances, production orders with daily
step entries, and daily expenses and incomes.

Architecture
------------
Layer: **Kernel > Domain** -- pure data structures.  All dataclasses are
``frozen=True``; the engines never mutate them and "changes" (adding or
removing a payment) produce new instances via ``dataclasses.replace``.

Invariants
----------
- Amounts and stock quantities are ``Decimal``; boundary values are
  converted through ``to_decimal`` (never ``Decimal(float)``).
- Event amounts and quantities are strictly positive.
- Derived totals (purchase total, line total, order total) are recomputed
  from their parts; a total supplied by the API is kept for comparison
  only.
- A payable order only holds payments linked to its own id.

Failure Modes
-------------
- ``NonPositiveAmountError`` / ``NonPositiveQuantityError`` on events with
  a zero or negative amount or quantity.
- ``NegativeValueError`` on negative thresholds, salaries or counters.
- ``NonIntegralValueError`` when a unit count is not a whole number.
- ``PaymentOrderMismatchError`` when a payment is attached to another order.
- ``DuplicatePaymentError`` when two payments on one order share an id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Union

from ledger_kernel.domain.values import as_date, round_money, to_decimal
from ledger_kernel.exceptions import (
    DuplicatePaymentError,
    NegativeValueError,
    NonIntegralValueError,
    NonPositiveAmountError,
    NonPositiveQuantityError,
    PaymentOrderMismatchError,
)
from ledger_kernel.logging_config import get_logger

logger = get_logger("domain.records")

RecordId = Union[int, str]


class MaterialUnit(str, Enum):
    """Unit of measure for a raw material."""

    KG = "KG"
    LITER = "LITER"
    PIECE = "PIECE"

    @property
    def label(self) -> str:
        return {
            MaterialUnit.KG: "kg",
            MaterialUnit.LITER: "L",
            MaterialUnit.PIECE: "pcs",
        }[self]


class ProductionStep(str, Enum):
    """Workshop steps, declared in workflow order."""

    CUTTING = "CUTTING"
    MONTAGE = "MONTAGE"
    FINITION = "FINITION"
    PAINT = "PAINT"
    PACKAGING = "PACKAGING"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ProductionStatus(str, Enum):
    """Lifecycle of a production order."""

    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"


class ExpenseCategory(str, Enum):
    """Daily expense categories."""

    ELECTRICITY = "ELECTRICITY"
    WATER = "WATER"
    TRANSPORT = "TRANSPORT"
    SALARIES = "SALARIES"
    MAINTENANCE = "MAINTENANCE"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class IncomeSource(str, Enum):
    """Where an income entry came from."""

    PRODUCT_SALES = "PRODUCT_SALES"
    SERVICE_REVENUE = "SERVICE_REVENUE"
    CUSTOM_ORDERS = "CUSTOM_ORDERS"
    REPAIRS = "REPAIRS"
    CONSULTING = "CONSULTING"
    OTHER = "OTHER"


class EmployeeStatus(str, Enum):
    """Employment status of a salaried employee."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ON_LEAVE = "ON_LEAVE"


class PayableKind(str, Enum):
    """Which kind of owner a payable order is owed to."""

    SUPPLIER_ORDER = "SUPPLIER_ORDER"  # owner is a supplier
    PIECE_RECEIPT = "PIECE_RECEIPT"  # owner is a piece-rate worker


# ---------------------------------------------------------------------------
# Field coercion helpers
# ---------------------------------------------------------------------------


def _set(record: object, name: str, value: object) -> None:
    object.__setattr__(record, name, value)


def _require_positive_amount(record: object, name: str) -> None:
    value = to_decimal(getattr(record, name))
    if value <= 0:
        raise NonPositiveAmountError(name, value)
    _set(record, name, value)


def _require_positive_quantity(record: object, name: str) -> None:
    value = to_decimal(getattr(record, name))
    if value <= 0:
        raise NonPositiveQuantityError(name, value)
    _set(record, name, value)


def _require_non_negative(record: object, name: str) -> None:
    value = to_decimal(getattr(record, name))
    if value < 0:
        raise NegativeValueError(name, value)
    _set(record, name, value)


def _whole_number(name: str, raw: object) -> int:
    value = to_decimal(raw)
    if value != value.to_integral_value():
        raise NonIntegralValueError(name, value)
    return int(value)


def _require_count(record: object, name: str) -> None:
    value = _whole_number(name, getattr(record, name))
    if value < 0:
        raise NegativeValueError(name, Decimal(value))
    _set(record, name, value)


def _coerce_date(record: object, name: str) -> None:
    _set(record, name, as_date(getattr(record, name)))


# ---------------------------------------------------------------------------
# Raw materials
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MaterialRecord:
    """
    A raw material master record.

    ``current_stock`` is the API's cached snapshot; the stock engine
    recomputes effective stock from the event stream and only trusts this
    field for unfiltered status checks.
    """

    id: RecordId
    name: str
    unit: MaterialUnit
    current_stock: Decimal
    min_stock_alert: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        _set(self, "unit", MaterialUnit(self.unit))
        _set(self, "current_stock", to_decimal(self.current_stock))
        _require_non_negative(self, "min_stock_alert")


@dataclass(frozen=True)
class PurchaseEvent:
    """A raw material purchase. ``total_price`` is always recomputed."""

    id: RecordId
    material_id: RecordId
    date: date
    quantity: Decimal
    unit_price: Decimal
    supplier: str = ""
    recorded_total: Decimal | None = None

    def __post_init__(self) -> None:
        _coerce_date(self, "date")
        _require_positive_quantity(self, "quantity")
        _require_positive_amount(self, "unit_price")
        if self.recorded_total is not None:
            _set(self, "recorded_total", to_decimal(self.recorded_total))

    @property
    def total_price(self) -> Decimal:
        return round_money(self.quantity * self.unit_price)

    @property
    def total_mismatch(self) -> bool:
        """True when the API-supplied total disagrees with quantity x price."""
        return (
            self.recorded_total is not None
            and round_money(self.recorded_total) != self.total_price
        )


@dataclass(frozen=True)
class ConsumptionEvent:
    """Material taken out of stock, optionally for an order step."""

    id: RecordId
    material_id: RecordId
    date: date
    quantity: Decimal
    order_id: RecordId | None = None
    step: ProductionStep | None = None
    employee_id: RecordId | None = None
    piece_worker_id: RecordId | None = None
    notes: str = ""

    def __post_init__(self) -> None:
        _coerce_date(self, "date")
        _require_positive_quantity(self, "quantity")
        if self.step is not None:
            _set(self, "step", ProductionStep(self.step))


# ---------------------------------------------------------------------------
# Payables
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineItem:
    """One line of a supplier order or piece receipt."""

    description: str
    quantity: Decimal
    unit_price: Decimal
    id: RecordId | None = None
    material_id: RecordId | None = None

    def __post_init__(self) -> None:
        _require_positive_quantity(self, "quantity")
        _require_non_negative(self, "unit_price")

    @property
    def line_total(self) -> Decimal:
        return round_money(self.quantity * self.unit_price)


@dataclass(frozen=True)
class PaymentEvent:
    """A payment made against one payable order."""

    id: RecordId
    payable_order_id: RecordId
    date: date
    amount: Decimal
    method: str | None = None
    notes: str | None = None
    expense_id: RecordId | None = None

    def __post_init__(self) -> None:
        _coerce_date(self, "date")
        _require_positive_amount(self, "amount")


@dataclass(frozen=True)
class PayableOrder:
    """
    Anything owed to an owner and paid down by payments.

    Generalizes supplier orders (owner = supplier) and piece-worker
    receipts (owner = worker).  When line items are present the total is
    their sum; otherwise the supplied ``total_amount`` is used.  Paid
    amount and status are derived by ``ledger_engines.payments``.
    """

    id: RecordId
    owner_id: RecordId
    date: date
    kind: PayableKind = PayableKind.SUPPLIER_ORDER
    total_amount: Decimal | None = None
    items: tuple[LineItem, ...] = ()
    payments: tuple[PaymentEvent, ...] = ()
    notes: str = ""

    def __post_init__(self) -> None:
        _coerce_date(self, "date")
        _set(self, "kind", PayableKind(self.kind))
        _set(self, "items", tuple(self.items))
        _set(self, "payments", tuple(self.payments))

        if self.items:
            computed = sum((item.line_total for item in self.items), Decimal("0.00"))
            if self.total_amount is not None and to_decimal(self.total_amount) != computed:
                logger.warning("payable_total_recomputed", extra={
                    "order_id": str(self.id),
                    "supplied_total": str(self.total_amount),
                    "computed_total": str(computed),
                })
            _set(self, "total_amount", computed)
        elif self.total_amount is None:
            _set(self, "total_amount", Decimal("0.00"))
        else:
            _require_non_negative(self, "total_amount")

        seen: set[RecordId] = set()
        for payment in self.payments:
            if payment.payable_order_id != self.id:
                raise PaymentOrderMismatchError(
                    str(payment.id), str(self.id), str(payment.payable_order_id)
                )
            if payment.id in seen:
                raise DuplicatePaymentError(str(payment.id), str(self.id))
            seen.add(payment.id)


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Employee:
    """A salaried employee."""

    id: RecordId
    hire_date: date
    monthly_salary: Decimal
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    first_name: str = ""
    last_name: str = ""

    def __post_init__(self) -> None:
        _coerce_date(self, "hire_date")
        _require_non_negative(self, "monthly_salary")
        _set(self, "status", EmployeeStatus(self.status))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class AllowanceEvent:
    """An advance paid to an employee against the current salary cycle."""

    id: RecordId
    employee_id: RecordId
    date: date
    amount: Decimal
    description: str = ""

    def __post_init__(self) -> None:
        _coerce_date(self, "date")
        _require_positive_amount(self, "amount")


# ---------------------------------------------------------------------------
# Production
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProductionOrder:
    """A furniture production order for ``quantity`` units of one model."""

    id: RecordId
    model_id: RecordId
    quantity: int
    start_date: date
    status: ProductionStatus = ProductionStatus.IN_PROGRESS

    def __post_init__(self) -> None:
        _coerce_date(self, "start_date")
        _set(self, "status", ProductionStatus(self.status))
        quantity = _whole_number("quantity", self.quantity)
        if quantity <= 0:
            raise NonPositiveQuantityError("quantity", Decimal(quantity))
        _set(self, "quantity", quantity)


@dataclass(frozen=True)
class DailyProduction:
    """Units entered, completed and lost at one step on one day."""

    id: RecordId
    order_id: RecordId
    step: ProductionStep
    date: date
    quantity_entered: int = 0
    quantity_completed: int = 0
    quantity_lost: int = 0
    notes: str = ""

    def __post_init__(self) -> None:
        _coerce_date(self, "date")
        _set(self, "step", ProductionStep(self.step))
        _require_count(self, "quantity_entered")
        _require_count(self, "quantity_completed")
        _require_count(self, "quantity_lost")


# ---------------------------------------------------------------------------
# Cash movements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Expense:
    """A daily expense."""

    id: RecordId
    date: date
    category: ExpenseCategory
    amount: Decimal
    payment_method: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        _coerce_date(self, "date")
        _set(self, "category", ExpenseCategory(self.category))
        _require_positive_amount(self, "amount")


@dataclass(frozen=True)
class Income:
    """An income entry."""

    id: RecordId
    date: date
    source: IncomeSource
    amount: Decimal
    payment_method: str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        _coerce_date(self, "date")
        _set(self, "source", IncomeSource(self.source))
        _require_positive_amount(self, "amount")
