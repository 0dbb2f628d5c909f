"""
Module: ledger_engines.payments
Responsibility:
    Paid / remaining / status computation for any "order + payments"
    relationship.  Supplier orders and piece-worker receipts share the
    same rules through ``PayableOrder``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ledger_kernel and ledger_config.schema.

Invariants enforced:
    - Status is a pure function of (total, paid): PAID when paid >= total,
      PART_PAID when 0 < paid < total, NOT_PAID otherwise.  The rules are
      checked in that order, so a zero-total order is PAID.
    - Paid amount is always re-summed from the payments that remain; a
      removal can never leave a stale status behind.
    - ``remaining`` is never negative, even for an overpaid order.
    - Records are never mutated: add/remove return new orders.

Failure modes:
    - NonPositiveAmountError when a payment amount is <= 0.
    - OverpaymentError when the overpayment policy is disabled and the
      amount exceeds the remaining balance.
    - DuplicatePaymentError when a payment id is already on the order.
    - PaymentNotFoundError when removing a payment the order does not hold.
    - PayableOrderNotFoundError from ``find_payable`` for unknown ids.

Usage:
    from ledger_engines.payments import add_payment, payable_state

    order = add_payment(order, Decimal("200"), payment_date=date(2024, 3, 1))
    state = payable_state(order)   # PayableState(status=PAID, remaining=0, ...)
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import uuid4

from ledger_config.schema import DEFAULT_SETTINGS, LedgerSettings
from ledger_engines.money import ZERO, sum_amounts
from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.records import (
    LineItem,
    PayableKind,
    PayableOrder,
    PaymentEvent,
    RecordId,
)
from ledger_kernel.domain.values import to_decimal
from ledger_kernel.exceptions import (
    DuplicatePaymentError,
    NonPositiveAmountError,
    OverpaymentError,
    PayableOrderNotFoundError,
    PaymentNotFoundError,
)
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.payments")


class PaymentStatus(str, Enum):
    """Payment state of a payable order."""

    NOT_PAID = "NOT_PAID"
    PART_PAID = "PART_PAID"
    PAID = "PAID"


@dataclass(frozen=True)
class PayableState:
    """
    Derived, read-only view of a payable order.

    Contract:
        Built by ``payable_state``; every figure is recomputed from the
        order's line items and payments.
    """

    order_id: RecordId
    owner_id: RecordId
    kind: PayableKind
    total_amount: Decimal
    paid_amount: Decimal
    remaining: Decimal
    status: PaymentStatus
    payment_count: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "order_id": str(self.order_id),
            "owner_id": str(self.owner_id),
            "kind": self.kind.value,
            "total_amount": str(self.total_amount),
            "paid_amount": str(self.paid_amount),
            "remaining": str(self.remaining),
            "status": self.status.value,
            "payment_count": self.payment_count,
        }


@dataclass(frozen=True)
class OwnerAccountSummary:
    """Totals across every payable order of one supplier or worker."""

    owner_id: RecordId
    order_count: int
    total_amount: Decimal
    total_paid: Decimal
    total_remaining: Decimal
    not_paid_count: int
    part_paid_count: int
    paid_count: int

    @property
    def open_count(self) -> int:
        return self.not_paid_count + self.part_paid_count

    def as_dict(self) -> dict[str, Any]:
        return {
            "owner_id": str(self.owner_id),
            "order_count": self.order_count,
            "total_amount": str(self.total_amount),
            "total_paid": str(self.total_paid),
            "total_remaining": str(self.total_remaining),
            "not_paid_count": self.not_paid_count,
            "part_paid_count": self.part_paid_count,
            "paid_count": self.paid_count,
        }


def compute_status(total_amount: Any, paid_amount: Any) -> PaymentStatus:
    """
    Derive the tri-state payment status.

    PAID if paid >= total (exact or over-payment), PART_PAID if
    0 < paid < total, NOT_PAID if paid <= 0.
    """
    total = to_decimal(total_amount)
    paid = to_decimal(paid_amount)
    if paid >= total:
        return PaymentStatus.PAID
    if paid > 0:
        return PaymentStatus.PART_PAID
    return PaymentStatus.NOT_PAID


def paid_amount(order: PayableOrder) -> Decimal:
    """Sum of every payment linked to the order."""
    return sum_amounts(p.amount for p in order.payments)


def remaining(order: PayableOrder) -> Decimal:
    """``max(0, total - paid)``; never negative."""
    return max(ZERO, order.total_amount - paid_amount(order))


def order_status(order: PayableOrder) -> PaymentStatus:
    return compute_status(order.total_amount, paid_amount(order))


def payable_state(order: PayableOrder) -> PayableState:
    """Build the derived view of one order."""
    paid = paid_amount(order)
    return PayableState(
        order_id=order.id,
        owner_id=order.owner_id,
        kind=order.kind,
        total_amount=order.total_amount,
        paid_amount=paid,
        remaining=max(ZERO, order.total_amount - paid),
        status=compute_status(order.total_amount, paid),
        payment_count=len(order.payments),
    )


def build_payable(
    order_id: RecordId,
    owner_id: RecordId,
    order_date: date,
    items: Sequence[LineItem],
    *,
    kind: PayableKind = PayableKind.SUPPLIER_ORDER,
    notes: str = "",
) -> PayableOrder:
    """Create an unpaid order whose total is the sum of its line totals."""
    return PayableOrder(
        id=order_id,
        owner_id=owner_id,
        date=order_date,
        kind=kind,
        items=tuple(items),
        notes=notes,
    )


@traced_engine(
    "payments", "1.0",
    fingerprint_fields=("amount", "payment_date", "payment_id"),
    entity_field="order",
)
def add_payment(
    order: PayableOrder,
    amount: Any,
    *,
    payment_date: date,
    payment_id: RecordId | None = None,
    method: str | None = None,
    notes: str | None = None,
    settings: LedgerSettings = DEFAULT_SETTINGS,
) -> PayableOrder:
    """
    Record a payment against ``order`` and return the updated order.

    Overpayment is accepted by default and simply yields PAID; with
    ``settings.allow_overpayment`` disabled, an amount larger than the
    remaining balance is rejected.

    Raises:
        NonPositiveAmountError: If amount <= 0.
        DuplicatePaymentError: If ``payment_id`` is already on the order.
        OverpaymentError: If the policy forbids overpaying.
    """
    value = to_decimal(amount)
    if value <= 0:
        logger.warning("payment_rejected_non_positive", extra={
            "order_id": str(order.id),
            "amount": str(value),
        })
        raise NonPositiveAmountError("amount", value)

    if payment_id is not None and any(p.id == payment_id for p in order.payments):
        raise DuplicatePaymentError(str(payment_id), str(order.id))

    outstanding = remaining(order)
    if not settings.allow_overpayment and value > outstanding:
        logger.warning("payment_rejected_overpayment", extra={
            "order_id": str(order.id),
            "amount": str(value),
            "remaining": str(outstanding),
        })
        raise OverpaymentError(str(order.id), value, outstanding)

    payment = PaymentEvent(
        id=payment_id if payment_id is not None else str(uuid4()),
        payable_order_id=order.id,
        date=payment_date,
        amount=value,
        method=method,
        notes=notes,
    )
    updated = replace(order, payments=order.payments + (payment,))

    logger.info("payment_added", extra={
        "order_id": str(order.id),
        "payment_id": str(payment.id),
        "amount": str(value),
        "status": order_status(updated).value,
    })
    return updated


@traced_engine("payments", "1.0", fingerprint_fields=("payment_id",), entity_field="order")
def remove_payment(order: PayableOrder, payment_id: RecordId) -> PayableOrder:
    """
    Drop one payment and return the updated order.

    Paid amount and status are re-derived from the remaining payments.

    Raises:
        PaymentNotFoundError: If the order holds no payment with that id.
    """
    kept = tuple(p for p in order.payments if p.id != payment_id)
    if len(kept) == len(order.payments):
        raise PaymentNotFoundError(payment_id, order_id=order.id)

    updated = replace(order, payments=kept)
    logger.info("payment_removed", extra={
        "order_id": str(order.id),
        "payment_id": str(payment_id),
        "status": order_status(updated).value,
    })
    return updated


def find_payable(orders: Iterable[PayableOrder], order_id: RecordId) -> PayableOrder:
    """Look up a payable order by id or raise PayableOrderNotFoundError."""
    for order in orders:
        if order.id == order_id:
            return order
    raise PayableOrderNotFoundError(order_id)


@traced_engine("payments", "1.0", fingerprint_fields=("owner_id",), entity_field="owner_id")
def summarize_owner(orders: Iterable[PayableOrder], owner_id: RecordId) -> OwnerAccountSummary:
    """Account totals and status counts for one supplier or worker."""
    states = [payable_state(o) for o in orders if o.owner_id == owner_id]
    counts = {status: 0 for status in PaymentStatus}
    for state in states:
        counts[state.status] += 1

    return OwnerAccountSummary(
        owner_id=owner_id,
        order_count=len(states),
        total_amount=sum_amounts(s.total_amount for s in states),
        total_paid=sum_amounts(s.paid_amount for s in states),
        total_remaining=sum_amounts(s.remaining for s in states),
        not_paid_count=counts[PaymentStatus.NOT_PAID],
        part_paid_count=counts[PaymentStatus.PART_PAID],
        paid_count=counts[PaymentStatus.PAID],
    )
