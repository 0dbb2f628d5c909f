"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Ledger errors are surfaced to a UI that must react differently to a rejected
payment and to a record that no longer exists. Parsing messages for that is
fragile, so:
  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        order = add_payment(order, amount, payment_date=today)
    except OverpaymentError as e:
        show_error(code=e.code, remaining=e.remaining)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerError (base)
    |
    +-- ValidationError
    |   +-- NonPositiveAmountError
    |   +-- NonPositiveQuantityError
    |   +-- NegativeValueError
    |   +-- NonIntegralValueError
    |   +-- OverpaymentError
    |   +-- PaymentOrderMismatchError
    |   +-- DuplicatePaymentError
    |   +-- InvalidDateRangeError
    |   +-- InvalidDayOfMonthError
    |
    +-- NotFoundError
        +-- MaterialNotFoundError
        +-- EmployeeNotFoundError
        +-- PayableOrderNotFoundError
        +-- PaymentNotFoundError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                     | When Raised
------------|--------------------------|---------------------------------------
Validation  | NON_POSITIVE_AMOUNT      | Payment/allowance/expense amount <= 0
            | NON_POSITIVE_QUANTITY    | Purchase/consumption quantity <= 0
            | NEGATIVE_VALUE           | Salary, stock alert or total below 0
            | NON_INTEGRAL_VALUE       | Unit count or order quantity not whole
            | OVERPAYMENT              | Payment exceeds remaining (strict mode)
            | PAYMENT_ORDER_MISMATCH   | Payment linked to a different order
            | DUPLICATE_PAYMENT        | Payment id already recorded on the order
            | INVALID_DATE_RANGE       | Range start after range end
            | INVALID_DAY_OF_MONTH     | Hire day outside 1..31
------------|--------------------------|---------------------------------------
Not found   | MATERIAL_NOT_FOUND       | Material id not in the collection
            | EMPLOYEE_NOT_FOUND       | Employee id not in the collection
            | PAYABLE_ORDER_NOT_FOUND  | Order/receipt id not in the collection
            | PAYMENT_NOT_FOUND        | Payment id not linked to the order

Division by zero is NOT an error: ratio helpers return 0 by construction.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_ERROR"


# Validation exceptions


class ValidationError(LedgerError):
    """A value passed to a ledger operation violates its contract."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}={value!r}: {reason}")


class NonPositiveAmountError(ValidationError):
    """Monetary amount must be strictly positive."""

    code: str = "NON_POSITIVE_AMOUNT"

    def __init__(self, field: str, value: Decimal):
        super().__init__(field, value, "amount must be greater than zero")


class NonPositiveQuantityError(ValidationError):
    """Stock quantity must be strictly positive."""

    code: str = "NON_POSITIVE_QUANTITY"

    def __init__(self, field: str, value: Decimal):
        super().__init__(field, value, "quantity must be greater than zero")


class NegativeValueError(ValidationError):
    """Value must be zero or greater."""

    code: str = "NEGATIVE_VALUE"

    def __init__(self, field: str, value: Decimal):
        super().__init__(field, value, "value cannot be negative")


class NonIntegralValueError(ValidationError):
    """Unit counts and order quantities must be whole numbers."""

    code: str = "NON_INTEGRAL_VALUE"

    def __init__(self, field: str, value: Decimal):
        super().__init__(field, value, "value must be a whole number")


class OverpaymentError(ValidationError):
    """
    Payment would push the paid amount above the order total.

    Only raised when the overpayment policy is disabled; the default
    policy accepts overpayment and reports the order as PAID.
    """

    code: str = "OVERPAYMENT"

    def __init__(self, order_id: str, amount: Decimal, remaining: Decimal):
        self.order_id = order_id
        self.amount = amount
        self.remaining = remaining
        super().__init__(
            "amount", amount, f"exceeds remaining {remaining} on order {order_id}"
        )


class PaymentOrderMismatchError(ValidationError):
    """Payment references a different payable order."""

    code: str = "PAYMENT_ORDER_MISMATCH"

    def __init__(self, payment_id: str, expected_order_id: str, actual_order_id: str):
        self.payment_id = payment_id
        self.expected_order_id = expected_order_id
        self.actual_order_id = actual_order_id
        super().__init__(
            "payable_order_id",
            actual_order_id,
            f"payment {payment_id} does not belong to order {expected_order_id}",
        )


class DuplicatePaymentError(ValidationError):
    """Payment id is already recorded on the order."""

    code: str = "DUPLICATE_PAYMENT"

    def __init__(self, payment_id: str, order_id: str):
        self.payment_id = payment_id
        self.order_id = order_id
        super().__init__(
            "payment_id", payment_id, f"already recorded on order {order_id}"
        )


class InvalidDateRangeError(ValidationError):
    """Date range start is after its end."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, start: Any, end: Any):
        self.start = start
        self.end = end
        super().__init__("date_range", (start, end), "start is after end")


class InvalidDayOfMonthError(ValidationError):
    """Day of month outside 1..31."""

    code: str = "INVALID_DAY_OF_MONTH"

    def __init__(self, day: int):
        super().__init__("hire_day", day, "day of month must be within 1..31")


# Not-found exceptions


class NotFoundError(LedgerError):
    """A referenced entity is missing from the supplied collection."""

    code: str = "NOT_FOUND"
    entity_type: str = "entity"

    def __init__(self, entity_id: Any):
        self.entity_id = entity_id
        super().__init__(f"{self.entity_type} not found: {entity_id}")


class MaterialNotFoundError(NotFoundError):
    """Raw material with given ID was not found."""

    code: str = "MATERIAL_NOT_FOUND"
    entity_type: str = "Material"


class EmployeeNotFoundError(NotFoundError):
    """Employee with given ID was not found."""

    code: str = "EMPLOYEE_NOT_FOUND"
    entity_type: str = "Employee"


class PayableOrderNotFoundError(NotFoundError):
    """Supplier order or piece receipt with given ID was not found."""

    code: str = "PAYABLE_ORDER_NOT_FOUND"
    entity_type: str = "Payable order"


class PaymentNotFoundError(NotFoundError):
    """Payment is not linked to the given payable order."""

    code: str = "PAYMENT_NOT_FOUND"
    entity_type: str = "Payment"

    def __init__(self, entity_id: Any, order_id: Any = None):
        self.order_id = order_id
        super().__init__(entity_id)
