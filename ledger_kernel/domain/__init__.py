"""
Pure domain layer.

This module contains the immutable records and value objects consumed by
the ledger engines, with NO dependencies on:
- Persistence
- Network transport
- Time/clock
- I/O

All domain objects are immutable and deterministic.
"""

from ledger_kernel.domain.records import (
    AllowanceEvent,
    ConsumptionEvent,
    DailyProduction,
    Employee,
    EmployeeStatus,
    Expense,
    ExpenseCategory,
    Income,
    IncomeSource,
    LineItem,
    MaterialRecord,
    MaterialUnit,
    PayableKind,
    PayableOrder,
    PaymentEvent,
    ProductionOrder,
    ProductionStatus,
    ProductionStep,
    PurchaseEvent,
    RecordId,
)
from ledger_kernel.domain.values import (
    MONEY_DECIMAL_PLACES,
    DateRange,
    SalaryCycle,
    as_date,
    round_money,
    to_decimal,
)

__all__ = [
    "MONEY_DECIMAL_PLACES",
    "AllowanceEvent",
    "ConsumptionEvent",
    "DailyProduction",
    "DateRange",
    "Employee",
    "EmployeeStatus",
    "Expense",
    "ExpenseCategory",
    "Income",
    "IncomeSource",
    "LineItem",
    "MaterialRecord",
    "MaterialUnit",
    "PayableKind",
    "PayableOrder",
    "PaymentEvent",
    "ProductionOrder",
    "ProductionStatus",
    "ProductionStep",
    "PurchaseEvent",
    "RecordId",
    "SalaryCycle",
    "as_date",
    "round_money",
    "to_decimal",
]
