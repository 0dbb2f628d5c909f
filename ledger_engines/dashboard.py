"""
Module: ledger_engines.dashboard
Responsibility:
    Assemble the workshop dashboard: spending by category and payment
    method, income and net result, production output and losses, order
    counts and the low-stock alert list.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Composes reporting, production and stock; adds no rules of its own.

Invariants enforced:
    - Every money figure is an integer-cent sum.
    - Expenses, incomes and production entries honour ``date_range``;
      order counts and low-stock alerts describe the current state and
      ignore it.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from ledger_config.schema import DEFAULT_SETTINGS, LedgerSettings
from ledger_engines.money import sum_amounts
from ledger_engines.production import StepProgress, loss_rate, production_by_step
from ledger_engines.reporting import filter_in_range, share_of_total, sum_by_key, top_n
from ledger_engines.stock import low_stock_materials
from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.records import (
    DailyProduction,
    Expense,
    ExpenseCategory,
    Income,
    MaterialRecord,
    ProductionOrder,
    ProductionStatus,
    ProductionStep,
)
from ledger_kernel.domain.values import DateRange
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.dashboard")

UNSPECIFIED_METHOD = "unspecified"


@dataclass(frozen=True)
class DashboardSummary:
    """Everything the dashboard view renders."""

    total_expenses: Decimal
    expenses_by_category: dict[ExpenseCategory, Decimal]
    category_shares: dict[ExpenseCategory, Decimal]
    top_categories: tuple[tuple[ExpenseCategory, Decimal], ...]
    expenses_by_method: dict[str, Decimal]
    total_income: Decimal
    net_result: Decimal
    units_produced: int
    units_lost: int
    loss_rate: Decimal
    active_orders: int
    completed_orders: int
    production_by_step: dict[ProductionStep, StepProgress] = field(default_factory=dict)
    low_stock: tuple[MaterialRecord, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_expenses": str(self.total_expenses),
            "expenses_by_category": {
                c.value: str(v) for c, v in self.expenses_by_category.items()
            },
            "category_shares": {c.value: str(v) for c, v in self.category_shares.items()},
            "top_categories": [[c.value, str(v)] for c, v in self.top_categories],
            "expenses_by_method": {m: str(v) for m, v in self.expenses_by_method.items()},
            "total_income": str(self.total_income),
            "net_result": str(self.net_result),
            "units_produced": self.units_produced,
            "units_lost": self.units_lost,
            "loss_rate": str(self.loss_rate),
            "active_orders": self.active_orders,
            "completed_orders": self.completed_orders,
            "production_by_step": {
                step.value: p.as_dict() for step, p in self.production_by_step.items()
            },
            "low_stock": [
                {
                    "material_id": str(m.id),
                    "name": m.name,
                    "current_stock": str(m.current_stock),
                    "min_stock_alert": str(m.min_stock_alert),
                }
                for m in self.low_stock
            ],
        }


@traced_engine("dashboard", "1.0", fingerprint_fields=("date_range", "top"))
def build_dashboard(
    *,
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    orders: Sequence[ProductionOrder],
    entries: Iterable[DailyProduction],
    materials: Iterable[MaterialRecord],
    date_range: DateRange | None = None,
    top: int | None = None,
    settings: LedgerSettings = DEFAULT_SETTINGS,
) -> DashboardSummary:
    """
    Build the dashboard summary.

    Args:
        top: Number of categories to rank; defaults to ``settings.top_n``.
    """
    top = settings.top_n if top is None else top

    window_expenses = filter_in_range(expenses, date_range)
    window_incomes = filter_in_range(incomes, date_range)
    window_entries = filter_in_range(entries, date_range)

    by_category = sum_by_key(window_expenses, lambda e: e.category, lambda e: e.amount)
    by_method = sum_by_key(
        window_expenses,
        lambda e: e.payment_method or UNSPECIFIED_METHOD,
        lambda e: e.amount,
    )
    total_expenses = sum_amounts(e.amount for e in window_expenses)
    total_income = sum_amounts(i.amount for i in window_incomes)

    steps = production_by_step(window_entries)
    produced = sum(p.completed for p in steps.values())
    lost = sum(p.lost for p in steps.values())

    summary = DashboardSummary(
        total_expenses=total_expenses,
        expenses_by_category=by_category,
        category_shares=share_of_total(by_category),
        top_categories=tuple(top_n(by_category, top)),
        expenses_by_method=by_method,
        total_income=total_income,
        net_result=total_income - total_expenses,
        units_produced=produced,
        units_lost=lost,
        loss_rate=loss_rate(produced, lost),
        active_orders=sum(1 for o in orders if o.status is ProductionStatus.IN_PROGRESS),
        completed_orders=sum(1 for o in orders if o.status is ProductionStatus.FINISHED),
        production_by_step=steps,
        low_stock=tuple(low_stock_materials(materials)),
    )

    if summary.low_stock:
        logger.warning("low_stock_alert", extra={
            "material_ids": [str(m.id) for m in summary.low_stock],
        })
    logger.info("dashboard_built", extra={
        "total_expenses": str(summary.total_expenses),
        "total_income": str(summary.total_income),
        "net_result": str(summary.net_result),
    })
    return summary
