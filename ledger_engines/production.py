"""
Module: ledger_engines.production
Responsibility:
    Turn daily production entries (units entered, completed and lost at a
    workshop step) into per-step progress, per-order step status and the
    production statistics shown on the production and dashboard views.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Steps are always reported in workflow order (CUTTING .. PACKAGING).
    - Rates (completion, efficiency, loss) are zero-safe percentages.
    - Entries only count toward statistics when their order passes the
      order filters.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from ledger_engines.money import percentage
from ledger_engines.reporting import filter_in_range, group_by_key
from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.records import (
    DailyProduction,
    ProductionOrder,
    ProductionStatus,
    ProductionStep,
    RecordId,
)
from ledger_kernel.domain.values import DateRange
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.production")


class StepStatus(str, Enum):
    """Progress of one order at one step."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class StepProgress:
    """Unit totals at one step."""

    entered: int = 0
    completed: int = 0
    lost: int = 0
    record_count: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "entered": self.entered,
            "completed": self.completed,
            "lost": self.lost,
            "record_count": self.record_count,
        }


@dataclass(frozen=True)
class ModelProduction:
    """Ordered / completed / in-progress units for one furniture model."""

    model_id: RecordId
    orders_count: int
    total_ordered: int
    total_completed: int
    in_progress: int


@dataclass(frozen=True)
class ProductionStatistics:
    """Production KPIs over filtered orders and entries."""

    total_orders: int
    active_orders: int
    completed_orders: int
    units_ordered: int
    units_completed: int
    units_lost: int
    completion_rate: Decimal
    units_entered: int
    units_produced: int
    efficiency: Decimal
    production_records: int
    by_model: tuple[ModelProduction, ...] = ()
    by_step: dict[ProductionStep, StepProgress] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_orders": self.total_orders,
            "active_orders": self.active_orders,
            "completed_orders": self.completed_orders,
            "units_ordered": self.units_ordered,
            "units_completed": self.units_completed,
            "units_lost": self.units_lost,
            "completion_rate": str(self.completion_rate),
            "units_entered": self.units_entered,
            "units_produced": self.units_produced,
            "efficiency": str(self.efficiency),
            "production_records": self.production_records,
            "by_model": [
                {
                    "model_id": str(m.model_id),
                    "orders_count": m.orders_count,
                    "total_ordered": m.total_ordered,
                    "total_completed": m.total_completed,
                    "in_progress": m.in_progress,
                }
                for m in self.by_model
            ],
            "by_step": {step.value: p.as_dict() for step, p in self.by_step.items()},
        }


def _accumulate(entries: Iterable[DailyProduction]) -> StepProgress:
    entered = completed = lost = count = 0
    for entry in entries:
        entered += entry.quantity_entered
        completed += entry.quantity_completed
        lost += entry.quantity_lost
        count += 1
    return StepProgress(entered=entered, completed=completed, lost=lost, record_count=count)


def step_progress(
    entries: Iterable[DailyProduction],
    order_id: RecordId,
    step: ProductionStep,
) -> StepProgress | None:
    """Totals for one order at one step; None when nothing was recorded."""
    matching = [e for e in entries if e.order_id == order_id and e.step is step]
    if not matching:
        return None
    return _accumulate(matching)


def step_status(
    entries: Iterable[DailyProduction],
    order: ProductionOrder,
    step: ProductionStep,
) -> StepStatus:
    """COMPLETED once completed units reach the order quantity."""
    progress = step_progress(entries, order.id, step)
    if progress is None:
        return StepStatus.PENDING
    if progress.completed >= order.quantity:
        return StepStatus.COMPLETED
    if progress.entered > 0:
        return StepStatus.IN_PROGRESS
    return StepStatus.PENDING


def production_by_step(entries: Iterable[DailyProduction]) -> dict[ProductionStep, StepProgress]:
    """Totals per step, every step present, in workflow order."""
    groups = group_by_key(entries, lambda e: e.step)
    return {step: _accumulate(groups.get(step, ())) for step in ProductionStep}


def loss_rate(completed: int, lost: int) -> Decimal:
    """Lost units as a percentage of everything that left a step."""
    return percentage(lost, completed + lost)


def _by_model(orders: Sequence[ProductionOrder]) -> tuple[ModelProduction, ...]:
    rows = []
    for model_id, model_orders in group_by_key(orders, lambda o: o.model_id).items():
        rows.append(ModelProduction(
            model_id=model_id,
            orders_count=len(model_orders),
            total_ordered=sum(o.quantity for o in model_orders),
            total_completed=sum(
                o.quantity for o in model_orders if o.status is ProductionStatus.FINISHED
            ),
            in_progress=sum(
                o.quantity for o in model_orders if o.status is ProductionStatus.IN_PROGRESS
            ),
        ))
    return tuple(rows)


@traced_engine("production", "1.0", fingerprint_fields=("date_range", "status"))
def production_statistics(
    orders: Iterable[ProductionOrder],
    entries: Iterable[DailyProduction],
    *,
    date_range: DateRange | None = None,
    status: ProductionStatus | None = None,
) -> ProductionStatistics:
    """
    Production KPIs for orders started inside ``date_range`` (and matching
    ``status`` when given) and their entries dated inside the same window.

    Completion rate = finished units / ordered units; efficiency =
    completed units / entered units.  Both are 0 when the base is 0.
    """
    filtered_orders = [
        o for o in filter_in_range(orders, date_range, lambda o: o.start_date)
        if status is None or o.status is status
    ]
    order_ids = {o.id for o in filtered_orders}
    filtered_entries = [
        e for e in filter_in_range(entries, date_range)
        if e.order_id in order_ids
    ]

    units_ordered = sum(o.quantity for o in filtered_orders)
    units_completed = sum(
        o.quantity for o in filtered_orders if o.status is ProductionStatus.FINISHED
    )
    totals = _accumulate(filtered_entries)

    stats = ProductionStatistics(
        total_orders=len(filtered_orders),
        active_orders=sum(1 for o in filtered_orders if o.status is ProductionStatus.IN_PROGRESS),
        completed_orders=sum(1 for o in filtered_orders if o.status is ProductionStatus.FINISHED),
        units_ordered=units_ordered,
        units_completed=units_completed,
        units_lost=totals.lost,
        completion_rate=percentage(units_completed, units_ordered),
        units_entered=totals.entered,
        units_produced=totals.completed,
        efficiency=percentage(totals.completed, totals.entered),
        production_records=totals.record_count,
        by_model=_by_model(filtered_orders),
        by_step=production_by_step(filtered_entries),
    )
    logger.info("production_statistics_computed", extra={
        "total_orders": stats.total_orders,
        "production_records": stats.production_records,
        "completion_rate": str(stats.completion_rate),
    })
    return stats
