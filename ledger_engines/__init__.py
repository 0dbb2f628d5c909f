"""
Module: ledger_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the import surface for callers such as
    API handlers and report builders.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ledger_kernel and ledger_config (and sibling engines).

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Reference dates are explicit parameters supplied by the caller.
    - Decimal-only arithmetic: money and quantities are ``Decimal``.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Top-level engine calls are traced via ``@traced_engine`` (see
    ``ledger_engines.tracer``), emitting LEDGER_ENGINE_TRACE log records.

Usage:
    from ledger_engines import effective_stock, add_payment, salary_info
    from ledger_engines.dashboard import build_dashboard
"""

from ledger_kernel.logging_config import get_logger

logger = get_logger("engines")

from ledger_engines.dashboard import DashboardSummary, build_dashboard
from ledger_engines.money import (
    format_currency,
    from_cents,
    percentage,
    round2,
    safe_ratio,
    sum_amounts,
    sum_quantities,
    to_cents,
)
from ledger_engines.payments import (
    OwnerAccountSummary,
    PayableState,
    PaymentStatus,
    add_payment,
    build_payable,
    compute_status,
    find_payable,
    order_status,
    paid_amount,
    payable_state,
    remaining,
    remove_payment,
    summarize_owner,
)
from ledger_engines.production import (
    ModelProduction,
    ProductionStatistics,
    StepProgress,
    StepStatus,
    loss_rate,
    production_by_step,
    production_statistics,
    step_progress,
    step_status,
)
from ledger_engines.reporting import (
    count_by_key,
    day_bucket,
    filter_in_range,
    group_by_key,
    in_range,
    month_bucket,
    share_of_total,
    sum_by_key,
    top_n,
)
from ledger_engines.salary import (
    EmployeeSalaryInfo,
    allowances_in_cycle,
    cycle_for,
    cycle_for_employee,
    find_employee,
    remaining_salary,
    salary_info,
    salary_summary,
)
from ledger_engines.stock import (
    StockReconciliation,
    StockSnapshot,
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
from ledger_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # money
    "format_currency",
    "from_cents",
    "percentage",
    "round2",
    "safe_ratio",
    "sum_amounts",
    "sum_quantities",
    "to_cents",
    # stock
    "StockReconciliation",
    "StockSnapshot",
    "StockStatus",
    "average_unit_price",
    "consumed_value",
    "effective_stock",
    "find_material",
    "low_stock_materials",
    "reconcile_stock",
    "stock_report",
    "stock_snapshot",
    "stock_status",
    "valuation",
    # payments
    "OwnerAccountSummary",
    "PayableState",
    "PaymentStatus",
    "add_payment",
    "build_payable",
    "compute_status",
    "find_payable",
    "order_status",
    "paid_amount",
    "payable_state",
    "remaining",
    "remove_payment",
    "summarize_owner",
    # salary
    "EmployeeSalaryInfo",
    "allowances_in_cycle",
    "cycle_for",
    "cycle_for_employee",
    "find_employee",
    "remaining_salary",
    "salary_info",
    "salary_summary",
    # reporting
    "count_by_key",
    "day_bucket",
    "filter_in_range",
    "group_by_key",
    "in_range",
    "month_bucket",
    "share_of_total",
    "sum_by_key",
    "top_n",
    # production
    "ModelProduction",
    "ProductionStatistics",
    "StepProgress",
    "StepStatus",
    "loss_rate",
    "production_by_step",
    "production_statistics",
    "step_progress",
    "step_status",
    # dashboard
    "DashboardSummary",
    "build_dashboard",
    # tracer
    "compute_input_fingerprint",
    "traced_engine",
]

logger.debug("engines_package_loaded", extra={
    "module_count": 7,
    "modules": ["money", "stock", "payments", "salary", "reporting", "production", "dashboard"],
})
