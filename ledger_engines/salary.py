"""
Module: ledger_engines.salary
Responsibility:
    Compute the monthly salary cycle an employee is in, anchored to the
    day of month they were hired, and account the allowances (salary
    advances) taken inside that cycle.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    No clock access: the reference date is always an explicit argument.

Invariants enforced:
    - The anchor day is clamped to each month's length (a 31st anchor
      falls on Feb 28/29, Apr 30, ...), so no month can raise.
    - Cycles tile the calendar: a cycle ends the day before the next
      cycle starts, with both ends inclusive.
    - Remaining salary may go negative (an overdrawn employee is a valid,
      reportable state).

Failure modes:
    - InvalidDayOfMonthError for an anchor outside 1..31.
    - EmployeeNotFoundError from ``find_employee`` for unknown ids.

Usage:
    from ledger_engines.salary import cycle_for, salary_info

    cycle = cycle_for(31, date(2024, 2, 15))
    # SalaryCycle(start=date(2024, 1, 31), end=date(2024, 2, 28))
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from ledger_engines.money import sum_amounts
from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.records import (
    AllowanceEvent,
    Employee,
    EmployeeStatus,
    RecordId,
)
from ledger_kernel.domain.values import SalaryCycle
from ledger_kernel.exceptions import EmployeeNotFoundError, InvalidDayOfMonthError
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.salary")


@dataclass(frozen=True)
class EmployeeSalaryInfo:
    """Salary position of one employee for the cycle containing a date."""

    employee_id: RecordId
    employee_name: str
    monthly_salary: Decimal
    cycle: SalaryCycle
    allowances: tuple[AllowanceEvent, ...]
    total_allowances: Decimal
    remaining_salary: Decimal

    @property
    def is_overdrawn(self) -> bool:
        return self.remaining_salary < 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "employee_id": str(self.employee_id),
            "employee_name": self.employee_name,
            "monthly_salary": str(self.monthly_salary),
            "salary_cycle": self.cycle.as_dict(),
            "total_allowances": str(self.total_allowances),
            "remaining_salary": str(self.remaining_salary),
            "allowance_ids": [str(a.id) for a in self.allowances],
        }


def _clamped(year: int, month: int, day: int) -> date:
    """``day`` of the given month, pulled back to the month's last day."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def cycle_for(hire_day: int, reference_date: date) -> SalaryCycle:
    """
    Salary cycle containing ``reference_date`` for an anchor day.

    The cycle starts on the (clamped) anchor day of the reference month
    when the reference day has reached it, otherwise on the anchor day of
    the previous month.  It ends the day before the following start.

    Raises:
        InvalidDayOfMonthError: If hire_day is outside 1..31.
    """
    if not 1 <= hire_day <= 31:
        raise InvalidDayOfMonthError(hire_day)

    this_month_anchor = _clamped(reference_date.year, reference_date.month, hire_day)
    if reference_date >= this_month_anchor:
        start = this_month_anchor
    else:
        year, month = _shift_month(reference_date.year, reference_date.month, -1)
        start = _clamped(year, month, hire_day)

    next_year, next_month = _shift_month(start.year, start.month, 1)
    next_start = _clamped(next_year, next_month, hire_day)
    return SalaryCycle(start=start, end=next_start - timedelta(days=1))


def cycle_for_employee(employee: Employee, reference_date: date) -> SalaryCycle:
    return cycle_for(employee.hire_date.day, reference_date)


def allowances_in_cycle(
    allowances: Iterable[AllowanceEvent],
    cycle: SalaryCycle,
) -> list[AllowanceEvent]:
    """Allowances dated inside the cycle, both ends inclusive."""
    return [a for a in allowances if cycle.start <= a.date <= cycle.end]


def remaining_salary(employee: Employee, allowances: Iterable[AllowanceEvent]) -> Decimal:
    """Monthly salary minus the given allowances; may be negative."""
    return employee.monthly_salary - sum_amounts(a.amount for a in allowances)


def find_employee(employees: Iterable[Employee], employee_id: RecordId) -> Employee:
    """Look up an employee by id or raise EmployeeNotFoundError."""
    for employee in employees:
        if employee.id == employee_id:
            return employee
    raise EmployeeNotFoundError(employee_id)


@traced_engine(
    "salary", "1.0",
    fingerprint_fields=("employee", "reference_date"),
    entity_field="employee",
)
def salary_info(
    employee: Employee,
    allowances: Iterable[AllowanceEvent],
    reference_date: date,
) -> EmployeeSalaryInfo:
    """
    Salary position of ``employee`` for the cycle containing
    ``reference_date``.  Allowances of other employees are ignored.
    """
    cycle = cycle_for_employee(employee, reference_date)
    own = [a for a in allowances if a.employee_id == employee.id]
    in_cycle = tuple(sorted(allowances_in_cycle(own, cycle), key=lambda a: a.date))
    total = sum_amounts(a.amount for a in in_cycle)
    left = employee.monthly_salary - total

    if left < 0:
        logger.warning("salary_overdrawn", extra={
            "employee_id": str(employee.id),
            "cycle_start": cycle.start.isoformat(),
            "cycle_end": cycle.end.isoformat(),
            "remaining_salary": str(left),
        })

    return EmployeeSalaryInfo(
        employee_id=employee.id,
        employee_name=employee.full_name,
        monthly_salary=employee.monthly_salary,
        cycle=cycle,
        allowances=in_cycle,
        total_allowances=total,
        remaining_salary=left,
    )


def salary_summary(
    employees: Iterable[Employee],
    allowances: Iterable[AllowanceEvent],
    reference_date: date,
) -> list[EmployeeSalaryInfo]:
    """Salary info for every ACTIVE employee, in input order."""
    allowance_list = list(allowances)
    return [
        salary_info(employee, allowance_list, reference_date)
        for employee in employees
        if employee.status is EmployeeStatus.ACTIVE
    ]
