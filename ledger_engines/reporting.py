"""
Module: ledger_engines.reporting
Responsibility:
    Date-range filtering and grouping primitives for dashboard and summary
    views: "by category", "by step", "by day/month" groupings, grouped sums,
    shares of a total and top-N rankings.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Range checks are inclusive on both ends; an unset bound never
      filters.
    - Groupings preserve first-encountered key order.
    - Rankings are stable: equal values keep first-encountered order.
    - Empty inputs produce empty results, never errors.

Usage:
    from ledger_engines.reporting import sum_by_key, top_n

    totals = sum_by_key(expenses, lambda e: e.category, lambda e: e.amount)
    top_n(totals, 3)
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from operator import attrgetter
from typing import Any, TypeVar

from ledger_engines.money import percentage, sum_amounts
from ledger_kernel.domain.values import DateRange, as_date

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

DateLike = date | datetime | str

_record_date = attrgetter("date")


def in_range(value: DateLike, start: DateLike | None = None, end: DateLike | None = None) -> bool:
    """
    True if ``value`` is on/after ``start`` and on/before ``end``.

    Unset bounds do not filter; with both unset this is always True.
    """
    day = as_date(value)
    if start is not None and day < as_date(start):
        return False
    if end is not None and day > as_date(end):
        return False
    return True


def filter_in_range(
    records: Iterable[T],
    date_range: DateRange | None,
    date_fn: Callable[[T], DateLike] = _record_date,
) -> list[T]:
    """Records whose date falls inside ``date_range`` (all when None)."""
    if date_range is None or date_range.is_unbounded:
        return list(records)
    return [r for r in records if date_range.contains(date_fn(r))]


def group_by_key(records: Iterable[T], key_fn: Callable[[T], K]) -> dict[K, list[T]]:
    """Group records by key, preserving first-encountered key order."""
    groups: dict[K, list[T]] = {}
    for record in records:
        groups.setdefault(key_fn(record), []).append(record)
    return groups


def sum_by_key(
    records: Iterable[T],
    key_fn: Callable[[T], K],
    value_fn: Callable[[T], Any],
) -> dict[K, Decimal]:
    """Integer-cent sums per key. Empty input gives an empty dict."""
    return {
        key: sum_amounts(value_fn(r) for r in group)
        for key, group in group_by_key(records, key_fn).items()
    }


def count_by_key(records: Iterable[T], key_fn: Callable[[T], K]) -> dict[K, int]:
    return {key: len(group) for key, group in group_by_key(records, key_fn).items()}


def top_n(grouped_sums: Mapping[K, Decimal], n: int) -> list[tuple[K, Decimal]]:
    """
    The ``n`` largest entries, descending by value.

    ``sorted`` is stable, so ties keep first-encountered key order.
    """
    if n <= 0:
        return []
    ranked = sorted(grouped_sums.items(), key=lambda kv: kv[1], reverse=True)
    return ranked[:n]


def share_of_total(grouped_sums: Mapping[K, Decimal]) -> dict[K, Decimal]:
    """Each key's percentage of the grand total (all 0 when the total is 0)."""
    total = sum_amounts(grouped_sums.values())
    return {key: percentage(value, total) for key, value in grouped_sums.items()}


def day_bucket(record: Any) -> date:
    """Key function: the record's calendar day."""
    return as_date(record.date)


def month_bucket(record: Any) -> str:
    """Key function: the record's ``YYYY-MM`` month."""
    day = as_date(record.date)
    return f"{day.year:04d}-{day.month:02d}"
