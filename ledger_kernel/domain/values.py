"""
Values -- Immutable, self-validating domain value objects.

Responsibility:
    Provides the small value types the engines derive from raw records:
    DateRange (optional, inclusive reporting window) and SalaryCycle (the
    pay period an allowance belongs to), together with the boundary
    coercions every record uses for dates and numbers.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by records and by every engine. No outward dependencies
    except ledger_kernel.exceptions.

Invariants enforced:
    - Decimal-only arithmetic: numbers are converted through ``str()``,
      never ``Decimal(float)``, so 0.1 stays 0.1.
    - A DateRange never has start after end.
    - A SalaryCycle never ends before it starts.

Failure modes:
    - InvalidDateRangeError on a reversed DateRange.
    - ValueError on values that cannot be read as a number or a date.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from ledger_kernel.exceptions import InvalidDateRangeError

MONEY_DECIMAL_PLACES = 2


def to_decimal(value: Any) -> Decimal:
    """
    Convert a boundary value (API JSON number, string, int) to Decimal.

    Floats are routed through ``str()`` so the shortest repr is used
    (``0.1`` becomes ``Decimal("0.1")``, not its binary expansion).

    Raises:
        ValueError: If the value cannot be converted or is NaN / Infinity.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"Invalid number: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Non-finite number: {value!r}")
    return result


def round_money(value: Decimal, decimal_places: int = MONEY_DECIMAL_PLACES) -> Decimal:
    """
    Round a value to ``decimal_places`` using ROUND_HALF_UP.

    This is the only sanctioned rounding function for amounts and
    quantities; the engines' ``round2`` delegates here.
    """
    quantum = Decimal(1).scaleb(-decimal_places)
    return to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def as_date(value: date | datetime | str) -> date:
    """
    Parse a date from a record field (date, datetime or ISO string).

    ISO timestamps such as ``2024-03-10T08:15:00.000Z`` keep only their
    calendar date.

    Raises:
        ValueError: If ``value`` is not a valid date representation.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Cannot parse date from {value!r}")


@dataclass(frozen=True, slots=True)
class DateRange:
    """
    Optional, inclusive date window used by every filtered view.

    Contract:
        Either bound may be None, meaning "unbounded on that side".
        Both None means "no filter".
    Guarantees:
        - Immutable and hashable.
        - start <= end whenever both are set.
    """

    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        if self.start is not None:
            object.__setattr__(self, "start", as_date(self.start))
        if self.end is not None:
            object.__setattr__(self, "end", as_date(self.end))
        if self.start is not None and self.end is not None and self.start > self.end:
            raise InvalidDateRangeError(self.start, self.end)

    @classmethod
    def of(
        cls,
        start: date | datetime | str | None = None,
        end: date | datetime | str | None = None,
    ) -> DateRange:
        """Factory accepting ISO strings or dates for either bound."""
        return cls(start=start, end=end)

    @property
    def is_unbounded(self) -> bool:
        """True when neither bound is set."""
        return self.start is None and self.end is None

    def contains(self, value: date | datetime | str) -> bool:
        """Inclusive membership test on both ends."""
        day = as_date(value)
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    def __str__(self) -> str:
        start = self.start.isoformat() if self.start else "..."
        end = self.end.isoformat() if self.end else "..."
        return f"[{start}, {end}]"


@dataclass(frozen=True, slots=True)
class SalaryCycle:
    """
    Pay period for one employee, inclusive on both ends.

    Derived from the hire-date day of month; never stored.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidDateRangeError(self.start, self.end)

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end - self.start).days + 1

    @property
    def next_start(self) -> date:
        return self.end + timedelta(days=1)

    def contains(self, value: date | datetime | str) -> bool:
        day = as_date(value)
        return self.start <= day <= self.end

    def as_range(self) -> DateRange:
        return DateRange(start=self.start, end=self.end)

    def as_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}
