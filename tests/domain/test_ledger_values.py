"""Tests for date ranges, salary cycles and boundary coercion (ledger_kernel/domain/values.py)."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledger_kernel.domain.values import (
    DateRange,
    SalaryCycle,
    as_date,
    round_money,
    to_decimal,
)
from ledger_kernel.exceptions import InvalidDateRangeError


class TestToDecimal:
    def test_float_uses_shortest_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int_and_str(self):
        assert to_decimal(5) == Decimal("5")
        assert to_decimal("12.30") == Decimal("12.30")

    def test_bool_rejected(self):
        with pytest.raises(ValueError):
            to_decimal(True)

    def test_garbage_rejected(self):
        with pytest.raises(ValueError):
            to_decimal("abc")

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "-inf", Decimal("Infinity"), Decimal("NaN")])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValueError, match="Non-finite"):
            to_decimal(value)


class TestRoundMoney:
    def test_half_up(self):
        assert round_money(Decimal("0.125")) == Decimal("0.13")
        assert round_money(Decimal("-0.125")) == Decimal("-0.13")

    def test_places(self):
        assert round_money(Decimal("1.23456"), 3) == Decimal("1.235")


class TestAsDate:
    def test_iso_string(self):
        assert as_date("2024-02-29") == date(2024, 2, 29)

    def test_iso_timestamp(self):
        assert as_date("2024-02-29T23:59:59.000Z") == date(2024, 2, 29)

    def test_datetime(self):
        assert as_date(datetime(2024, 1, 2, 13, 0)) == date(2024, 1, 2)

    def test_rejects_other_types(self):
        with pytest.raises(ValueError):
            as_date(20240101)


class TestDateRange:
    def test_inclusive_bounds(self):
        window = DateRange.of("2024-01-01", "2024-01-31")

        assert window.contains("2024-01-01")
        assert window.contains(date(2024, 1, 31))
        assert not window.contains("2024-02-01")

    def test_open_start(self):
        window = DateRange(end=date(2024, 1, 31))
        assert window.contains(date(1999, 1, 1))
        assert not window.contains(date(2024, 2, 1))

    def test_unbounded(self):
        window = DateRange()
        assert window.is_unbounded
        assert window.contains("2030-12-31")

    def test_start_after_end_rejected(self):
        with pytest.raises(InvalidDateRangeError):
            DateRange.of("2024-02-01", "2024-01-01")

    def test_str(self):
        assert str(DateRange(start=date(2024, 1, 1))) == "[2024-01-01, ...]"

    def test_of_matches_constructor(self):
        built = DateRange.of("2024-03-01T09:00:00Z", date(2024, 3, 31))
        assert built == DateRange("2024-03-01", "2024-03-31")
        assert built.start == date(2024, 3, 1)
        assert DateRange.of() == DateRange()

    def test_hashable(self):
        assert hash(DateRange.of("2024-01-01")) == hash(DateRange(start=date(2024, 1, 1)))


class TestSalaryCycle:
    def test_days_and_next_start(self):
        cycle = SalaryCycle(start=date(2024, 1, 31), end=date(2024, 2, 28))

        assert cycle.days == 29
        assert cycle.next_start == date(2024, 2, 29)
        assert cycle.contains("2024-02-28")
        assert not cycle.contains("2024-02-29")

    def test_as_dict(self):
        cycle = SalaryCycle(start=date(2024, 1, 15), end=date(2024, 2, 14))
        assert cycle.as_dict() == {"start": "2024-01-15", "end": "2024-02-14"}
        assert cycle.as_range() == DateRange.of("2024-01-15", "2024-02-14")

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidDateRangeError):
            SalaryCycle(start=date(2024, 2, 1), end=date(2024, 1, 31))
