"""
Property-based tests for the ledger engines.

Invariants checked on generated inputs:
- Cent sums are exact and order independent
- Percentages never divide by zero
- Payment status agrees with paid / total; remaining is never negative
- Add then remove of a payment restores the order
- Salary cycles contain their reference date and tile the calendar
- Unfiltered stock replay equals the sum of movements
- Top-N rankings are sorted and bounded
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from ledger_engines.money import percentage, sum_amounts, to_cents
from ledger_engines.payments import (
    PaymentStatus,
    add_payment,
    compute_status,
    order_status,
    paid_amount,
    remaining,
    remove_payment,
)
from ledger_engines.reporting import sum_by_key, top_n
from ledger_engines.salary import cycle_for
from ledger_engines.stock import effective_stock
from ledger_kernel.domain.records import (
    ConsumptionEvent,
    MaterialRecord,
    PayableOrder,
    PurchaseEvent,
)

amounts = st.decimals(min_value=Decimal("0.01"), max_value=Decimal("999999.99"), places=2)
quantities = st.decimals(min_value=Decimal("0.001"), max_value=Decimal("9999.999"), places=3)
days = st.dates(min_value=date(2000, 1, 1), max_value=date(2099, 12, 31))


class TestMoneyProperties:
    @given(st.lists(amounts, max_size=50))
    def test_sum_equals_cent_sum(self, values):
        assert to_cents(sum_amounts(values)) == sum(to_cents(v) for v in values)

    @given(st.lists(amounts, max_size=30))
    def test_sum_order_independent(self, values):
        assert sum_amounts(values) == sum_amounts(list(reversed(values)))

    @given(amounts, st.one_of(st.just(Decimal("0")), amounts))
    def test_percentage_is_finite(self, part, whole):
        result = percentage(part, whole)
        assert result.is_finite()
        if whole == 0:
            assert result == 0


class TestPaymentProperties:
    @given(amounts, st.lists(amounts, max_size=8))
    @settings(max_examples=50)
    def test_status_and_remaining(self, total, payments):
        order = PayableOrder(id=1, owner_id=1, date=date(2024, 1, 1), total_amount=total)
        for i, amount in enumerate(payments):
            order = add_payment(order, amount, payment_date=date(2024, 1, 2), payment_id=f"p{i}")

        paid = paid_amount(order)
        assert remaining(order) >= 0
        assert order_status(order) is compute_status(total, paid)
        if paid >= total:
            assert order_status(order) is PaymentStatus.PAID

    @given(amounts, amounts)
    @settings(max_examples=50)
    def test_add_remove_restores(self, total, amount):
        order = PayableOrder(id=1, owner_id=1, date=date(2024, 1, 1), total_amount=total)
        added = add_payment(order, amount, payment_date=date(2024, 1, 2), payment_id="p")
        assert remove_payment(added, "p") == order


class TestSalaryProperties:
    @given(st.integers(min_value=1, max_value=31), days)
    def test_reference_inside_cycle(self, hire_day, reference):
        cycle = cycle_for(hire_day, reference)
        assert cycle.contains(reference)
        assert 28 <= cycle.days <= 31

    @given(st.integers(min_value=1, max_value=31), days)
    def test_next_cycle_starts_after_end(self, hire_day, reference):
        cycle = cycle_for(hire_day, reference)
        following = cycle_for(hire_day, cycle.next_start)
        assert following.start == cycle.end + timedelta(days=1)


class TestStockProperties:
    @given(st.lists(quantities, min_size=1, max_size=10), st.lists(quantities, max_size=10))
    @settings(max_examples=50)
    def test_replay_equals_net_movement(self, bought, used):
        purchases = [
            PurchaseEvent(id=i, material_id=1, date=date(2024, 1, 1), quantity=q, unit_price=1)
            for i, q in enumerate(bought)
        ]
        consumptions = [
            ConsumptionEvent(id=i, material_id=1, date=date(2024, 1, 2), quantity=q)
            for i, q in enumerate(used)
        ]
        net = sum(bought, Decimal("0")) - sum(used, Decimal("0"))
        material = MaterialRecord(id=1, name="Oak", unit="KG", current_stock=net)

        assert effective_stock(material, purchases, consumptions) == material.current_stock


class TestRankingProperties:
    @given(st.dictionaries(st.text(min_size=1, max_size=5), amounts, max_size=20), st.integers(0, 25))
    def test_top_n_sorted_and_bounded(self, sums, n):
        ranked = top_n(sums, n)
        values = [v for _, v in ranked]

        assert len(ranked) == min(n, len(sums))
        assert values == sorted(values, reverse=True)

    @given(st.lists(st.tuples(st.sampled_from("abc"), amounts), max_size=30))
    def test_grouped_sums_add_up(self, rows):
        grouped = sum_by_key(rows, lambda r: r[0], lambda r: r[1])
        assert sum_amounts(grouped.values()) == sum_amounts(v for _, v in rows)
