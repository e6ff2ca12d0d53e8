"""
Balance aggregation tests.

Tests cover:
- Clamping of paid amounts on every read
- Grouping by party
- Purity of the summarizing functions
- Consistency with the order store after allocations
"""

import pytest
from datetime import timedelta
from decimal import Decimal
from types import SimpleNamespace
from django.utils import timezone

from apps.ledger.models import CustomerSale, SupplierPurchase
from apps.ledger.money import clamp_paid
from apps.ledger.services import (
    allocate_payment,
    summarize,
    group_by_party,
    global_balance,
    get_balance_sheet,
    get_party_reports,
    get_party_report,
)


def order(total, paid, party='A'):
    return SimpleNamespace(
        party_name=party,
        total_amount=Decimal(str(total)),
        paid_amount=Decimal(str(paid)),
    )


# =============================================================================
# Clamp
# =============================================================================

class TestClampPaid:

    def test_paid_within_total_is_unchanged(self):
        assert clamp_paid(Decimal('40'), Decimal('100')) == Decimal('40')

    def test_paid_above_total_is_capped(self):
        assert clamp_paid(Decimal('700'), Decimal('500')) == Decimal('500')

    def test_negative_paid_reads_as_zero(self):
        assert clamp_paid(Decimal('-5'), Decimal('100')) == Decimal('0')

    def test_missing_paid_reads_as_zero(self):
        assert clamp_paid(None, Decimal('100')) == Decimal('0')


# =============================================================================
# Pure Aggregation
# =============================================================================

class TestSummarize:

    def test_totals(self):
        summary = summarize([order(1000, 1000), order(500, 200)])

        assert summary.total_orders == 2
        assert summary.total_amount == Decimal('1500')
        assert summary.total_paid == Decimal('1200')
        assert summary.balance == Decimal('300')

    def test_overpaid_order_never_makes_balance_negative(self):
        summary = summarize([order(500, 700)])

        assert summary.total_paid == Decimal('500')
        assert summary.balance == Decimal('0')

    def test_overpaid_order_does_not_offset_other_debt(self):
        summary = summarize([order(500, 700), order(300, 0)])

        assert summary.balance == Decimal('300')

    def test_empty(self):
        summary = summarize([])

        assert summary.total_orders == 0
        assert summary.total_amount == Decimal('0')
        assert summary.balance == Decimal('0')

    def test_same_snapshot_gives_same_result(self):
        snapshot = [order(1000, 1200), order(250, 100), order(80, 0)]

        assert summarize(snapshot) == summarize(snapshot)

    def test_accepts_a_generator(self):
        summary = summarize(order(100, 50) for _ in range(3))

        assert summary.total_orders == 3
        assert summary.balance == Decimal('150')


class TestGroupByParty:

    def test_groups_in_first_seen_order(self):
        parties = group_by_party([
            order(100, 0, 'Zafar Oil'),
            order(200, 50, 'Al Noor'),
            order(300, 300, 'Zafar Oil'),
        ])

        assert list(parties) == ['Zafar Oil', 'Al Noor']
        zafar = parties['Zafar Oil']
        assert zafar.total_orders == 2
        assert zafar.total_amount == Decimal('400')
        assert zafar.total_paid == Decimal('300')
        assert zafar.balance == Decimal('100')
        assert len(zafar.orders) == 2

    def test_each_party_is_clamped_separately(self):
        parties = group_by_party([
            order(500, 900, 'A'),
            order(500, 0, 'B'),
        ])

        assert parties['A'].balance == Decimal('0')
        assert parties['B'].balance == Decimal('500')

    def test_idempotent(self):
        snapshot = [order(100, 120, 'A'), order(50, 10, 'B')]

        first = group_by_party(snapshot)
        second = group_by_party(snapshot)

        assert {k: v.balance for k, v in first.items()} == {k: v.balance for k, v in second.items()}


class TestGlobalBalance:

    def test_receivable_and_payable(self):
        sheet = global_balance(
            purchases=[order(2000, 500), order(100, 400)],
            sales=[order(1000, 250)],
        )

        assert sheet.net_payable == Decimal('1500')
        assert sheet.net_receivable == Decimal('750')
        assert sheet.purchases.total_paid == Decimal('600')


# =============================================================================
# Database Reports
# =============================================================================

@pytest.mark.django_db
class TestReports:

    def test_balance_sheet_clamps_stored_rows(self, make_sale, make_purchase):
        make_sale(500, paid=700)
        make_sale(300)
        make_purchase(1000, paid=400)

        sheet = get_balance_sheet()

        assert sheet.sales.total_paid == Decimal('500')
        assert sheet.net_receivable == Decimal('300')
        assert sheet.net_payable == Decimal('600')

    def test_party_reports_sorted_by_name(self, make_sale):
        make_sale(100, customer='Zafar Oil')
        make_sale(100, customer='Al Noor Transport')
        make_sale(50, customer='Zafar Oil')

        reports = get_party_reports('customer')

        assert list(reports) == ['Al Noor Transport', 'Zafar Oil']
        assert reports['Zafar Oil'].total_amount == Decimal('150')

    def test_party_report_lists_newest_first(self, make_purchase):
        old = make_purchase(100, days_ago=5)
        new = make_purchase(200, days_ago=1)

        report = get_party_report('supplier', 'PSO Depot')

        assert [o.id for o in report.orders] == [new.id, old.id]
        assert report.balance == Decimal('300')

    def test_unknown_party_gets_zero_report(self, db):
        report = get_party_report('customer', 'Nobody')

        assert report.party_name == 'Nobody'
        assert report.total_orders == 0
        assert report.balance == Decimal('0')
        assert report.orders == []

    def test_party_reports_date_range(self, make_sale):
        make_sale(1000, days_ago=20, customer='Zafar Oil')
        make_sale(500, paid=800, days_ago=2, customer='Al Noor Transport', status='paid')
        make_sale(300, days_ago=1, customer='Al Noor Transport')
        make_sale(900, days_ago=20, customer='Al Noor Transport')

        since = timezone.now().date() - timedelta(days=5)
        reports = get_party_reports('customer', date_from=since)

        # Zafar Oil has no orders in range and drops out
        assert list(reports) == ['Al Noor Transport']
        summary = reports['Al Noor Transport']
        assert summary.total_orders == 2
        assert summary.total_amount == Decimal('800')
        assert summary.total_paid == Decimal('500')
        assert summary.balance == Decimal('300')

    def test_party_reports_date_to(self, make_sale):
        make_sale(1000, days_ago=20, customer='Zafar Oil')
        make_sale(300, days_ago=1, customer='Al Noor Transport')

        until = timezone.now().date() - timedelta(days=10)
        reports = get_party_reports('customer', date_to=until)

        assert list(reports) == ['Zafar Oil']
        assert reports['Zafar Oil'].balance == Decimal('1000')

    def test_party_report_date_range(self, make_purchase):
        make_purchase(100, days_ago=30)
        inside = make_purchase(200, paid=250, days_ago=10, status='paid')
        make_purchase(400, days_ago=1)

        today = timezone.now().date()
        report = get_party_report(
            'supplier', 'PSO Depot',
            date_from=today - timedelta(days=15),
            date_to=today - timedelta(days=5),
        )

        assert [o.id for o in report.orders] == [inside.id]
        assert report.total_paid == Decimal('200')
        assert report.balance == Decimal('0')

    def test_party_report_empty_range(self, make_sale):
        make_sale(100, days_ago=30)

        report = get_party_report(
            'customer', 'Al Noor Transport',
            date_from=timezone.now().date() - timedelta(days=3),
        )

        assert report.total_orders == 0
        assert report.orders == []


@pytest.mark.django_db
class TestBalanceConsistency:
    """Balances always match totals minus clamped paid, read independently."""

    def test_after_sequence_of_allocations(self, make_sale):
        make_sale(1000, days_ago=30, customer='A')
        make_sale(500, days_ago=20, customer='A')
        make_sale(250, paid=400, days_ago=25, customer='A', status='partial')
        make_sale(800, days_ago=10, customer='B')

        allocate_payment(party_type='customer', party_name='A', amount=Decimal('700'))
        allocate_payment(party_type='customer', party_name='B', amount=Decimal('100'))
        allocate_payment(party_type='customer', party_name='A', amount=Decimal('900'))

        reports = get_party_reports('customer')
        for name, summary in reports.items():
            rows = CustomerSale.objects.filter(customer_name=name)
            expected = sum(r.total_amount for r in rows) - sum(
                min(r.paid_amount, r.total_amount) for r in rows
            )
            assert summary.balance == expected
            assert summary.balance >= 0

        sheet = get_balance_sheet()
        assert sheet.net_receivable == sum(s.balance for s in reports.values())

    def test_every_reported_paid_is_within_total(self, make_purchase):
        make_purchase(100, paid=150)
        make_purchase(100, paid=-20)
        make_purchase(100, paid=60)

        report = get_party_report('supplier', 'PSO Depot')

        for purchase in report.orders:
            assert 0 <= purchase.clamped_paid_amount <= purchase.total_amount
        assert SupplierPurchase.objects.count() == 3
