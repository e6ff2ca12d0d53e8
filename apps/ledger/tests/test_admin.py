"""
Admin tests: receipts stay read-only and money columns are clamped.
"""

import pytest
from decimal import Decimal
from django.contrib import admin
from django.test import Client, RequestFactory
from django.urls import reverse

from apps.ledger.admin import CustomerSaleAdmin, PaymentAdmin, PaymentAllocationInline
from apps.ledger.models import CustomerSale, Payment
from apps.ledger.services import allocate_payment


@pytest.fixture
def admin_request(owner):
    request = RequestFactory().get('/admin/')
    owner.is_staff = True
    owner.is_superuser = True
    request.user = owner
    return request


@pytest.fixture
def receipt(make_sale):
    make_sale(1000)
    return allocate_payment(
        party_type='customer',
        party_name='Al Noor Transport',
        amount=Decimal('400'),
    ).payment


# =============================================================================
# Payment Receipts
# =============================================================================

@pytest.mark.django_db
class TestPaymentAdmin:

    def test_receipts_are_read_only(self, admin_request, receipt):
        model_admin = PaymentAdmin(Payment, admin.site)

        assert model_admin.has_add_permission(admin_request) is False
        assert model_admin.has_change_permission(admin_request, receipt) is False
        assert model_admin.has_delete_permission(admin_request) is False
        assert model_admin.has_delete_permission(admin_request, receipt) is False

    def test_delete_action_not_offered(self, admin_request, receipt):
        model_admin = PaymentAdmin(Payment, admin.site)

        assert 'delete_selected' not in model_admin.get_actions(admin_request)

    def test_allocations_cannot_be_removed(self, admin_request, receipt):
        inline = PaymentAllocationInline(Payment, admin.site)

        assert inline.has_add_permission(admin_request, receipt) is False
        assert inline.has_delete_permission(admin_request, receipt) is False

    def test_delete_view_forbidden(self, owner, receipt):
        owner.is_staff = True
        owner.is_superuser = True
        owner.save()
        client = Client()
        client.force_login(owner)

        response = client.post(
            reverse('admin:ledger_payment_delete', args=[receipt.pk]),
            {'post': 'yes'},
        )

        assert response.status_code == 403
        assert Payment.objects.filter(pk=receipt.pk).exists()


# =============================================================================
# Order Columns
# =============================================================================

@pytest.mark.django_db
class TestOrderAdmin:

    def test_overpaid_row_shown_clamped(self, make_sale):
        sale = make_sale(Decimal('500'), paid=Decimal('700'), status='paid')
        model_admin = CustomerSaleAdmin(CustomerSale, admin.site)

        assert model_admin.get_paid_display(sale) == '500.00 / 500.00'
        assert model_admin.get_balance_display(sale) == Decimal('0.00')
