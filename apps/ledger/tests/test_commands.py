import pytest
from io import StringIO
from django.core.management import call_command
from apps.accounts.models import User
from apps.ledger.models import CustomerSale, SupplierPurchase, Payment
from apps.ledger.services import get_balance_sheet


@pytest.mark.django_db
class TestCreateSampleData:

    def test_creates_consistent_ledger(self):
        call_command('create_sample_data', stdout=StringIO())

        assert User.objects.filter(role='accountant').exists()
        assert CustomerSale.objects.count() == 10
        assert SupplierPurchase.objects.count() == 4
        assert Payment.objects.exists()

        sheet = get_balance_sheet()
        assert sheet.net_receivable >= 0
        assert sheet.net_payable >= 0
        for sale in CustomerSale.objects.all():
            assert sale.paid_amount <= sale.total_amount

    def test_clear_is_repeatable(self):
        call_command('create_sample_data', stdout=StringIO())
        call_command('create_sample_data', '--clear', stdout=StringIO())

        assert CustomerSale.objects.count() == 10
