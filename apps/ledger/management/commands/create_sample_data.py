"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data
    python manage.py create_sample_data --clear

This creates:
- 4 users, one per role
- Fuel products with reference rates
- Customers and suppliers
- Sales and purchases spread over the last month
- A few lump-sum payments applied through the allocator
"""

from datetime import timedelta
from decimal import Decimal
import random

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.roles import Role
from apps.directory.models import Customer, Supplier, Product
from apps.ledger.models import CustomerSale, SupplierPurchase, Payment
from apps.ledger.services import create_sale, create_purchase, allocate_payment


RATES = {
    'petrol': Decimal('265.45'),
    'hi-octane': Decimal('299.50'),
    'diesel': Decimal('283.10'),
    'mobile oil': Decimal('950.00'),
}

CUSTOMERS = ['Al Noor Transport', 'Madina Goods', 'Zafar Oil Traders', 'City Rickshaw Union']
SUPPLIERS = ['PSO Depot', 'Shell Terminal']


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        self.create_products()
        self.create_orders()
        self.create_payments(users['accountant'])

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts (password: password123):')
        for role, user in users.items():
            self.stdout.write(f'  {user.email} ({role})')

    def clear_data(self):
        """Clear all ledger and directory data."""
        Payment.objects.all().delete()
        CustomerSale.objects.all().delete()
        SupplierPurchase.objects.all().delete()
        Customer.objects.all().delete()
        Supplier.objects.all().delete()
        Product.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()

    def create_users(self):
        """Create one user per role."""
        self.stdout.write('  Creating users...')

        users = {}
        for role in Role:
            user, _ = User.objects.get_or_create(
                email=f'{role.value}@example.com',
                defaults={'name': f'Sample {role.label}', 'role': role},
            )
            user.set_password('password123')
            user.save()
            users[role.value] = user
        return users

    def create_products(self):
        self.stdout.write('  Creating products...')

        for name, rate in RATES.items():
            Product.objects.get_or_create(
                name=name,
                defaults={
                    'base_rate': rate,
                    'unit': 'unit' if name == 'mobile oil' else 'litre',
                },
            )

    def create_orders(self):
        """Sales and purchases over the last 30 days, some paid up front."""
        self.stdout.write('  Creating sales and purchases...')

        now = timezone.now()
        for days_ago in range(30, 0, -3):
            product = random.choice(list(RATES))
            liters = Decimal(random.randrange(20, 400))
            total = liters * RATES[product]
            create_sale(
                customer_name=random.choice(CUSTOMERS),
                product=product,
                liters=liters,
                rate_per_litre=RATES[product],
                paid_amount=random.choice([Decimal('0'), (total / 2).quantize(Decimal('1')), total]),
                date=now - timedelta(days=days_ago),
            )

        for days_ago in (28, 21, 14, 7):
            liters = Decimal(random.randrange(2000, 6000, 500))
            create_purchase(
                supplier_name=random.choice(SUPPLIERS),
                product='diesel',
                liters=liters,
                rate_per_litre=RATES['diesel'] - Decimal('8'),
                date=now - timedelta(days=days_ago),
                notes='Tanker delivery',
            )

    def create_payments(self, recorded_by):
        """Apply one lump-sum payment per party that owes money."""
        self.stdout.write('  Allocating payments...')

        for name in CUSTOMERS:
            if CustomerSale.outstanding_for(name).exists():
                allocate_payment(
                    party_type='customer',
                    party_name=name,
                    amount=Decimal('25000'),
                    notes='Cash at counter',
                    recorded_by=recorded_by,
                )

        for name in SUPPLIERS:
            if SupplierPurchase.outstanding_for(name).exists():
                allocate_payment(
                    party_type='supplier',
                    party_name=name,
                    amount=Decimal('500000'),
                    notes='Bank transfer',
                    recorded_by=recorded_by,
                )
