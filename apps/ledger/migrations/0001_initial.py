# Generated manually for the fuel ledger

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


PRODUCT_CHOICES = [
    ('petrol', 'Petrol'),
    ('hi-octane', 'Hi-Octane'),
    ('diesel', 'Diesel'),
    ('mobile oil', 'Mobile Oil'),
    ('other', 'Other'),
]

STATUS_CHOICES = [
    ('unpaid', 'Unpaid'),
    ('partial', 'Partial'),
    ('paid', 'Paid'),
]


def order_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('product', models.CharField(choices=PRODUCT_CHOICES, max_length=20)),
        ('liters', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[MinValueValidator(Decimal('0.01'))])),
        ('rate_per_litre', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[MinValueValidator(Decimal('0.01'))])),
        ('total_amount', models.DecimalField(decimal_places=4, max_digits=16, validators=[MinValueValidator(Decimal('0'))])),
        ('paid_amount', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=16)),
        ('payment_status', models.CharField(choices=STATUS_CHOICES, default='unpaid', max_length=10)),
        ('notes', models.TextField(blank=True)),
        ('date', models.DateTimeField(default=django.utils.timezone.now)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='CustomerSale',
            fields=order_fields() + [
                ('customer_name', models.CharField(max_length=200)),
                ('image_url', models.CharField(blank=True, max_length=500)),
            ],
            options={
                'db_table': 'customer_sales',
                'ordering': ['-date', '-created_at'],
                'abstract': False,
                'indexes': [
                    models.Index(fields=['customer_name', 'payment_status', 'date'], name='sale_party_status_date_idx'),
                    models.Index(fields=['date'], name='sale_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SupplierPurchase',
            fields=order_fields() + [
                ('supplier_name', models.CharField(max_length=200)),
                ('deposit_slip_url', models.CharField(blank=True, max_length=500)),
            ],
            options={
                'db_table': 'supplier_purchases',
                'ordering': ['-date', '-created_at'],
                'abstract': False,
                'indexes': [
                    models.Index(fields=['supplier_name', 'payment_status', 'date'], name='purchase_party_status_date_idx'),
                    models.Index(fields=['date'], name='purchase_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('party_type', models.CharField(choices=[('customer', 'Customer'), ('supplier', 'Supplier')], max_length=10)),
                ('party_name', models.CharField(max_length=200)),
                ('amount', models.DecimalField(decimal_places=4, max_digits=16)),
                ('allocated_total', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=16)),
                ('remaining', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=16)),
                ('notes', models.TextField(blank=True)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('recorded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='recorded_payments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'payments',
                'ordering': ['-date', '-created_at'],
                'indexes': [
                    models.Index(fields=['party_type', 'party_name', 'date'], name='payment_party_date_idx'),
                    models.Index(fields=['date'], name='payment_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PaymentAllocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position', models.PositiveIntegerField()),
                ('order_id', models.UUIDField()),
                ('allocated', models.DecimalField(decimal_places=4, max_digits=16)),
                ('previous_paid', models.DecimalField(decimal_places=4, max_digits=16)),
                ('new_paid', models.DecimalField(decimal_places=4, max_digits=16)),
                ('status', models.CharField(choices=STATUS_CHOICES, max_length=10)),
                ('payment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='allocations', to='ledger.payment')),
            ],
            options={
                'db_table': 'payment_allocations',
                'ordering': ['payment', 'position'],
                'indexes': [
                    models.Index(fields=['order_id'], name='allocation_order_idx'),
                ],
                'unique_together': {('payment', 'position')},
            },
        ),
    ]
