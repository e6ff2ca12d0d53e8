from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid

from .money import ZERO, clamp_paid, to_decimal


class PaymentStatus(models.TextChoices):
    UNPAID = 'unpaid', 'Unpaid'
    PARTIAL = 'partial', 'Partial'
    PAID = 'paid', 'Paid'


OUTSTANDING_STATUSES = [PaymentStatus.UNPAID, PaymentStatus.PARTIAL]


class ProductKind(models.TextChoices):
    PETROL = 'petrol', 'Petrol'
    HI_OCTANE = 'hi-octane', 'Hi-Octane'
    DIESEL = 'diesel', 'Diesel'
    MOBILE_OIL = 'mobile oil', 'Mobile Oil'
    OTHER = 'other', 'Other'


class PartyType(models.TextChoices):
    CUSTOMER = 'customer', 'Customer'
    SUPPLIER = 'supplier', 'Supplier'


def derive_status(paid_amount, total_amount):
    """Payment status implied by a paid amount against an order total."""
    paid = to_decimal(paid_amount)
    if paid >= to_decimal(total_amount):
        return PaymentStatus.PAID
    if paid > ZERO:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


class LedgerOrder(models.Model):
    """
    Common fields for sales and purchases.

    Money is stored with four decimal places so ``liters * rate_per_litre``
    is kept exactly; rounding to cents happens only when presenting.
    """

    # Name of the concrete model's party column
    PARTY_FIELD = None
    PARTY_TYPE = None

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.CharField(max_length=20, choices=ProductKind.choices)
    liters = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    rate_per_litre = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.01'))]
    )

    # Financial details
    total_amount = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        validators=[MinValueValidator(Decimal('0'))]
    )
    paid_amount = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        default=Decimal('0')
    )
    payment_status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID
    )

    notes = models.TextField(blank=True)
    date = models.DateTimeField(default=timezone.now)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.party_name} - {self.product} - {self.total_amount} ({self.payment_status})"

    @property
    def party_name(self):
        return getattr(self, self.PARTY_FIELD)

    @property
    def clamped_paid_amount(self):
        return clamp_paid(self.paid_amount, self.total_amount)

    @property
    def outstanding_balance(self):
        return to_decimal(self.total_amount) - self.clamped_paid_amount

    @property
    def effective_status(self):
        """Status consistent with the clamped paid amount."""
        return derive_status(self.clamped_paid_amount, self.total_amount)

    @classmethod
    def for_party(cls, party_name):
        return cls.objects.filter(**{cls.PARTY_FIELD: party_name})

    @classmethod
    def outstanding_for(cls, party_name):
        """Unpaid and partial orders of a party, oldest debt first."""
        return cls.for_party(party_name).filter(
            payment_status__in=OUTSTANDING_STATUSES
        ).order_by('date', 'created_at')


class CustomerSale(LedgerOrder):
    """Fuel sold to a customer."""

    PARTY_FIELD = 'customer_name'
    PARTY_TYPE = PartyType.CUSTOMER

    customer_name = models.CharField(max_length=200)
    image_url = models.CharField(max_length=500, blank=True)

    class Meta(LedgerOrder.Meta):
        db_table = 'customer_sales'
        indexes = [
            models.Index(fields=['customer_name', 'payment_status', 'date'], name='sale_party_status_date_idx'),
            models.Index(fields=['date'], name='sale_date_idx'),
        ]

    @property
    def attachment_url(self):
        return self.image_url


class SupplierPurchase(LedgerOrder):
    """Fuel bought from a supplier."""

    PARTY_FIELD = 'supplier_name'
    PARTY_TYPE = PartyType.SUPPLIER

    supplier_name = models.CharField(max_length=200)
    deposit_slip_url = models.CharField(max_length=500, blank=True)

    class Meta(LedgerOrder.Meta):
        db_table = 'supplier_purchases'
        indexes = [
            models.Index(fields=['supplier_name', 'payment_status', 'date'], name='purchase_party_status_date_idx'),
            models.Index(fields=['date'], name='purchase_date_idx'),
        ]

    @property
    def attachment_url(self):
        return self.deposit_slip_url


ORDER_MODELS = {
    PartyType.CUSTOMER: CustomerSale,
    PartyType.SUPPLIER: SupplierPurchase,
}


class Payment(models.Model):
    """
    Receipt of one lump-sum payment and how it was spread over orders.

    Written once by the allocator and never updated.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    party_type = models.CharField(max_length=10, choices=PartyType.choices)
    party_name = models.CharField(max_length=200)

    # Lump sum as submitted
    amount = models.DecimalField(max_digits=16, decimal_places=4)
    allocated_total = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        default=Decimal('0')
    )
    # Left over when the payment exceeded the outstanding debt
    remaining = models.DecimalField(
        max_digits=16,
        decimal_places=4,
        default=Decimal('0')
    )

    notes = models.TextField(blank=True)
    date = models.DateTimeField(default=timezone.now)

    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recorded_payments'
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['party_type', 'party_name', 'date'], name='payment_party_date_idx'),
            models.Index(fields=['date'], name='payment_date_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.get_party_type_display()} {self.party_name}: {self.amount}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Payment receipts cannot be modified")
        super().save(*args, **kwargs)

    @property
    def is_partial(self):
        return self.remaining > ZERO


class PaymentAllocation(models.Model):
    """One order touched by a payment, in the order it was paid."""

    payment = models.ForeignKey(
        Payment,
        on_delete=models.CASCADE,
        related_name='allocations'
    )
    position = models.PositiveIntegerField()

    # Sale or purchase id depending on payment.party_type
    order_id = models.UUIDField()

    allocated = models.DecimalField(max_digits=16, decimal_places=4)
    previous_paid = models.DecimalField(max_digits=16, decimal_places=4)
    new_paid = models.DecimalField(max_digits=16, decimal_places=4)
    status = models.CharField(max_length=10, choices=PaymentStatus.choices)

    class Meta:
        db_table = 'payment_allocations'
        unique_together = [['payment', 'position']]
        indexes = [
            models.Index(fields=['order_id'], name='allocation_order_idx'),
        ]
        ordering = ['payment', 'position']

    def __str__(self):
        return f"{self.order_id}: +{self.allocated} ({self.status})"
