from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class Party(models.Model):
    """Contact details shared by customers and suppliers."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # Orders reference parties by this exact name
    name = models.CharField(max_length=200, unique=True)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.name = (self.name or '').strip()
        super().save(*args, **kwargs)


class Customer(Party):
    class Meta(Party.Meta):
        db_table = 'customers'


class Supplier(Party):
    class Meta(Party.Meta):
        db_table = 'suppliers'


class FuelKind(models.TextChoices):
    PETROL = 'petrol', 'Petrol'
    HI_OCTANE = 'hi-octane', 'Hi-Octane'
    DIESEL = 'diesel', 'Diesel'
    MOBILE_OIL = 'mobile oil', 'Mobile Oil'


class ProductUnit(models.TextChoices):
    LITRE = 'litre', 'Litre'
    UNIT = 'unit', 'Unit'


class Product(models.Model):
    """Catalog entry with a reference rate. Orders keep their own rate."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=20, choices=FuelKind.choices, unique=True)
    description = models.TextField(blank=True)
    base_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    unit = models.CharField(
        max_length=10,
        choices=ProductUnit.choices,
        default=ProductUnit.LITRE
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        ordering = ['name']

    def __str__(self):
        return self.get_name_display()


PARTY_MODELS = {
    'customer': Customer,
    'supplier': Supplier,
}
