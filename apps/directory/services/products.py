"""Product catalog."""

from django.db import IntegrityError, transaction

from ..models import Product, ProductUnit
from .exceptions import DuplicateProductError


@transaction.atomic
def create_product(
    *,
    name: str,
    description: str = '',
    base_rate=None,
    unit: str = ProductUnit.LITRE
) -> Product:
    """
    Add a fuel product to the catalog.

    Raises:
        DuplicateProductError: If the product already exists
    """
    if Product.objects.filter(name=name).exists():
        raise DuplicateProductError("Product exists")

    try:
        with transaction.atomic():
            return Product.objects.create(
                name=name,
                description=description or '',
                base_rate=base_rate,
                unit=unit or ProductUnit.LITRE,
            )
    except IntegrityError:
        raise DuplicateProductError("Product exists")
