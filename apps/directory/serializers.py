from rest_framework import serializers
from .models import Customer, Supplier, Product, FuelKind, ProductUnit


# =============================================================================
# Input Serializers
# =============================================================================

class PartyInputSerializer(serializers.Serializer):
    """Create-or-get input for a customer or supplier."""

    name = serializers.CharField(max_length=200)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required')
        return value


class PartySearchSerializer(serializers.Serializer):
    """
    Validate query parameters for party search.

    Query Parameters:
        q (str): Part of the name, case-insensitive
    """

    q = serializers.CharField(required=False, allow_blank=True, default='')


class ProductInputSerializer(serializers.Serializer):
    name = serializers.ChoiceField(choices=FuelKind.choices)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    base_rate = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True
    )
    unit = serializers.ChoiceField(choices=ProductUnit.choices, default=ProductUnit.LITRE)


# =============================================================================
# Output Serializers
# =============================================================================

class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ['id', 'name', 'phone', 'email', 'address', 'created_at']
        read_only_fields = fields


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ['id', 'name', 'phone', 'email', 'address', 'created_at']
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ['id', 'name', 'description', 'base_rate', 'unit', 'created_at']
        read_only_fields = fields


PARTY_SERIALIZERS = {
    'customer': CustomerSerializer,
    'supplier': SupplierSerializer,
}
