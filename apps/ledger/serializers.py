from decimal import ROUND_HALF_UP
from rest_framework import serializers
from apps.accounts.serializers import UserMinimalSerializer
from .models import (
    CustomerSale,
    SupplierPurchase,
    Payment,
    PaymentAllocation,
    PartyType,
    ProductKind,
)


def money_field(**kwargs):
    """Decimal output rounded to cents."""
    return serializers.DecimalField(
        max_digits=16,
        decimal_places=2,
        rounding=ROUND_HALF_UP,
        read_only=True,
        **kwargs
    )


# =============================================================================
# Input Serializers
# =============================================================================

class OrderInputSerializer(serializers.Serializer):
    """
    Validate input for recording a sale or purchase.

    Fields:
        product (str): petrol, hi-octane, diesel, mobile oil or other
        liters (decimal): Required unless product is 'other'
        rate_per_litre (decimal): Required unless product is 'other'
        total_amount (decimal): Required only for 'other'
        paid_amount (decimal): Paid up front, 0 <= paid <= total
        notes (str): Optional
        date (datetime): Optional, defaults to now
    """

    product = serializers.ChoiceField(choices=ProductKind.choices)
    liters = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    rate_per_litre = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    total_amount = serializers.DecimalField(
        max_digits=16, decimal_places=4, required=False, allow_null=True
    )
    paid_amount = serializers.DecimalField(
        max_digits=16, decimal_places=4, required=False, default=0, min_value=0
    )
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    date = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        """Check the fields each product kind needs."""
        if attrs['product'] == ProductKind.OTHER:
            total = attrs.get('total_amount')
            if total is None or total <= 0:
                raise serializers.ValidationError({
                    'total_amount': "Total amount is required for 'other' products"
                })
        else:
            errors = {}
            for field in ('liters', 'rate_per_litre'):
                value = attrs.get(field)
                if value is None or value <= 0:
                    errors[field] = 'Must be a positive number'
            if errors:
                raise serializers.ValidationError(errors)
        return attrs


class SaleInputSerializer(OrderInputSerializer):
    customer_name = serializers.CharField(max_length=200)
    image_url = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')

    def validate_customer_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Customer name is required')
        return value


class PurchaseInputSerializer(OrderInputSerializer):
    supplier_name = serializers.CharField(max_length=200)
    deposit_slip_url = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')

    def validate_supplier_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Supplier name is required')
        return value


class OrderPaymentUpdateSerializer(serializers.Serializer):
    """Input for the manual paid-amount edit."""

    paid_amount = serializers.DecimalField(max_digits=16, decimal_places=4)
    notes = serializers.CharField(required=False, allow_blank=True)


class PaymentInputSerializer(serializers.Serializer):
    """
    Input for recording a lump-sum payment.

    ``amount`` is range-checked by the allocator so that a zero or negative
    amount gets the same ``{"error": ...}`` response as other rejections.
    """

    amount = serializers.DecimalField(max_digits=16, decimal_places=4)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class PaymentFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for payment filtering.

    Query Parameters:
        party_type (str): customer or supplier
        party_name (str): Exact party name
        date_from (date): Payments on or after this date
        date_to (date): Payments on or before this date
    """

    party_type = serializers.ChoiceField(choices=PartyType.choices, required=False)
    party_name = serializers.CharField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        """Validate date range."""
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to:
            if date_from > date_to:
                raise serializers.ValidationError({
                    'date_to': 'End date must be after start date'
                })

        return attrs


class ReportFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for party reports.

    Query Parameters:
        date_from (date): Orders on or after this date
        date_to (date): Orders on or before this date
    """

    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, attrs):
        date_from = attrs.get('date_from')
        date_to = attrs.get('date_to')

        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError({
                'date_to': 'End date must be after start date'
            })

        return attrs


# =============================================================================
# Output Serializers
# =============================================================================

class OrderSerializer(serializers.ModelSerializer):
    """
    Base output for sales and purchases.

    ``paid_amount`` and ``payment_status`` are the clamped values, so a row
    stored with more paid than owed reads as exactly paid.
    """

    total_amount = money_field()
    paid_amount = money_field(source='clamped_paid_amount')
    balance = money_field(source='outstanding_balance')
    payment_status = serializers.CharField(source='effective_status', read_only=True)

    common_fields = [
        'id',
        'product',
        'liters',
        'rate_per_litre',
        'total_amount',
        'paid_amount',
        'balance',
        'payment_status',
        'notes',
        'date',
        'created_at',
        'updated_at',
    ]


class SaleSerializer(OrderSerializer):
    class Meta:
        model = CustomerSale
        fields = ['customer_name', 'image_url'] + OrderSerializer.common_fields
        read_only_fields = fields


class PurchaseSerializer(OrderSerializer):
    class Meta:
        model = SupplierPurchase
        fields = ['supplier_name', 'deposit_slip_url'] + OrderSerializer.common_fields
        read_only_fields = fields


class PartyOrderSerializer(serializers.Serializer):
    """One order inside a party report."""

    id = serializers.UUIDField(read_only=True)
    product = serializers.CharField(read_only=True)
    liters = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    rate_per_litre = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    total_amount = money_field()
    paid_amount = money_field(source='clamped_paid_amount')
    balance = money_field(source='outstanding_balance')
    payment_status = serializers.CharField(source='effective_status', read_only=True)
    date = serializers.DateTimeField(read_only=True)
    notes = serializers.CharField(read_only=True)
    attachment_url = serializers.CharField(read_only=True)


class PartySummarySerializer(serializers.Serializer):
    party_name = serializers.CharField(read_only=True)
    total_orders = serializers.IntegerField(read_only=True)
    total_amount = money_field()
    total_paid = money_field()
    balance = money_field()


class PartyReportSerializer(PartySummarySerializer):
    orders = PartyOrderSerializer(many=True, read_only=True)


class BalanceSummarySerializer(serializers.Serializer):
    total_orders = serializers.IntegerField(read_only=True)
    total_amount = money_field()
    total_paid = money_field()
    balance = money_field()


class BalanceSheetSerializer(serializers.Serializer):
    purchases = BalanceSummarySerializer(read_only=True)
    sales = BalanceSummarySerializer(read_only=True)
    net_receivable = money_field()
    net_payable = money_field()


class AllocationSerializer(serializers.Serializer):
    """One order touched by a payment (a receipt row or an allocation step)."""

    order_id = serializers.UUIDField(read_only=True)
    allocated = money_field()
    previous_paid = money_field()
    new_paid = money_field()
    status = serializers.CharField(read_only=True)


class PaymentAllocationSerializer(serializers.ModelSerializer):
    allocated = money_field()
    previous_paid = money_field()
    new_paid = money_field()

    class Meta:
        model = PaymentAllocation
        fields = ['position', 'order_id', 'allocated', 'previous_paid', 'new_paid', 'status']
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    """Payment receipt with its allocations in payment order."""

    amount = money_field()
    allocated_total = money_field()
    remaining = money_field()
    allocations = PaymentAllocationSerializer(many=True, read_only=True)
    recorded_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id',
            'party_type',
            'party_name',
            'amount',
            'allocated_total',
            'remaining',
            'notes',
            'date',
            'recorded_by',
            'allocations',
            'created_at',
        ]
        read_only_fields = fields


class AllocationResultSerializer(serializers.Serializer):
    """Response body of the payment endpoint."""

    warning = serializers.BooleanField(source='is_partial', read_only=True)
    message = serializers.CharField(read_only=True)
    allocated_orders = serializers.SerializerMethodField()
    allocated_total = money_field()
    remaining = money_field()
    allocation_results = AllocationSerializer(source='allocations', many=True, read_only=True)
    payment = PaymentSerializer(read_only=True)

    def get_allocated_orders(self, obj) -> int:
        return len(obj.allocations)
