from django.contrib import admin
from django.utils.html import format_html
from .models import (
    CustomerSale,
    SupplierPurchase,
    Payment,
    PaymentAllocation,
    PaymentStatus,
)
from .money import quantize_money


STATUS_COLORS = {
    PaymentStatus.UNPAID: ('#E5C49A', '#2C1810'),
    PaymentStatus.PARTIAL: ('#A47449', 'white'),
    PaymentStatus.PAID: ('#6B8E5E', 'white'),
}


def status_badge(status, label):
    bg, fg = STATUS_COLORS.get(status, ('#ccc', '#666'))
    return format_html(
        '<span style="background: {}; color: {}; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        bg, fg, label
    )


class OrderAdmin(admin.ModelAdmin):
    """
    Shared admin for sales and purchases.

    Paid amount and status columns show the clamped values; the stored
    ``paid_amount`` stays editable for corrections.
    """

    list_filter = [
        'payment_status',
        'product',
        'date',
    ]

    readonly_fields = [
        'total_amount',
        'created_at',
        'updated_at',
    ]

    date_hierarchy = 'date'
    ordering = ['-date', '-created_at']

    def get_paid_display(self, obj):
        """Clamped paid amount out of total."""
        return f"{quantize_money(obj.clamped_paid_amount)} / {quantize_money(obj.total_amount)}"
    get_paid_display.short_description = 'Paid'

    def get_balance_display(self, obj):
        return quantize_money(obj.outstanding_balance)
    get_balance_display.short_description = 'Balance'

    def payment_status_badge(self, obj):
        """Display effective payment status as colored badge."""
        status = obj.effective_status
        return status_badge(status, PaymentStatus(status).label)
    payment_status_badge.short_description = 'Status'
    payment_status_badge.admin_order_field = 'payment_status'


@admin.register(CustomerSale)
class CustomerSaleAdmin(OrderAdmin):
    list_display = [
        'customer_name',
        'product',
        'liters',
        'get_paid_display',
        'get_balance_display',
        'payment_status_badge',
        'date',
    ]

    search_fields = [
        'customer_name',
        'notes',
    ]

    fieldsets = (
        ('Sale', {
            'fields': ('customer_name', 'product', 'liters', 'rate_per_litre', 'date')
        }),
        ('Financial Details', {
            'fields': ('total_amount', 'paid_amount', 'payment_status')
        }),
        ('Notes', {
            'fields': ('notes', 'image_url'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )


@admin.register(SupplierPurchase)
class SupplierPurchaseAdmin(OrderAdmin):
    list_display = [
        'supplier_name',
        'product',
        'liters',
        'get_paid_display',
        'get_balance_display',
        'payment_status_badge',
        'date',
    ]

    search_fields = [
        'supplier_name',
        'notes',
    ]

    fieldsets = (
        ('Purchase', {
            'fields': ('supplier_name', 'product', 'liters', 'rate_per_litre', 'date')
        }),
        ('Financial Details', {
            'fields': ('total_amount', 'paid_amount', 'payment_status')
        }),
        ('Notes', {
            'fields': ('notes', 'deposit_slip_url'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )


class PaymentAllocationInline(admin.TabularInline):
    """Allocations of a receipt, in payment order."""
    model = PaymentAllocation
    extra = 0
    fields = ['position', 'order_id', 'allocated', 'previous_paid', 'new_paid', 'status']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        """Allocations are written by the allocator only."""
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Read-only view of payment receipts."""

    list_display = [
        'party_name',
        'party_type',
        'amount',
        'allocated_total',
        'remaining_badge',
        'recorded_by',
        'date',
    ]

    list_filter = [
        'party_type',
        'date',
    ]

    search_fields = [
        'party_name',
        'notes',
        'recorded_by__email',
    ]

    inlines = [PaymentAllocationInline]
    date_hierarchy = 'date'
    ordering = ['-date', '-created_at']

    def remaining_badge(self, obj):
        """Highlight receipts where part of the payment was not applied."""
        if obj.is_partial:
            return format_html(
                '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">{}</span>',
                quantize_money(obj.remaining)
            )
        return '-'
    remaining_badge.short_description = 'Unallocated'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        """Receipts are permanent; corrections go through the manual payment edit."""
        return False
