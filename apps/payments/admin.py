# ==========================================
# apps/payments/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Payment, PaymentStatus


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin interface for Payments.

    Status and refund fields are read-only here; they only change through
    the status and refund services so the transition rules always apply.
    """

    list_display = [
        'order_id',
        'get_customer',
        'amount',
        'currency',
        'payment_method',
        'status_badge',
        'has_refund_display',
        'created_at',
    ]

    list_filter = [
        'status',
        'payment_method',
        'currency',
        'created_at',
    ]

    search_fields = [
        'order_id',
        'transaction_id',
        'refund_id',
        'user__email',
        'user__name',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    list_select_related = ['user']

    fieldsets = (
        ('Order', {
            'fields': ('order_id', 'user', 'amount', 'currency', 'payment_method', 'status')
        }),
        ('Card', {
            'fields': ('card_type', 'last_four_digits', 'expiry_date'),
        }),
        ('Billing Address', {
            'fields': (
                'billing_street',
                'billing_city',
                'billing_state',
                'billing_postal_code',
                'billing_country',
            ),
            'classes': ('collapse',),
        }),
        ('Gateway', {
            'fields': ('transaction_id', 'gateway_response', 'metadata'),
        }),
        ('Refund', {
            'fields': ('refund_id', 'refund_amount', 'refund_date', 'refund_reason'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    readonly_fields = [
        'status',
        'refund_id',
        'refund_amount',
        'refund_date',
        'refund_reason',
        'created_at',
        'updated_at',
    ]

    def status_badge(self, obj):
        """Display payment status as colored badge."""
        colors = {
            PaymentStatus.PENDING: ('#E5C49A', '#2C1810'),
            PaymentStatus.PROCESSING: ('#7A9CC6', 'white'),
            PaymentStatus.COMPLETED: ('#6B8E5E', 'white'),
            PaymentStatus.FAILED: ('#B85C5C', 'white'),
            PaymentStatus.REFUNDED: ('#A47449', 'white'),
            PaymentStatus.CANCELLED: ('#999', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def get_customer(self, obj):
        return obj.user.get_display_name()
    get_customer.short_description = 'Customer'
    get_customer.admin_order_field = 'user__name'

    def has_refund_display(self, obj):
        return obj.has_refund
    has_refund_display.short_description = 'Refunded'
    has_refund_display.boolean = True
