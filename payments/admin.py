# ==================== PAYMENTS/ADMIN.PY ====================
from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['id', 'booking', 'amount', 'currency', 'payment_method', 'status', 'paid_at', 'created_at']
    list_filter = ['status', 'payment_method', 'created_at']
    search_fields = ['booking__id', 'booking__user__username', 'razorpay_order_id', 'razorpay_payment_id']
    readonly_fields = ['razorpay_order_id', 'razorpay_payment_id', 'razorpay_signature',
                       'gateway_response', 'paid_at', 'created_at', 'updated_at']
    fieldsets = (
        ('Payment Info', {'fields': ('booking', 'amount', 'currency', 'payment_method', 'status', 'paid_at')}),
        ('Razorpay', {'fields': ('razorpay_order_id', 'razorpay_payment_id', 'razorpay_signature',
                                 'gateway_response'), 'classes': ('collapse',)}),
        ('Timestamps', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
