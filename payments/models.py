from django.db import models


class Payment(models.Model):
    """Payment records for bookings"""
    STATUS_CHOICES = (
        ('initiated', 'Initiated'),
        ('completed', 'Completed'),
        ('failed', 'Failed'),
    )

    PAYMENT_METHOD_CHOICES = (
        ('upi', 'UPI'),
        ('credit_card', 'Credit Card'),
    )

    booking = models.OneToOneField(
        'bookings.Booking',
        on_delete=models.CASCADE,
        related_name='payment'
    )
    # Amount charged through the gateway, in ``currency``
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3, default='INR')
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='initiated')

    # Razorpay
    razorpay_order_id = models.CharField(max_length=100, null=True, blank=True, unique=True, db_index=True)
    razorpay_payment_id = models.CharField(max_length=100, null=True, blank=True, unique=True, db_index=True)
    razorpay_signature = models.CharField(max_length=255, null=True, blank=True)

    # Gateway response
    gateway_response = models.JSONField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='payments_pa_status_1b6f0e_idx'),
            models.Index(fields=['payment_method'], name='payments_pa_payment_4c7d2a_idx'),
        ]

    def __str__(self):
        return f"Payment {self.id} - {self.booking_id} - {self.status}"
