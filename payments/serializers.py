# ==================== PAYMENTS/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    booking_id = serializers.IntegerField(source='booking.id', read_only=True)
    booking_status = serializers.CharField(source='booking.status', read_only=True)
    spot = serializers.CharField(source='booking.spot.name', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'booking_id', 'booking_status', 'amount', 'currency', 'payment_method', 'status',
            'spot', 'razorpay_order_id', 'razorpay_payment_id', 'paid_at', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PaymentInitiateSerializer(serializers.Serializer):
    booking_id = serializers.IntegerField()
    payment_method = serializers.ChoiceField(choices=Payment.PAYMENT_METHOD_CHOICES)


class PaymentVerifySerializer(serializers.Serializer):
    razorpay_order_id = serializers.CharField()
    razorpay_payment_id = serializers.CharField()
    razorpay_signature = serializers.CharField()
