# ==================== PAYMENTS/VIEWS.PY ====================
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
import logging
from django.conf import settings

from bookings.models import Booking
from .currency import to_inr
from .models import Payment
from .serializers import PaymentSerializer, PaymentInitiateSerializer, PaymentVerifySerializer
from .services import RazorpayService, PaymentService

logger = logging.getLogger(__name__)


class PaymentViewSet(viewsets.ViewSet):
    """Handle payment processing, verification, and status"""
    permission_classes = [permissions.IsAuthenticated]

    @action(detail=False, methods=['post'])
    def initiate(self, request):
        """Create a Razorpay order for a booking awaiting payment

        Body: {
            "booking_id": 1,
            "payment_method": "upi|credit_card"
        }
        """
        serializer = PaymentInitiateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            booking = Booking.objects.select_related('spot', 'user').get(
                id=serializer.validated_data['booking_id'],
                user=request.user
            )
        except Booking.DoesNotExist:
            return Response(
                {'error': 'Booking not found'},
                status=status.HTTP_404_NOT_FOUND
            )

        if booking.status != 'pending_payment':
            return Response(
                {'error': f'Cannot pay for booking in {booking.status} status'},
                status=status.HTTP_400_BAD_REQUEST
            )

        payment_method = serializer.validated_data['payment_method']
        amount = to_inr(booking.estimated_price)

        payment, created = Payment.objects.get_or_create(
            booking=booking,
            defaults={
                'amount': amount,
                'currency': 'INR',
                'payment_method': payment_method,
            }
        )
        if payment.status == 'completed':
            return Response(
                {'error': 'Payment already completed'},
                status=status.HTTP_400_BAD_REQUEST
            )

        # PaymentFailed (402) propagates when the gateway rejects the order
        razorpay_order = RazorpayService().create_order(booking, amount)

        payment.amount = amount
        payment.payment_method = payment_method
        payment.razorpay_order_id = razorpay_order['id']
        payment.status = 'initiated'
        payment.save()

        return Response({
            'payment_id': payment.id,
            'booking_id': booking.id,
            'razorpay_order_id': razorpay_order['id'],
            'amount': payment.amount,
            'currency': payment.currency,
            'key_id': settings.RAZORPAY_KEY_ID
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'])
    def verify(self, request):
        """Verify Razorpay checkout and confirm the booking

        Body: {
            "razorpay_order_id": "order_xxx",
            "razorpay_payment_id": "pay_xxx",
            "razorpay_signature": "sig_xxx"
        }
        """
        serializer = PaymentVerifySerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        try:
            payment = Payment.objects.select_related('booking').get(
                razorpay_order_id=data['razorpay_order_id'],
                booking__user=request.user
            )
        except Payment.DoesNotExist:
            return Response(
                {'error': 'Payment not found'},
                status=status.HTTP_404_NOT_FOUND
            )

        is_valid = RazorpayService().verify_payment(
            data['razorpay_order_id'],
            data['razorpay_payment_id'],
            data['razorpay_signature']
        )
        if not is_valid:
            PaymentService.mark_failed(payment, 'Signature verification failed')
            return Response(
                {'error': 'Payment verification failed'},
                status=status.HTTP_400_BAD_REQUEST
            )

        PaymentService.mark_completed(payment, data['razorpay_payment_id'], data['razorpay_signature'])
        booking = payment.booking
        booking.refresh_from_db()

        return Response({
            'message': 'Payment verified successfully',
            'booking_id': booking.id,
            'status': booking.status
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'], url_path='status')
    def payment_status(self, request):
        """Get payment status for a booking

        Query params: booking_id
        """
        booking_id = request.query_params.get('booking_id')

        try:
            payment = Payment.objects.select_related('booking__spot').get(
                booking_id=booking_id,
                booking__user=request.user
            )
        except (Payment.DoesNotExist, ValueError):
            return Response(
                {'error': 'Payment not found'},
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(PaymentSerializer(payment).data)
