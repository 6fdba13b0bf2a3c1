# ==================== PAYMENTS/SERVICES.PY ====================
import logging
from decimal import Decimal, ROUND_HALF_UP

import razorpay
import requests
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from bookings.services import BookingService
from utils.exceptions import PaymentFailed

logger = logging.getLogger(__name__)

# SDK rejections plus transport failures from its requests session
GATEWAY_ERRORS = (
    razorpay.errors.BadRequestError,
    razorpay.errors.GatewayError,
    razorpay.errors.ServerError,
    requests.RequestException,
)


class RazorpayService:
    """Razorpay payment gateway integration"""

    def __init__(self):
        self.client = razorpay.Client(
            auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
        )

    def create_order(self, booking, amount, currency='INR', notes=None):
        """Create Razorpay order; amount is in rupees and sent in paise"""
        paise = int((Decimal(str(amount)) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
        order_data = {
            'amount': paise,
            'currency': currency,
            'receipt': str(booking.id),
            'payment_capture': 1,
            'notes': notes or {
                'booking_id': booking.id,
                'user': booking.user.username,
                'spot': booking.spot.name,
            }
        }
        try:
            order = self.client.order.create(data=order_data)
        except GATEWAY_ERRORS as e:
            logger.error(f"Error creating Razorpay order for booking {booking.id}: {str(e)}")
            raise PaymentFailed(f"Failed to create order: {str(e)}")

        logger.info(f"Razorpay order created: {order['id']} for booking {booking.id}")
        return order

    def verify_payment(self, razorpay_order_id, razorpay_payment_id, razorpay_signature):
        """Verify Razorpay checkout signature"""
        try:
            self.client.utility.verify_payment_signature({
                'razorpay_order_id': razorpay_order_id,
                'razorpay_payment_id': razorpay_payment_id,
                'razorpay_signature': razorpay_signature
            })
        except razorpay.errors.SignatureVerificationError:
            logger.warning(f"Signature verification failed for payment: {razorpay_payment_id}")
            return False
        logger.info(f"Payment verified: {razorpay_payment_id}")
        return True

    def verify_webhook_signature(self, body, signature, secret=None):
        """Verify the X-Razorpay-Signature header against the raw request body"""
        secret = secret or settings.RAZORPAY_WEBHOOK_SECRET
        if not secret or not signature:
            return False
        if isinstance(body, bytes):
            try:
                body = body.decode('utf-8')
            except UnicodeDecodeError:
                return False
        try:
            self.client.utility.verify_webhook_signature(body, signature, secret)
        except razorpay.errors.SignatureVerificationError:
            return False
        return True

    def fetch_payment(self, razorpay_payment_id):
        """Fetch payment details from Razorpay"""
        try:
            return self.client.payment.fetch(razorpay_payment_id)
        except GATEWAY_ERRORS as e:
            logger.error(f"Error fetching payment {razorpay_payment_id}: {str(e)}")
            raise

    def fetch_order_payments(self, razorpay_order_id):
        """All payment attempts made against an order"""
        try:
            return self.client.order.payments(razorpay_order_id).get('items', [])
        except GATEWAY_ERRORS as e:
            logger.error(f"Error fetching payments for order {razorpay_order_id}: {str(e)}")
            raise


class PaymentService:
    """Apply gateway outcomes to Payment and Booking records"""

    @staticmethod
    @transaction.atomic
    def mark_completed(payment, razorpay_payment_id, signature=None, gateway_response=None):
        """Record a successful payment and confirm its booking; safe to call twice"""
        if payment.status == 'completed':
            return payment

        payment.status = 'completed'
        payment.razorpay_payment_id = razorpay_payment_id
        if signature:
            payment.razorpay_signature = signature
        if gateway_response is not None:
            payment.gateway_response = gateway_response
        payment.paid_at = timezone.now()
        payment.save()

        booking = payment.booking
        if booking.status == 'pending_payment':
            BookingService.confirm(booking)
        logger.info(f"Payment {payment.id} completed for booking {booking.id}")
        return payment

    @staticmethod
    def mark_failed(payment, reason=None, gateway_response=None):
        if payment.status == 'completed':
            logger.warning(f"Ignoring failure for completed payment {payment.id}")
            return payment
        payment.status = 'failed'
        payment.gateway_response = gateway_response or {'error': reason or 'Unknown error'}
        payment.save()
        logger.warning(f"Payment {payment.id} failed: {reason}")
        return payment
