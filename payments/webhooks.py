# ==================== PAYMENTS/WEBHOOKS.PY ====================
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST
from rest_framework.exceptions import APIException
import json
import logging
from .models import Payment
from .services import RazorpayService, PaymentService

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def razorpay_webhook(request):
    """Handle Razorpay payment webhooks"""
    webhook_signature = request.META.get('HTTP_X_RAZORPAY_SIGNATURE')
    if not RazorpayService().verify_webhook_signature(request.body, webhook_signature):
        logger.warning(f"Invalid webhook signature: {webhook_signature}")
        return JsonResponse({'status': 'invalid_signature'}, status=400)

    try:
        webhook_data = json.loads(request.body)
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        return JsonResponse({'status': 'invalid_payload'}, status=400)

    event = webhook_data.get('event')
    payment_data = webhook_data.get('payload', {}).get('payment', {}).get('entity', {})

    if event == 'payment.captured':
        handle_payment_captured(payment_data)
    elif event == 'payment.failed':
        handle_payment_failed(payment_data)
    else:
        logger.info(f"Ignoring webhook event: {event}")

    return JsonResponse({'status': 'success'})


def handle_payment_captured(payment_data):
    """Handle payment.captured event"""
    order_id = payment_data.get('order_id')
    payment_id = payment_data.get('id')

    try:
        payment = Payment.objects.select_related('booking').get(razorpay_order_id=order_id)
    except Payment.DoesNotExist:
        logger.warning(f"Payment not found for order: {order_id}")
        return

    try:
        PaymentService.mark_completed(payment, payment_id, gateway_response=payment_data)
    except APIException as e:
        # Paid, but the booking could not be confirmed (e.g. no space left)
        logger.error(f"Captured payment {payment_id} could not confirm booking {payment.booking_id}: {e.detail}")


def handle_payment_failed(payment_data):
    """Handle payment.failed event"""
    order_id = payment_data.get('order_id')
    error_description = payment_data.get('error_description', 'Unknown error')

    try:
        payment = Payment.objects.get(razorpay_order_id=order_id)
    except Payment.DoesNotExist:
        logger.warning(f"Payment not found for failed order: {order_id}")
        return

    PaymentService.mark_failed(payment, error_description, gateway_response=payment_data)
