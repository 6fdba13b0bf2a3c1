# ==================== PAYMENTS/TASKS.PY (CELERY TASKS) ====================
from celery import shared_task
from rest_framework.exceptions import APIException
import logging

from .models import Payment
from .services import RazorpayService, PaymentService, GATEWAY_ERRORS

logger = logging.getLogger(__name__)


@shared_task
def reconcile_razorpay_payments():
    """Settle initiated payments whose checkout callback never reached us"""
    service = RazorpayService()
    pending = Payment.objects.filter(
        status='initiated',
        razorpay_order_id__isnull=False
    ).select_related('booking').order_by('-created_at')[:100]

    reconciled = 0
    for payment in pending:
        try:
            attempts = service.fetch_order_payments(payment.razorpay_order_id)
        except GATEWAY_ERRORS:
            continue

        captured = next((a for a in attempts if a.get('status') == 'captured'), None)
        if captured:
            try:
                PaymentService.mark_completed(payment, captured['id'], gateway_response=captured)
            except APIException as e:
                logger.error(f"Reconciled payment {captured['id']} could not confirm booking: {e.detail}")
                continue
            reconciled += 1
            logger.info(f"Payment reconciled: {captured['id']}")
        elif attempts and all(a.get('status') == 'failed' for a in attempts):
            PaymentService.mark_failed(payment, attempts[-1].get('error_description'),
                                       gateway_response=attempts[-1])
            reconciled += 1

    logger.info(f"Reconciled {reconciled} payments")
    return reconciled
