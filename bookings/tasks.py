# ==================== BOOKINGS/TASKS.PY (CELERY TASKS) ====================
from datetime import timedelta
import logging

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from notifications import services as notification_services
from utils.exceptions import InvalidBookingTransition
from .models import Booking
from .services import BookingService

logger = logging.getLogger(__name__)


@shared_task
def auto_complete_bookings():
    """Automatically complete bookings that have ended"""
    now = timezone.now()
    ended_bookings = Booking.objects.filter(
        end_time__lte=now,
        status__in=['confirmed', 'active']
    )

    completed = 0
    for booking in ended_bookings:
        try:
            BookingService.complete(booking, completed_at=booking.end_time)
        except InvalidBookingTransition:
            # Changed by a request while this task was running
            continue
        completed += 1

    logger.info(f"Auto-completed {completed} bookings")
    return completed


@shared_task
def expire_unpaid_bookings():
    """Cancel bookings still waiting for payment after UNPAID_BOOKING_TTL_MINUTES"""
    cutoff = timezone.now() - timedelta(minutes=settings.UNPAID_BOOKING_TTL_MINUTES)
    stale = Booking.objects.filter(status='pending_payment', created_at__lte=cutoff)

    expired = 0
    for booking in stale:
        BookingService.cancel(booking)
        expired += 1

    logger.info(f"Expired {expired} unpaid bookings")
    return expired


@shared_task
def send_booking_confirmation(booking_id):
    """Send booking confirmation by email and SMS"""
    try:
        booking = Booking.objects.select_related('spot', 'user').get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for confirmation")
        return False
    return notification_services.send_booking_confirmation(booking)
