# ==================== PARKING/SIGNALS.PY (Django Signals) ====================
from django.db.models.signals import pre_save
from django.dispatch import receiver
from .models import ParkingSpot
import logging

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=ParkingSpot)
def sync_spot_availability(sender, instance, **kwargs):
    """Keep available_spaces and is_available in step with the per-class counters"""
    instance.available_spaces = instance.two_wheeler_spaces + instance.four_wheeler_spaces
    is_available = instance.available_spaces > 0
    if instance.pk and instance.is_available != is_available:
        logger.info(f"Parking spot {instance.pk} is now {'available' if is_available else 'full'}")
    instance.is_available = is_available
