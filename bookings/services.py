import logging
import math

from django.db import transaction
from django.utils import timezone

from parking.models import ParkingSpot
from utils.exceptions import ParkingUnavailable, BookingConflict, InvalidBookingTransition
from utils.pricing import quote_price
from .models import Booking

logger = logging.getLogger(__name__)


class BookingService:
    """Booking creation and status transitions, with the spot's space accounting"""

    @staticmethod
    def has_conflict(spot, vehicle_type, start_time, end_time, exclude=None):
        overlapping = Booking.objects.filter(
            spot=spot,
            vehicle_type=vehicle_type,
            status__in=Booking.BLOCKING_STATUSES,
            start_time__lt=end_time,
            end_time__gt=start_time
        )
        if exclude is not None:
            overlapping = overlapping.exclude(pk=exclude.pk)
        return overlapping.exists()

    @staticmethod
    def price_for(spot, start_time, duration_minutes):
        """Quote using the spot's occupancy now and the local hour of the start time"""
        return quote_price(
            spot.price_per_minute,
            spot.available_spaces,
            spot.total_spaces,
            timezone.localtime(start_time).hour,
            duration_minutes,
        )

    @staticmethod
    @transaction.atomic
    def create_booking(user, spot, vehicle_type, start_time, end_time, **details):
        """Create a pending booking priced with the dynamic pricing rules

        Raises ParkingUnavailable when the spot has no space for the vehicle class
        and BookingConflict when the window overlaps another live booking.
        """
        spot = ParkingSpot.objects.select_for_update().get(pk=spot.pk)
        if spot.spaces_for(vehicle_type) <= 0:
            raise ParkingUnavailable()
        if BookingService.has_conflict(spot, vehicle_type, start_time, end_time):
            raise BookingConflict()

        duration_minutes = math.ceil((end_time - start_time).total_seconds() / 60)
        quote = BookingService.price_for(spot, start_time, duration_minutes)

        booking = Booking.objects.create(
            user=user,
            spot=spot,
            vehicle_type=vehicle_type,
            start_time=start_time,
            end_time=end_time,
            base_price=quote.base_price,
            demand_factor=quote.demand_factor,
            time_factor=quote.time_factor,
            duration_minutes=duration_minutes,
            estimated_price=quote.total_price,
            **details
        )
        logger.info(f"Booking {booking.id} created for spot {spot.id}: {booking.estimated_price}")
        return booking

    @staticmethod
    def _check_status(booking, allowed, target):
        if booking.status not in allowed:
            raise InvalidBookingTransition(
                f"Cannot move booking from {booking.status} to {target}"
            )

    @staticmethod
    @transaction.atomic
    def confirm(booking):
        """Confirm a paid booking and take one space of its vehicle class"""
        BookingService._check_status(booking, ('pending_payment',), 'confirmed')

        spot = ParkingSpot.objects.select_for_update().get(pk=booking.spot_id)
        if spot.spaces_for(booking.vehicle_type) <= 0:
            raise ParkingUnavailable()
        field = spot.space_field_for(booking.vehicle_type)
        setattr(spot, field, getattr(spot, field) - 1)
        spot.save()

        booking.status = 'confirmed'
        booking.space_held = True
        booking.confirmed_at = timezone.now()
        booking.save()

        from .tasks import send_booking_confirmation
        transaction.on_commit(lambda: send_booking_confirmation.delay(booking.id))
        logger.info(f"Booking {booking.id} confirmed")
        return booking

    @staticmethod
    def start(booking):
        """Vehicle has arrived and is parked"""
        BookingService._check_status(booking, ('confirmed',), 'active')
        booking.status = 'active'
        booking.started_at = timezone.now()
        booking.save()
        logger.info(f"Booking {booking.id} started")
        return booking

    @staticmethod
    @transaction.atomic
    def complete(booking, completed_at=None):
        """Finish parking, charge for the minutes actually parked and free the space"""
        BookingService._check_status(booking, ('confirmed', 'active'), 'completed')
        booking.completed_at = completed_at or timezone.now()
        booking.actual_price = booking.calculate_actual_price()
        booking.status = 'completed'
        BookingService._release_space(booking)
        booking.save()
        logger.info(f"Booking {booking.id} completed: {booking.actual_price}")
        return booking

    @staticmethod
    @transaction.atomic
    def cancel(booking):
        BookingService._check_status(booking, ('pending_payment', 'confirmed'), 'cancelled')
        booking.status = 'cancelled'
        booking.cancelled_at = timezone.now()
        BookingService._release_space(booking)
        booking.save()
        logger.info(f"Booking {booking.id} cancelled")
        return booking

    @staticmethod
    def _release_space(booking):
        if not booking.space_held:
            return
        spot = ParkingSpot.objects.select_for_update().get(pk=booking.spot_id)
        field = spot.space_field_for(booking.vehicle_type)
        setattr(spot, field, getattr(spot, field) + 1)
        spot.save()
        booking.space_held = False
