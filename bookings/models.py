import math

from django.db import models
from django.utils import timezone
from users.models import CustomUser, Vehicle
from parking.models import ParkingSpot, VEHICLE_CLASS_CHOICES
from utils.pricing import compute_price


class Booking(models.Model):
    STATUS_CHOICES = (
        ('pending_payment', 'Pending Payment'),
        ('confirmed', 'Confirmed'),
        ('active', 'Active - Vehicle Parked'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    )
    # Statuses that keep a time window reserved
    BLOCKING_STATUSES = ('pending_payment', 'confirmed', 'active')

    # Relations
    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='bookings')
    spot = models.ForeignKey(ParkingSpot, on_delete=models.CASCADE, related_name='bookings')
    vehicle = models.ForeignKey(Vehicle, on_delete=models.SET_NULL, null=True, blank=True,
                                related_name='bookings')

    # Booking details
    vehicle_type = models.CharField(max_length=20, choices=VEHICLE_CLASS_CHOICES)
    vehicle_number = models.CharField(max_length=20, blank=True)
    contact_name = models.CharField(max_length=150, blank=True)
    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=20, blank=True)
    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField()
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default='pending_payment', db_index=True)
    # True while this booking holds one of the spot's spaces
    space_held = models.BooleanField(default=False)

    # Pricing snapshot taken when the booking is made
    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    demand_factor = models.DecimalField(max_digits=4, decimal_places=2)
    time_factor = models.DecimalField(max_digits=4, decimal_places=2)
    duration_minutes = models.PositiveIntegerField()
    estimated_price = models.DecimalField(max_digits=10, decimal_places=2)
    actual_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    confirmed_at = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='bookings_bo_user_id_3f0c9a_idx'),
            models.Index(fields=['spot', 'vehicle_type', 'status'], name='bookings_bo_spot_id_8d2e41_idx'),
        ]

    def __str__(self):
        return f"Booking {self.id} - {self.user.username} at {self.spot.name}"

    @property
    def amount_due(self):
        return self.actual_price if self.actual_price is not None else self.estimated_price

    def minutes_parked(self, until=None):
        """Whole minutes from arrival (or the booked start) to ``until``, at least one"""
        start = self.started_at or self.start_time
        until = until or self.completed_at or timezone.now()
        return max(1, math.ceil((until - start).total_seconds() / 60))

    def calculate_actual_price(self, until=None):
        return compute_price(self.base_price, self.demand_factor, self.time_factor,
                             self.minutes_parked(until))
