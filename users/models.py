from django.db import models
from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator, MaxValueValidator

from .validators import validate_e164_phone, MIN_AGE, MAX_AGE


class CustomUser(AbstractUser):
    phone_number = models.CharField(
        max_length=20, unique=True, null=True, blank=True,
        validators=[validate_e164_phone],
        help_text="E.164 format, e.g. +919876543210"
    )
    age = models.PositiveSmallIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(MIN_AGE), MaxValueValidator(MAX_AGE)]
    )
    profile_picture = models.ImageField(upload_to='profile_pics/', null=True, blank=True)
    location_enabled = models.BooleanField(default=False)

    phone_verified = models.BooleanField(default=False)
    email_verified = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.username


class Vehicle(models.Model):
    """Vehicles registered by a user"""
    VEHICLE_TYPE_CHOICES = (
        ('car', 'Car'),
        ('bike', 'Bike'),
        ('other', 'Other'),
    )

    owner = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='vehicles')
    vehicle_type = models.CharField(max_length=10, choices=VEHICLE_TYPE_CHOICES)
    number = models.CharField(max_length=20, db_index=True)
    model = models.CharField(max_length=100, blank=True)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('owner', 'number')
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.owner.username} - {self.number}"

    @property
    def wheel_class(self):
        """Booking vehicle class: bikes park in two-wheeler spaces"""
        return 'two_wheeler' if self.vehicle_type == 'bike' else 'four_wheeler'
