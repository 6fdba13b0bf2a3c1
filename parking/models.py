from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator

from utils.pricing import demand_factor

TWO_WHEELER = 'two_wheeler'
FOUR_WHEELER = 'four_wheeler'
VEHICLE_CLASS_CHOICES = (
    (TWO_WHEELER, 'Two Wheeler'),
    (FOUR_WHEELER, 'Four Wheeler'),
)


class ParkingSpot(models.Model):
    name = models.CharField(max_length=200)
    address = models.CharField(max_length=500)
    latitude = models.FloatField(validators=[MinValueValidator(-90), MaxValueValidator(90)])
    longitude = models.FloatField(validators=[MinValueValidator(-180), MaxValueValidator(180)])

    # Base rate, in PRICING_CURRENCY
    price_per_minute = models.DecimalField(max_digits=10, decimal_places=2,
                                           validators=[MinValueValidator(0)])

    total_spaces = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    # Free spaces per vehicle class; available_spaces is their sum
    two_wheeler_spaces = models.PositiveIntegerField(default=0)
    four_wheeler_spaces = models.PositiveIntegerField(default=0)
    available_spaces = models.PositiveIntegerField(default=0)

    features = models.JSONField(default=list, blank=True)  # ["CCTV", "EV Charging"]
    is_available = models.BooleanField(default=True, db_index=True)
    image = models.ImageField(upload_to='parking_spots/', null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['latitude', 'longitude'], name='parking_par_latitud_5a1c2e_idx'),
        ]

    def __str__(self):
        return f"{self.name} - {self.address}"

    @property
    def occupancy_rate(self):
        if not self.total_spaces:
            return 0.0
        return (self.total_spaces - self.available_spaces) / self.total_spaces

    def current_demand_factor(self):
        return demand_factor(self.available_spaces, self.total_spaces)

    def spaces_for(self, vehicle_type):
        """Free spaces for a vehicle class"""
        if vehicle_type == TWO_WHEELER:
            return self.two_wheeler_spaces
        return self.four_wheeler_spaces

    def space_field_for(self, vehicle_type):
        return 'two_wheeler_spaces' if vehicle_type == TWO_WHEELER else 'four_wheeler_spaces'
