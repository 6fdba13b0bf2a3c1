# ============================= PARKING/FILTERS.PY =============================
import django_filters
from .models import ParkingSpot, VEHICLE_CLASS_CHOICES, TWO_WHEELER


class ParkingSpotFilter(django_filters.FilterSet):
    """Filtering for parking spots"""

    price_min = django_filters.NumberFilter(
        field_name='price_per_minute',
        lookup_expr='gte',
        label='Minimum Price Per Minute'
    )
    price_max = django_filters.NumberFilter(
        field_name='price_per_minute',
        lookup_expr='lte',
        label='Maximum Price Per Minute'
    )
    min_available = django_filters.NumberFilter(
        field_name='available_spaces',
        lookup_expr='gte',
        label='Minimum Free Spaces'
    )
    vehicle_type = django_filters.ChoiceFilter(
        choices=VEHICLE_CLASS_CHOICES,
        method='filter_vehicle_type',
        label='Has Space For Vehicle Class'
    )

    class Meta:
        model = ParkingSpot
        fields = {
            'is_available': ['exact'],
            'name': ['icontains'],
            'address': ['icontains'],
        }

    def filter_vehicle_type(self, queryset, name, value):
        if value == TWO_WHEELER:
            return queryset.filter(two_wheeler_spaces__gt=0)
        return queryset.filter(four_wheeler_spaces__gt=0)
