from datetime import datetime, timedelta
from decimal import Decimal

from django.utils import timezone

from parking.models import ParkingSpot
from users.models import CustomUser, Vehicle

PASSWORD = 'Parking@2024x'


def make_user(username='arjun', **extra):
    defaults = {
        'email': f'{username}@example.com',
        'first_name': 'Arjun',
        'last_name': 'Kumar',
    }
    defaults.update(extra)
    return CustomUser.objects.create_user(username=username, password=PASSWORD, **defaults)


def make_staff(username='admin'):
    return make_user(username, is_staff=True)


def make_spot(name='Connaught Place Parking', **extra):
    defaults = {
        'address': 'Block A, Connaught Place, New Delhi',
        'latitude': 28.6315,
        'longitude': 77.2167,
        'price_per_minute': Decimal('2.00'),
        'total_spaces': 10,
        'two_wheeler_spaces': 5,
        'four_wheeler_spaces': 5,
        'features': ['CCTV'],
    }
    defaults.update(extra)
    return ParkingSpot.objects.create(name=name, **defaults)


def make_vehicle(owner, number='DL01AB1234', vehicle_type='car'):
    return Vehicle.objects.create(owner=owner, number=number, vehicle_type=vehicle_type)


def noon_tomorrow():
    """12:00 tomorrow in the current time zone (peak hour)"""
    tomorrow = timezone.localdate() + timedelta(days=1)
    return timezone.make_aware(datetime(tomorrow.year, tomorrow.month, tomorrow.day, 12, 0))
