# ==================== BOOKINGS/SERIALIZERS.PY ====================
from datetime import timedelta

from rest_framework import serializers
from .models import Booking
from .services import BookingService
from parking.models import VEHICLE_CLASS_CHOICES
from parking.serializers import ParkingSpotListSerializer
from users.models import Vehicle
from users.serializers import VehicleSerializer
from utils.exceptions import VehicleNotFound


class BookingCreateSerializer(serializers.ModelSerializer):
    vehicle_id = serializers.IntegerField(write_only=True, required=False)
    vehicle_type = serializers.ChoiceField(choices=VEHICLE_CLASS_CHOICES, required=False)
    end_time = serializers.DateTimeField(required=False)
    duration_minutes = serializers.IntegerField(min_value=1, required=False)

    class Meta:
        model = Booking
        fields = ['id', 'spot', 'vehicle_id', 'vehicle_type', 'vehicle_number', 'contact_name',
                  'contact_email', 'contact_phone', 'start_time', 'end_time', 'duration_minutes',
                  'status', 'base_price', 'demand_factor', 'time_factor', 'estimated_price']
        read_only_fields = ['id', 'status', 'base_price', 'demand_factor', 'time_factor',
                            'estimated_price']

    def validate(self, data):
        user = self.context['request'].user

        vehicle_id = data.pop('vehicle_id', None)
        if vehicle_id is not None:
            try:
                vehicle = Vehicle.objects.get(id=vehicle_id, owner=user, is_active=True)
            except Vehicle.DoesNotExist:
                raise VehicleNotFound()
            data['vehicle'] = vehicle
            data.setdefault('vehicle_type', vehicle.wheel_class)
            data.setdefault('vehicle_number', vehicle.number)
        if 'vehicle_type' not in data:
            raise serializers.ValidationError({"vehicle_type": "Select a vehicle or a vehicle type"})

        if 'end_time' not in data:
            if 'duration_minutes' not in data:
                raise serializers.ValidationError({"end_time": "Provide an end time or a duration"})
            data['end_time'] = data['start_time'] + timedelta(minutes=data['duration_minutes'])
        data.pop('duration_minutes', None)

        if data['end_time'] <= data['start_time']:
            raise serializers.ValidationError("End time must be after start time")

        data.setdefault('contact_name', user.get_full_name())
        data.setdefault('contact_email', user.email)
        data.setdefault('contact_phone', user.phone_number or '')
        return data

    def create(self, validated_data):
        user = self.context['request'].user
        return BookingService.create_booking(user=user, **validated_data)


class BookingListSerializer(serializers.ModelSerializer):
    spot_name = serializers.CharField(source='spot.name', read_only=True)
    spot_address = serializers.CharField(source='spot.address', read_only=True)

    class Meta:
        model = Booking
        fields = ['id', 'spot', 'spot_name', 'spot_address', 'vehicle_type', 'vehicle_number',
                  'start_time', 'end_time', 'status', 'duration_minutes', 'estimated_price',
                  'actual_price', 'created_at']
        read_only_fields = fields


class BookingDetailSerializer(serializers.ModelSerializer):
    spot = ParkingSpotListSerializer(read_only=True)
    vehicle = VehicleSerializer(read_only=True)
    payment_status = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        exclude = ['space_held']
        read_only_fields = ['user', 'created_at', 'updated_at']

    def get_payment_status(self, obj):
        payment = getattr(obj, 'payment', None)
        return payment.status if payment else None
