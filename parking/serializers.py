# ==================== PARKING/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import ParkingSpot, VEHICLE_CLASS_CHOICES, FOUR_WHEELER
from utils.distance_calculator import DistanceCalculator


class ParkingSpotListSerializer(serializers.ModelSerializer):
    """Simplified serializer for listing parking spots"""
    distance = serializers.SerializerMethodField()

    class Meta:
        model = ParkingSpot
        fields = ['id', 'name', 'address', 'latitude', 'longitude', 'price_per_minute',
                  'total_spaces', 'available_spaces', 'two_wheeler_spaces', 'four_wheeler_spaces',
                  'features', 'is_available', 'image', 'distance']

    def get_distance(self, obj):
        """Distance in km from ?lat=&lng= when both are given"""
        request = self.context.get('request')
        if request and 'lat' in request.query_params and 'lng' in request.query_params:
            try:
                lat = float(request.query_params['lat'])
                lng = float(request.query_params['lng'])
            except ValueError:
                return None
            distance = DistanceCalculator.get_distance_km(lat, lng, obj.latitude, obj.longitude)
            return round(distance, 2)
        return None


class ParkingSpotDetailSerializer(serializers.ModelSerializer):
    occupancy_rate = serializers.SerializerMethodField()
    demand_factor = serializers.SerializerMethodField()

    class Meta:
        model = ParkingSpot
        fields = '__all__'

    def get_occupancy_rate(self, obj):
        return round(obj.occupancy_rate * 100, 2)

    def get_demand_factor(self, obj):
        return obj.current_demand_factor()


class ParkingSpotCreateUpdateSerializer(serializers.ModelSerializer):
    """For creating/updating parking spots (staff only)"""
    features = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    class Meta:
        model = ParkingSpot
        fields = ['id', 'name', 'address', 'latitude', 'longitude', 'price_per_minute',
                  'total_spaces', 'two_wheeler_spaces', 'four_wheeler_spaces', 'features', 'image',
                  'available_spaces', 'is_available']
        read_only_fields = ['available_spaces', 'is_available']

    def validate(self, data):
        def current(field):
            if field in data:
                return data[field]
            return getattr(self.instance, field) if self.instance else 0

        free = current('two_wheeler_spaces') + current('four_wheeler_spaces')
        if free > current('total_spaces'):
            raise serializers.ValidationError(
                "Two and four wheeler spaces cannot exceed total spaces"
            )
        return data


class PriceQuoteQuerySerializer(serializers.Serializer):
    minutes = serializers.IntegerField(min_value=1)
    hour = serializers.IntegerField(min_value=0, max_value=23, required=False)
    vehicle_type = serializers.ChoiceField(choices=VEHICLE_CLASS_CHOICES, default=FOUR_WHEELER)


class NearbyQuerySerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    radius = serializers.FloatField(min_value=0, default=5)
