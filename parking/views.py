# ============================= PARKING SPOT VIEWS =============================
from django.conf import settings
from django.utils import timezone
from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from utils.distance_calculator import DistanceCalculator
from utils.permissions import IsAdminOrReadOnly
from utils.pricing import quote_price
from .models import ParkingSpot
from .serializers import (
    ParkingSpotListSerializer,
    ParkingSpotDetailSerializer,
    ParkingSpotCreateUpdateSerializer,
    PriceQuoteQuerySerializer,
    NearbyQuerySerializer,
)
from .filters import ParkingSpotFilter


class ParkingSpotViewSet(viewsets.ModelViewSet):
    """Parking spot listing, search and management"""

    queryset = ParkingSpot.objects.all()
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter
    ]
    filterset_class = ParkingSpotFilter
    search_fields = ['name', 'address']
    ordering_fields = ['name', 'price_per_minute', 'available_spaces', 'created_at']
    ordering = ['name']

    def get_serializer_class(self):
        if self.action in ['list', 'nearby']:
            return ParkingSpotListSerializer
        elif self.action in ['create', 'update', 'partial_update']:
            return ParkingSpotCreateUpdateSerializer
        return ParkingSpotDetailSerializer

    def filter_queryset(self, queryset):
        # quote's query params are pricing inputs, not list filters
        if self.action == 'quote':
            return queryset
        return super().filter_queryset(queryset)

    @action(detail=False, methods=['get'])
    def nearby(self, request):
        """Available parking spots near a location, nearest first
        Query params: lat, lng, radius (in km, default 5)

        Example: /api/v1/parking-spots/nearby/?lat=28.6139&lng=77.2090&radius=5
        """
        query = NearbyQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(
                {'error': 'Invalid latitude, longitude, or radius'},
                status=status.HTTP_400_BAD_REQUEST
            )
        lat = query.validated_data['lat']
        lng = query.validated_data['lng']

        spots = self.filter_queryset(self.get_queryset()).filter(is_available=True)
        results = []
        for spot, distance in DistanceCalculator.spots_within_radius(
                spots, lat, lng, query.validated_data['radius']):
            data = self.get_serializer(spot).data
            data['distance'] = round(distance, 2)
            data['eta_minutes'] = DistanceCalculator.calculate_eta(distance)
            results.append(data)
        return Response(results)

    @action(detail=True, methods=['get'])
    def quote(self, request, pk=None):
        """Dynamic price for parking here
        Query params: minutes, hour (0-23, defaults to the current local hour), vehicle_type

        Example: /api/v1/parking-spots/1/quote/?minutes=60&vehicle_type=two_wheeler
        """
        spot = self.get_object()
        query = PriceQuoteQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        hour = query.validated_data.get('hour')
        if hour is None:
            hour = timezone.localtime().hour
        quote = quote_price(
            spot.price_per_minute,
            spot.available_spaces,
            spot.total_spaces,
            hour,
            query.validated_data['minutes'],
        )

        vehicle_type = query.validated_data['vehicle_type']
        data = quote.to_dict()
        data.update({
            'spot': spot.id,
            'hour': hour,
            'currency': settings.PRICING_CURRENCY,
            'vehicle_type': vehicle_type,
            'spaces_available': spot.spaces_for(vehicle_type),
        })
        return Response(data)
