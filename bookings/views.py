# ============================= BOOKINGS VIEWS =============================
from rest_framework import viewsets, mixins, status, permissions, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from bookings.models import Booking
from bookings.services import BookingService
from bookings.serializers import (
    BookingCreateSerializer,
    BookingListSerializer,
    BookingDetailSerializer,
)
from utils.permissions import IsBookingUser


class BookingViewSet(mixins.CreateModelMixin,
                     mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     viewsets.GenericViewSet):
    """Booking creation and lifecycle"""

    permission_classes = [permissions.IsAuthenticated, IsBookingUser]
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter
    ]
    filterset_fields = ['status', 'vehicle_type', 'spot']
    search_fields = ['spot__name', 'spot__address', 'vehicle_number']
    ordering_fields = ['created_at', 'start_time', 'estimated_price']
    ordering = ['-created_at']

    def get_serializer_class(self):
        if self.action == 'create':
            return BookingCreateSerializer
        elif self.action in ['list', 'my_bookings']:
            return BookingListSerializer
        return BookingDetailSerializer

    def get_queryset(self):
        user = self.request.user
        queryset = Booking.objects.select_related('spot', 'vehicle')
        # Staff see every booking
        if user.is_staff:
            return queryset
        return queryset.filter(user=user)

    @action(detail=False, methods=['get'])
    def my_bookings(self, request):
        """Get all bookings for current user"""
        bookings = Booking.objects.filter(user=request.user).select_related('spot')
        serializer = self.get_serializer(bookings, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['post'])
    def cancel_booking(self, request, pk=None):
        """Cancel a booking that has not started"""
        booking = self.get_object()

        if booking.status in ['completed', 'cancelled']:
            return Response(
                {'error': f'Cannot cancel a {booking.status} booking'},
                status=status.HTTP_400_BAD_REQUEST
            )

        BookingService.cancel(booking)
        return Response(BookingDetailSerializer(booking, context={'request': request}).data)

    @action(detail=True, methods=['post'])
    def start(self, request, pk=None):
        """Mark the vehicle as parked"""
        booking = self.get_object()
        BookingService.start(booking)
        return Response(BookingDetailSerializer(booking, context={'request': request}).data)

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """End the booking and record the final price"""
        booking = self.get_object()
        BookingService.complete(booking)
        return Response(BookingDetailSerializer(booking, context={'request': request}).data)
