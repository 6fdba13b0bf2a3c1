# ==================== USERS/VIEWS.PY ====================
import logging
import secrets

from django.conf import settings
from django.core.cache import cache
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from notifications.services import send_otp
from utils.permissions import IsOwner
from .models import CustomUser, Vehicle
from .serializers import (UserRegistrationSerializer, UserLoginSerializer, UserProfileSerializer,
                          VehicleSerializer, OTPRequestSerializer, OTPVerifySerializer)

logger = logging.getLogger(__name__)


def _otp_cache_key(user, phone_number):
    return f"otp:{user.pk}:{phone_number}"


def _token_response(user, message, status_code):
    refresh = RefreshToken.for_user(user)
    return Response({
        'user': UserProfileSerializer(user).data,
        'refresh': str(refresh),
        'access': str(refresh.access_token),
        'message': message
    }, status=status_code)


class UserViewSet(viewsets.ViewSet):
    """User registration, login, profile and phone verification"""
    permission_classes = [permissions.AllowAny]
    authenticated_actions = ('profile', 'request_otp', 'verify_otp')

    def get_permissions(self):
        # as_view() routes do not apply @action permission_classes
        if self.action in self.authenticated_actions:
            return [permissions.IsAuthenticated()]
        return super().get_permissions()

    @action(detail=False, methods=['post'])
    def register(self, request):
        """Register new user"""
        serializer = UserRegistrationSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.save()
            logger.info(f"User registered: {user.username}")
            return _token_response(user, 'User registered successfully', status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    @action(detail=False, methods=['post'])
    def login(self, request):
        """User login"""
        serializer = UserLoginSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.validated_data['user']
            return _token_response(user, 'Login successful', status.HTTP_200_OK)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    @action(detail=False, methods=['get', 'put'])
    def profile(self, request):
        """Get or update user profile"""
        if request.method == 'GET':
            serializer = UserProfileSerializer(request.user)
            return Response(serializer.data)

        serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    @action(detail=False, methods=['post'])
    def request_otp(self, request):
        """Send a 6 digit verification code by SMS

        Body: { "phone_number": "9876543210" }
        """
        serializer = OTPRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        phone_number = serializer.validated_data['phone_number']
        code = f"{secrets.randbelow(10 ** 6):06d}"
        cache.set(_otp_cache_key(request.user, phone_number), code, settings.OTP_TTL_SECONDS)

        if not send_otp(phone_number, code):
            return Response(
                {'error': 'Could not send verification code'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )
        return Response({'message': 'Verification code sent'})

    @action(detail=False, methods=['post'])
    def verify_otp(self, request):
        """Verify the SMS code and attach the phone number to the account

        Body: { "phone_number": "9876543210", "code": "123456" }
        """
        serializer = OTPVerifySerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        phone_number = serializer.validated_data['phone_number']
        key = _otp_cache_key(request.user, phone_number)
        expected = cache.get(key)
        if expected is None or not secrets.compare_digest(expected, serializer.validated_data['code']):
            logger.warning(f"Invalid OTP attempt for user {request.user.username}")
            return Response({'error': 'Invalid or expired code'}, status=status.HTTP_400_BAD_REQUEST)

        if CustomUser.objects.filter(phone_number=phone_number).exclude(pk=request.user.pk).exists():
            return Response(
                {'error': 'This phone number is already registered'},
                status=status.HTTP_400_BAD_REQUEST
            )

        cache.delete(key)
        user = request.user
        user.phone_number = phone_number
        user.phone_verified = True
        user.save(update_fields=['phone_number', 'phone_verified', 'updated_at'])
        return Response(UserProfileSerializer(user).data)


class VehicleViewSet(viewsets.ModelViewSet):
    """Register and manage the user's vehicles"""
    serializer_class = VehicleSerializer
    permission_classes = [permissions.IsAuthenticated, IsOwner]
    filterset_fields = ['vehicle_type', 'is_active']
    search_fields = ['number', 'model']

    def get_queryset(self):
        return Vehicle.objects.filter(owner=self.request.user)

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)

    @action(detail=False, methods=['get'])
    def active_vehicles(self, request):
        """Get list of active vehicles"""
        vehicles = self.get_queryset().filter(is_active=True)
        serializer = self.get_serializer(vehicles, many=True)
        return Response(serializer.data)
