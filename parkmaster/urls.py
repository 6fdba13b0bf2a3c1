# ==================== PARKMASTER/URLS.PY ====================
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView, TokenObtainPairView

from users.views import UserViewSet, VehicleViewSet
from parking.views import ParkingSpotViewSet
from bookings.views import BookingViewSet
from payments.views import PaymentViewSet
from payments.webhooks import razorpay_webhook
from notifications.views import SupportMessageViewSet
from dashboard.views import AdminStatsView

# Create router and register viewsets
router = DefaultRouter()
router.register(r'parking-spots', ParkingSpotViewSet, basename='parking-spot')
router.register(r'bookings', BookingViewSet, basename='booking')
router.register(r'vehicles', VehicleViewSet, basename='vehicle')
router.register(r'support-messages', SupportMessageViewSet, basename='support-message')

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API versioning
    path('api/v1/', include([
        # Authentication endpoints
        path('auth/', include([
            path('register/', UserViewSet.as_view({'post': 'register'}), name='register'),
            path('login/', UserViewSet.as_view({'post': 'login'}), name='login'),
            path('token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
            path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
            path('profile/', UserViewSet.as_view({'get': 'profile', 'put': 'profile'}), name='profile'),
            path('otp/request/', UserViewSet.as_view({'post': 'request_otp'}), name='request_otp'),
            path('otp/verify/', UserViewSet.as_view({'post': 'verify_otp'}), name='verify_otp'),
        ])),

        # API routes
        path('', include(router.urls)),

        # Payments
        path('payments/', include([
            path('initiate/', PaymentViewSet.as_view({'post': 'initiate'}), name='initiate_payment'),
            path('verify/', PaymentViewSet.as_view({'post': 'verify'}), name='verify_payment'),
            path('status/', PaymentViewSet.as_view({'get': 'payment_status'}), name='payment_status'),
        ])),

        path('admin/stats/', AdminStatsView.as_view(), name='admin_stats'),
    ])),

    path('webhooks/', include([
        path('razorpay/payment/', razorpay_webhook, name='razorpay_webhook'),
    ])),

    # Serve media files
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
