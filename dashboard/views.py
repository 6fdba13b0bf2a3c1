# ==================== DASHBOARD/VIEWS.PY ====================
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.models import Booking
from payments.models import Payment

DAILY_WINDOW_DAYS = 7


class AdminStatsView(APIView):
    """Dashboard statistics for staff"""
    permission_classes = [permissions.IsAdminUser]

    def get(self, request):
        total_revenue = Payment.objects.filter(
            status='completed'
        ).aggregate(Sum('amount'))['amount__sum'] or 0

        return Response({
            'total_bookings': Booking.objects.count(),
            'active_bookings': Booking.objects.filter(status__in=['confirmed', 'active']).count(),
            'total_revenue': float(total_revenue),
            'total_users': get_user_model().objects.count(),
            'daily_bookings': self.daily_bookings(),
        })

    @staticmethod
    def daily_bookings(days=DAILY_WINDOW_DAYS):
        """Bookings made per day over the last ``days`` days, oldest first, zero-filled"""
        today = timezone.localdate()
        first_day = today - timedelta(days=days - 1)

        counts = dict(
            Booking.objects.filter(created_at__date__gte=first_day)
            .annotate(day=TruncDate('created_at'))
            .order_by('day')
            .values('day')
            .annotate(count=Count('id'))
            .values_list('day', 'count')
        )
        return [
            {'date': (first_day + timedelta(days=offset)).isoformat(),
             'count': counts.get(first_day + timedelta(days=offset), 0)}
            for offset in range(days)
        ]
