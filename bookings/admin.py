# ==================== BOOKINGS/ADMIN.PY ====================
from django.contrib import admin
from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'spot', 'vehicle_type', 'status', 'start_time', 'end_time',
                    'estimated_price', 'actual_price', 'created_at']
    list_filter = ['status', 'vehicle_type', 'created_at']
    search_fields = ['user__username', 'spot__name', 'vehicle_number']
    readonly_fields = ['base_price', 'demand_factor', 'time_factor', 'duration_minutes',
                       'estimated_price', 'actual_price', 'space_held', 'created_at', 'updated_at']
