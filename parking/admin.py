# ==================== PARKING/ADMIN.PY ====================
from django.contrib import admin
from .models import ParkingSpot


@admin.register(ParkingSpot)
class ParkingSpotAdmin(admin.ModelAdmin):
    list_display = ['name', 'address', 'price_per_minute', 'available_spaces', 'total_spaces',
                    'is_available', 'created_at']
    list_filter = ['is_available', 'created_at']
    search_fields = ['name', 'address']
    readonly_fields = ['available_spaces', 'is_available', 'created_at', 'updated_at']
    fieldsets = (
        ('Basic Info', {'fields': ('name', 'address', 'image', 'features')}),
        ('Location', {'fields': ('latitude', 'longitude')}),
        ('Spaces', {'fields': ('total_spaces', 'two_wheeler_spaces', 'four_wheeler_spaces',
                               'available_spaces', 'is_available')}),
        ('Pricing', {'fields': ('price_per_minute',)}),
        ('Timestamps', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
