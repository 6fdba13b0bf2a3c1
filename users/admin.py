# ==================== USERS/ADMIN.PY ====================
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import CustomUser, Vehicle


class VehicleInline(admin.TabularInline):
    model = Vehicle
    extra = 0


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ['username', 'email', 'phone_number', 'phone_verified', 'is_staff', 'created_at']
    list_filter = ['is_staff', 'phone_verified', 'created_at']
    search_fields = ['username', 'email', 'phone_number']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [VehicleInline]
    fieldsets = UserAdmin.fieldsets + (
        ('Profile', {'fields': ('phone_number', 'age', 'profile_picture', 'location_enabled',
                                'phone_verified', 'email_verified')}),
        ('Timestamps', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ['number', 'owner', 'vehicle_type', 'is_active', 'created_at']
    list_filter = ['vehicle_type', 'is_active']
    search_fields = ['number', 'owner__username']
    readonly_fields = ['created_at', 'updated_at']
