from django.contrib import admin
from .models import SupportMessage


@admin.register(SupportMessage)
class SupportMessageAdmin(admin.ModelAdmin):
    list_display = ['owner', 'is_from_user', 'message', 'created_at']
    list_filter = ['is_from_user', 'created_at']
    search_fields = ['owner__username', 'message']
    readonly_fields = ['created_at']
