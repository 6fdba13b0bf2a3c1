# ==================== UTILS/PERMISSIONS.PY ====================
from rest_framework import permissions

class IsAdminOrReadOnly(permissions.BasePermission):
    """Anyone can read, only staff can change parking spots"""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_staff)


class IsBookingUser(permissions.BasePermission):
    """Permission to check if user is the one who made the booking"""

    def has_object_permission(self, request, view, obj):
        return obj.user == request.user or request.user.is_staff


class IsOwner(permissions.BasePermission):
    """Permission to check if user owns the object (vehicles, support messages)"""

    def has_object_permission(self, request, view, obj):
        return obj.owner == request.user
