# ==================== NOTIFICATIONS/VIEWS.PY ====================
import logging

from rest_framework import viewsets, mixins, status, permissions
from rest_framework.response import Response

from utils.permissions import IsOwner
from .assistant import reply_to
from .models import SupportMessage
from .serializers import SupportMessageSerializer

logger = logging.getLogger(__name__)


class SupportMessageViewSet(mixins.ListModelMixin,
                            mixins.CreateModelMixin,
                            viewsets.GenericViewSet):
    """Support chat for the current user"""
    serializer_class = SupportMessageSerializer
    permission_classes = [permissions.IsAuthenticated, IsOwner]
    pagination_class = None

    def get_queryset(self):
        return SupportMessage.objects.filter(owner=self.request.user)

    def create(self, request, *args, **kwargs):
        """Store the user's message and the assistant's reply

        Returns both messages, the user's first.
        """
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = serializer.save(owner=request.user, is_from_user=True)

        reply = SupportMessage.objects.create(
            owner=request.user,
            message=reply_to(message.message),
            is_from_user=False
        )
        logger.info(f"Support message {message.id} from {request.user.username}")
        return Response(
            SupportMessageSerializer([message, reply], many=True).data,
            status=status.HTTP_201_CREATED
        )
