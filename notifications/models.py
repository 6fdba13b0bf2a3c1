from django.db import models
from users.models import CustomUser


class SupportMessage(models.Model):
    """In-app support chat: user messages and assistant/system replies"""
    owner = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='support_messages')
    message = models.TextField()
    is_from_user = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        sender = self.owner.username if self.is_from_user else 'assistant'
        return f"{sender}: {self.message[:40]}"
