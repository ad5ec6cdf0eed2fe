# chatbot/models.py

import uuid

from django.conf import settings
from django.db import models


class Conversation(models.Model):
    STATUS_ACTIVE = "ACTIVE"
    STATUS_PENDING_ADMIN = "PENDING_ADMIN"
    STATUS_CLOSED = "CLOSED"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_PENDING_ADMIN, "Pending admin"),
        (STATUS_CLOSED, "Closed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="conversations",
    )
    session = models.ForeignKey(
        "users.Session",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="conversations",
    )

    email = models.EmailField(max_length=255, blank=True, default="")
    subject = models.CharField(max_length=255, blank=True, default="")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at"]
        indexes = [models.Index(fields=["status"])]

    def __str__(self):
        return f"{self.id} | {self.status}"


class ChatMessage(models.Model):
    """
    One message of a conversation.
    BOT messages carry the engine context they leave the conversation in.

    GUARANTEES:
    - position counts up from 1 inside a conversation, in insertion order
    """

    TYPE_USER = "USER"
    TYPE_BOT = "BOT"
    TYPE_ADMIN = "ADMIN"

    TYPE_CHOICES = [
        (TYPE_USER, "User"),
        (TYPE_BOT, "Bot"),
        (TYPE_ADMIN, "Admin"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    conversation = models.ForeignKey(Conversation, on_delete=models.CASCADE, related_name="messages")
    content = models.TextField()
    message_type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    context = models.CharField(max_length=40, blank=True, default="")
    position = models.PositiveIntegerField(editable=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["position"]
        indexes = [models.Index(fields=["conversation", "position"])]

    def save(self, *args, **kwargs):
        if self.position is None:
            last = (
                ChatMessage.objects.filter(conversation_id=self.conversation_id)
                .aggregate(last=models.Max("position"))["last"]
            )
            self.position = (last or 0) + 1
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.message_type}: {self.content[:40]}"
