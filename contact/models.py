# contact/models.py

import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone


class ContactMessage(models.Model):
    """
    A message sent from the storefront contact form (or filed by the chatbot).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="contact_messages",
    )

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(max_length=255)
    subject = models.CharField(max_length=255)
    message = models.TextField()

    sent_date = models.DateTimeField(default=timezone.now)
    is_read = models.BooleanField(default=False)
    is_responded = models.BooleanField(default=False)
    response = models.TextField(blank=True, default="")
    response_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-sent_date"]
        indexes = [
            models.Index(fields=["sent_date"]),
            models.Index(fields=["is_read"]),
        ]

    def __str__(self):
        return f"{self.email} | {self.subject}"
