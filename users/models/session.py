"""
PATH: users/models/session.py

STOREFRONT SESSION

A session owns a cart. Guests get one before login; authenticated callers
get one linked to their account. The token travels in the X-Session-Token
header and is the only handle the storefront keeps.
"""

from __future__ import annotations

import secrets
import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone


def generate_session_token() -> str:
    # 32 random bytes -> 64 hex chars
    return secrets.token_hex(32)


def default_session_expiry():
    return timezone.now() + timedelta(hours=settings.SESSION_TTL_HOURS)


class Session(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    session_token = models.CharField(
        max_length=64,
        unique=True,
        default=generate_session_token,
        editable=False,
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sessions",
        null=True,
        blank=True,
    )
    expires_at = models.DateTimeField(default=default_session_expiry)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["expires_at"])]

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= timezone.now()

    def __str__(self):
        owner = self.user.email if self.user_id else "guest"
        return f"Session {self.session_token[:8]}… ({owner})"
