"""
PATH: users/models/tokens.py

ONE-SHOT ACCOUNT TOKENS

- EmailVerification: 24h, optionally carries a pending new_email
- PasswordResetToken: 1h

Both are deleted once consumed (or found expired).
"""

from __future__ import annotations

import secrets
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

EMAIL_VERIFICATION_TTL = timedelta(hours=24)
PASSWORD_RESET_TTL = timedelta(hours=1)


def generate_token() -> str:
    return secrets.token_hex(32)


class _ExpiringToken(models.Model):
    token = models.CharField(max_length=64, unique=True, default=generate_token)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= timezone.now()


class EmailVerification(_ExpiringToken):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="email_verifications",
    )
    new_email = models.EmailField(max_length=255, blank=True, null=True)

    class Meta:
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        if not self.expires_at:
            self.expires_at = timezone.now() + EMAIL_VERIFICATION_TTL
        super().save(*args, **kwargs)

    def __str__(self):
        return f"EmailVerification({self.user_id})"


class PasswordResetToken(_ExpiringToken):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="password_reset_tokens",
    )

    class Meta:
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        if not self.expires_at:
            self.expires_at = timezone.now() + PASSWORD_RESET_TTL
        super().save(*args, **kwargs)

    def __str__(self):
        return f"PasswordResetToken({self.user_id})"
