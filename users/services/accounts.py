"""
PATH: users/services/accounts.py

ACCOUNT TOKEN FLOWS

- issue_email_verification: replace pending tokens, create a 24h token, email it
- verify_email: consume a token, flag the account verified, apply new_email
- request_password_reset: silent for unknown emails (no account enumeration)
- confirm_password_reset: consume a 1h token and set the new password

Each flow runs in one transaction so a token is consumed at most once.
"""

from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import transaction

from users.models import EmailVerification, PasswordResetToken
from users.services.emails import send_password_reset_email, send_verification_email
from users.services.exceptions import ExpiredTokenError, InvalidTokenError

logger = logging.getLogger(__name__)

User = get_user_model()


# ============================================================
# EMAIL VERIFICATION
# ============================================================

@transaction.atomic
def issue_email_verification(user, *, new_email: Optional[str] = None) -> EmailVerification:
    EmailVerification.objects.filter(user=user).delete()

    verification = EmailVerification.objects.create(user=user, new_email=new_email or None)

    send_verification_email(
        to_email=new_email or user.email,
        token=verification.token,
        first_name=user.first_name,
    )

    logger.info(
        "Email verification issued",
        extra={"user_id": str(user.id), "email_change": bool(new_email)},
    )
    return verification


def _consume(model, token: str, *, missing_message: str, expired_message: str):
    """
    Fetch a live token row. Expired rows are deleted before raising,
    outside of the caller's transaction so the delete sticks.
    """
    token = (token or "").strip()
    if not token:
        raise InvalidTokenError(missing_message)

    row = model.objects.select_related("user").filter(token=token).first()
    if row is None:
        raise InvalidTokenError(missing_message)

    if row.is_expired:
        row.delete()
        raise ExpiredTokenError(expired_message)

    return row


def verify_email(token: str):
    verification = _consume(
        EmailVerification,
        token,
        missing_message="Invalid verification token.",
        expired_message="Verification token has expired.",
    )
    user = verification.user

    with transaction.atomic():
        user.email_verified = True
        update_fields = ["email_verified", "updated_at"]

        if verification.new_email:
            taken = (
                User.objects.filter(email__iexact=verification.new_email)
                .exclude(pk=user.pk)
                .exists()
            )
            if taken:
                raise InvalidTokenError("This email address is already in use.")
            user.email = verification.new_email.lower()
            update_fields.append("email")

        user.save(update_fields=update_fields)
        verification.delete()

    logger.info("Email verified", extra={"user_id": str(user.id)})
    return user


# ============================================================
# PASSWORD RESET
# ============================================================

@transaction.atomic
def request_password_reset(email: str) -> None:
    user = User.objects.filter(email__iexact=(email or "").strip(), is_active=True).first()
    if user is None:
        logger.info("Password reset requested for unknown email")
        return

    PasswordResetToken.objects.filter(user=user).delete()
    reset = PasswordResetToken.objects.create(user=user)

    send_password_reset_email(to_email=user.email, token=reset.token)
    logger.info("Password reset issued", extra={"user_id": str(user.id)})


def confirm_password_reset(token: str, password: str):
    reset = _consume(
        PasswordResetToken,
        token,
        missing_message="Invalid or expired reset token.",
        expired_message="Invalid or expired reset token.",
    )
    user = reset.user

    with transaction.atomic():
        user.set_password(password)
        user.save(update_fields=["password", "updated_at"])
        PasswordResetToken.objects.filter(user=user).delete()

    logger.info("Password reset completed", extra={"user_id": str(user.id)})
    return user
