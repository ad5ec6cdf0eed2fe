"""
PATH: users/services/emails.py

TRANSACTIONAL EMAILS

Thin wrappers over django.core.mail.send_mail:
- email verification link
- password reset link
- answer to a contact message
- order confirmation after a paid checkout

Links point at FRONTEND_BASE_URL. Tokens are never logged.
Delivery errors propagate (fail_silently=False); callers decide.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone

logger = logging.getLogger(__name__)


def _frontend_url(path: str, token: str) -> str:
    return f"{settings.FRONTEND_BASE_URL}{path}?token={token}"


def send_verification_email(*, to_email: str, token: str, first_name: str = "") -> None:
    link = _frontend_url("/verify-email", token)
    greeting = f"Bonjour {first_name}," if first_name else "Bonjour,"

    send_mail(
        subject="Vérifiez votre adresse email - CYNA",
        message=(
            f"{greeting}\n\n"
            "Merci de confirmer votre adresse email en suivant ce lien :\n"
            f"{link}\n\n"
            "Ce lien expire dans 24 heures."
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[to_email],
        fail_silently=False,
    )
    logger.info("Verification email sent", extra={"to": to_email})


def send_password_reset_email(*, to_email: str, token: str) -> None:
    link = _frontend_url("/reset-password", token)

    send_mail(
        subject="Réinitialisation de votre mot de passe - CYNA",
        message=(
            "Vous avez demandé la réinitialisation de votre mot de passe.\n\n"
            f"Suivez ce lien pour choisir un nouveau mot de passe :\n{link}\n\n"
            "Ce lien expire dans 1 heure. Si vous n'êtes pas à l'origine de "
            "cette demande, ignorez cet email."
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[to_email],
        fail_silently=False,
    )
    logger.info("Password reset email sent", extra={"to": to_email})


def send_contact_response_email(*, to_email: str, first_name: str, subject: str, response: str) -> None:
    send_mail(
        subject=f"Re: {subject}",
        message=(
            f"Bonjour {first_name},\n\n"
            f"{response}\n\n"
            "L'équipe CYNA"
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[to_email],
        fail_silently=False,
    )
    logger.info("Contact response email sent", extra={"to": to_email})


def send_order_confirmation_email(*, to_email: str, first_name: str, order) -> None:
    greeting = f"Bonjour {first_name}," if first_name else "Bonjour,"
    lines = "\n".join(
        f"- {item.service_name} ({item.subscription_type}) : "
        f"{item.quantity} x {item.unit_price} € = {item.total_price} €"
        for item in order.items.all()
    )
    order_date = timezone.localtime(order.order_date)

    send_mail(
        subject=f"Confirmation de votre commande {order.invoice_number} - CYNA",
        message=(
            f"{greeting}\n\n"
            "Merci pour votre commande. Voici son récapitulatif :\n\n"
            f"Numéro de facture : {order.invoice_number}\n"
            f"Date : {order_date:%d/%m/%Y %H:%M}\n\n"
            f"{lines}\n\n"
            f"Total : {order.total_amount} €\n\n"
            "Votre facture est disponible dans votre espace client.\n\n"
            "L'équipe CYNA"
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[to_email],
        fail_silently=False,
    )
    logger.info(
        "Order confirmation email sent",
        extra={"to": to_email, "invoice_number": order.invoice_number},
    )
