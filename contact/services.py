# contact/services.py

from __future__ import annotations

import logging
from datetime import timedelta

from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from contact.models import ContactMessage
from users.services.emails import send_contact_response_email

logger = logging.getLogger(__name__)


class EmptyResponseError(ValueError):
    """A reply needs some text."""


def file_message(*, first_name, last_name, email, subject, message, user=None) -> ContactMessage:
    contact = ContactMessage.objects.create(
        user=user if getattr(user, "is_authenticated", False) else None,
        first_name=first_name,
        last_name=last_name,
        email=email,
        subject=subject,
        message=message,
    )
    logger.info(
        "Contact message received",
        extra={"contact_message_id": str(contact.id), "subject": subject},
    )
    return contact


def mark_read(contact: ContactMessage) -> ContactMessage:
    if not contact.is_read:
        contact.is_read = True
        contact.save(update_fields=["is_read"])
    return contact


@transaction.atomic
def respond(contact: ContactMessage, *, response: str, responder=None) -> ContactMessage:
    response = (response or "").strip()
    if not response:
        raise EmptyResponseError("Response cannot be empty.")

    contact.response = response
    contact.response_date = timezone.now()
    contact.is_responded = True
    contact.is_read = True
    contact.save(update_fields=["response", "response_date", "is_responded", "is_read"])

    # a failed send rolls the reply back so it can be retried
    send_contact_response_email(
        to_email=contact.email,
        first_name=contact.first_name,
        subject=contact.subject,
        response=response,
    )

    logger.info(
        "Contact message answered",
        extra={
            "contact_message_id": str(contact.id),
            "by": str(responder.id) if responder is not None else None,
        },
    )
    return contact


def stats() -> dict:
    week_ago = timezone.now() - timedelta(days=7)
    return ContactMessage.objects.aggregate(
        total=Count("id"),
        unread=Count("id", filter=Q(is_read=False)),
        unanswered=Count("id", filter=Q(is_responded=False)),
        last_week=Count("id", filter=Q(sent_date__gte=week_ago)),
    )
