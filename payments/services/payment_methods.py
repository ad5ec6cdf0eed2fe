# payments/services/payment_methods.py

from __future__ import annotations

import logging

from django.db import transaction

from payments.models import PaymentMethod
from payments.services import stripe

logger = logging.getLogger(__name__)


def ensure_customer(user) -> str:
    """Provider customer id of the user, created on first use."""
    if user.stripe_customer_id:
        return user.stripe_customer_id

    customer = stripe.create_customer(
        email=user.email,
        name=user.full_name,
        metadata={"user_id": str(user.id)},
    )
    user.stripe_customer_id = customer["id"]
    user.save(update_fields=["stripe_customer_id"])
    logger.info("Provider customer created", extra={"user_id": str(user.id)})
    return user.stripe_customer_id


def add_payment_method(user, *, provider_payment_method_id: str, **fields) -> PaymentMethod:
    customer_id = ensure_customer(user)
    stripe.attach_payment_method(
        payment_method_id=provider_payment_method_id,
        customer_id=customer_id,
    )

    with transaction.atomic():
        method = PaymentMethod(
            user=user,
            provider_payment_method_id=provider_payment_method_id,
            **fields,
        )
        method.full_clean()
        method.save()

    logger.info(
        "Payment method added",
        extra={"user_id": str(user.id), "payment_method_id": str(method.id), "brand": method.brand},
    )
    return method


def remove_payment_method(method: PaymentMethod) -> None:
    stripe.detach_payment_method(payment_method_id=method.provider_payment_method_id)
    logger.info(
        "Payment method removed",
        extra={"user_id": str(method.user_id), "payment_method_id": str(method.id)},
    )
    method.delete()
