# payments/services/checkout.py

"""
CHECKOUT ORCHESTRATION

start_checkout(session):
- cart must not be empty
- one provider line per cart line (unit_amount in cents, YEARLY already ×12)
- records a pending Transaction with a snapshot of the cart

handle_event(event):
- checkout.session.completed → Transaction succeeded (once), order for
  the session's user, cart cleared, confirmation emailed after commit
- checkout.session.expired   → Transaction expired
- anything else is acknowledged and ignored
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction

from cart.pricing import to_cents
from cart.services.cart import cart_summary, clear_cart, snapshot
from orders.models import Order
from orders.services.orders import create_order_from_snapshot
from payments.models import Transaction
from payments.services import stripe
from users.services.emails import send_order_confirmation_email

logger = logging.getLogger(__name__)

EVENT_COMPLETED = "checkout.session.completed"
EVENT_EXPIRED = "checkout.session.expired"


class CheckoutError(Exception):
    """Base error for checkout."""


class EmptyCartError(CheckoutError):
    """Nothing to pay for."""


def _frontend_url(path: str) -> str:
    base = (getattr(settings, "FRONTEND_BASE_URL", "") or "").rstrip("/")
    return f"{base}{path}"


def build_line_items(items, currency: str) -> list[dict]:
    return [
        {
            "price_data": {
                "currency": currency,
                "product_data": {"name": item.product.name},
                "unit_amount": to_cents(item.unit_price),
            },
            "quantity": item.quantity,
        }
        for item in items
    ]


def start_checkout(session) -> Transaction:
    summary = cart_summary(session)
    items = summary["items"]
    if not items:
        raise EmptyCartError("Cart is empty.")

    currency = stripe.get_currency()
    user = session.user

    provider_session = stripe.create_checkout_session(
        line_items=build_line_items(items, currency),
        success_url=_frontend_url("/checkout/success?session_id={CHECKOUT_SESSION_ID}"),
        cancel_url=_frontend_url("/cart"),
        customer=getattr(user, "stripe_customer_id", None) or None,
        customer_email=user.email if user else None,
        metadata={
            "session_id": str(session.id),
            "user_id": str(user.id) if user else None,
        },
    )

    tx = Transaction.objects.create(
        provider_checkout_id=provider_session["id"],
        checkout_url=provider_session["url"],
        session=session,
        user=user,
        amount=summary["total"],
        currency=currency,
        cart_snapshot=snapshot(items),
    )

    logger.info(
        "Checkout started",
        extra={
            "transaction_id": str(tx.id),
            "provider_checkout_id": tx.provider_checkout_id,
            "amount": str(tx.amount),
            "lines": len(items),
        },
    )
    return tx


def send_confirmation(order_id) -> None:
    """Email the order summary to its owner. Delivery failures are logged only."""
    order = Order.objects.select_related("user").prefetch_related("items").get(pk=order_id)
    if order.user is None or not order.user.email:
        logger.warning("Order confirmation skipped, no recipient", extra={"order_id": str(order_id)})
        return

    try:
        send_order_confirmation_email(
            to_email=order.user.email,
            first_name=order.user.first_name,
            order=order,
        )
    except OSError:
        logger.exception("Order confirmation email failed", extra={"order_id": str(order_id)})


@transaction.atomic
def _complete(checkout_id: str, payload: dict) -> str:
    tx = (
        Transaction.objects.select_for_update()
        .select_related("session", "user")
        .filter(provider_checkout_id=checkout_id)
        .first()
    )
    if tx is None:
        logger.warning("Unknown checkout session", extra={"provider_checkout_id": checkout_id})
        return "unknown"

    if tx.status == Transaction.STATUS_SUCCEEDED:
        logger.info("Duplicate webhook ignored", extra={"provider_checkout_id": checkout_id})
        return "duplicate"

    tx.status = Transaction.STATUS_SUCCEEDED
    tx.provider_payload = payload
    fields = ["status", "provider_payload", "updated_at"]

    if tx.user is not None and tx.cart_snapshot:
        tx.order = create_order_from_snapshot(user=tx.user, snapshot=tx.cart_snapshot)
        fields.append("order")
        order_id = tx.order.pk
        transaction.on_commit(lambda: send_confirmation(order_id))

    tx.save(update_fields=fields)

    if tx.session is not None:
        clear_cart(tx.session)

    logger.info(
        "Checkout completed",
        extra={
            "provider_checkout_id": checkout_id,
            "order_id": str(tx.order_id) if tx.order_id else None,
        },
    )
    return "processed"


@transaction.atomic
def _expire(checkout_id: str, payload: dict) -> str:
    tx = Transaction.objects.select_for_update().filter(provider_checkout_id=checkout_id).first()
    if tx is None:
        return "unknown"
    if tx.status != Transaction.STATUS_PENDING:
        return "ignored"

    tx.status = Transaction.STATUS_EXPIRED
    tx.provider_payload = payload
    tx.save(update_fields=["status", "provider_payload", "updated_at"])
    logger.info("Checkout expired", extra={"provider_checkout_id": checkout_id})
    return "expired"


def handle_event(event: dict) -> str:
    event_type = str(event.get("type") or "")
    if event_type not in (EVENT_COMPLETED, EVENT_EXPIRED):
        return "ignored"

    data = event.get("data")
    obj = data.get("object") if isinstance(data, dict) else None
    if not isinstance(obj, dict):
        logger.warning("Webhook event without a session object", extra={"event_type": event_type})
        return "ignored"

    checkout_id = str(obj.get("id") or "").strip()
    if not checkout_id:
        logger.warning("Webhook event without checkout id", extra={"event_type": event_type})
        return "ignored"

    if event_type == EVENT_COMPLETED:
        return _complete(checkout_id, obj)
    return _expire(checkout_id, obj)
