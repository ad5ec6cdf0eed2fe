# orders/services/subscriptions.py

"""
SUBSCRIPTIONS (customer side)

A subscription is an OrderItem seen from its owner:
- update: change type / quantity, order totals follow
- renew: new CONFIRMED order with a PENDING item, previous one cancelled
- cancel: subscription_status = CANCELLED
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from cart.pricing import line_unit_price
from orders.models import Order, OrderItem
from orders.services.orders import (
    OrderError,
    compute_totals,
    create_order,
    next_renewal,
    subscription_duration,
)

logger = logging.getLogger(__name__)


class SubscriptionStateError(OrderError):
    """Operation not allowed in the subscription's current status."""


def subscriptions_for(user):
    return (
        OrderItem.objects.filter(order__user=user)
        .select_related("order", "product")
        .order_by("-created_at")
    )


@transaction.atomic
def update_subscription(item: OrderItem, *, subscription_type: str, quantity: int) -> OrderItem:
    item.subscription_type = subscription_type
    item.quantity = quantity
    item.subscription_duration = subscription_duration(subscription_type)
    item.save(update_fields=["subscription_type", "quantity", "subscription_duration"])

    order = item.order
    order.subtotal, order.total_amount = compute_totals(order.items.all())
    order.save(update_fields=["subtotal", "total_amount", "updated_at"])

    logger.info(
        "Subscription updated",
        extra={
            "subscription_id": str(item.id),
            "subscription_type": subscription_type,
            "quantity": quantity,
            "order_total": str(order.total_amount),
        },
    )
    return item


@transaction.atomic
def renew_subscription(previous: OrderItem, *, subscription_type: str | None = None) -> Order:
    previous = OrderItem.objects.select_for_update().select_related("order", "product").get(pk=previous.pk)
    if previous.subscription_status == OrderItem.SUB_CANCELLED:
        raise SubscriptionStateError("Subscription is already cancelled.")

    subscription_type = subscription_type or previous.subscription_type
    if previous.product is not None:
        unit_price = line_unit_price(previous.product.unit_price, subscription_type)
    else:
        unit_price = previous.unit_price

    start = previous.renewal_date or timezone.localdate()
    order = create_order(
        user=previous.order.user,
        address=previous.order.address,
        payment_method=previous.order.payment_method,
        last_card_digits=previous.order.last_card_digits,
        order_status=Order.STATUS_CONFIRMED,
        items=[
            {
                "product": previous.product,
                "service_name": previous.service_name,
                "quantity": previous.quantity,
                "unit_price": unit_price,
                "subscription_type": subscription_type,
                "subscription_status": OrderItem.SUB_PENDING,
                "renewal_date": next_renewal(start, subscription_type),
            }
        ],
    )

    previous.subscription_status = OrderItem.SUB_CANCELLED
    previous.save(update_fields=["subscription_status"])

    logger.info(
        "Subscription renewed",
        extra={
            "previous_subscription_id": str(previous.id),
            "order_id": str(order.id),
            "subscription_type": subscription_type,
        },
    )
    return order


def cancel_subscription(item: OrderItem) -> OrderItem:
    if item.subscription_status != OrderItem.SUB_CANCELLED:
        item.subscription_status = OrderItem.SUB_CANCELLED
        item.save(update_fields=["subscription_status"])
        logger.info("Subscription cancelled", extra={"subscription_id": str(item.id)})
    return item
