# orders/services/orders.py

"""
ORDER SERVICE

- compute_totals: subtotal = Σ unit_price × quantity (2dp); total = subtotal
- create_order: order + items in one transaction, totals server-side
- replace_order: full update (fields and items)
- create_order_from_snapshot: order built from a paid checkout's cart snapshot
- set_status: validated status change
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from dateutil.relativedelta import relativedelta
from django.db import transaction
from django.utils import timezone

from cart.pricing import SubscriptionType, money
from orders.models import Order, OrderItem
from products.models import Product

logger = logging.getLogger(__name__)


class OrderError(Exception):
    """Base error for order operations."""


class EmptyOrderError(OrderError):
    """An order needs at least one item."""


class InvalidStatusError(OrderError):
    """Status outside of Order.STATUS_CHOICES."""


VALID_STATUSES = {value for value, _ in Order.STATUS_CHOICES}


def subscription_duration(subscription_type: str) -> int:
    """Billing period in months."""
    return 1 if subscription_type == SubscriptionType.MONTHLY else 12


def next_renewal(start, subscription_type: str):
    """MONTHLY renews one month later, every other type one year later."""
    if subscription_type == SubscriptionType.MONTHLY:
        return start + relativedelta(months=1)
    return start + relativedelta(years=1)


def compute_totals(items: Iterable) -> tuple[Decimal, Decimal]:
    subtotal = Decimal("0.00")
    for item in items:
        unit_price = item["unit_price"] if isinstance(item, dict) else item.unit_price
        quantity = item["quantity"] if isinstance(item, dict) else item.quantity
        subtotal += money(unit_price) * int(quantity)
    subtotal = money(subtotal)
    return subtotal, subtotal


def _create_items(order: Order, items: list[dict]) -> None:
    start = timezone.localdate(order.order_date)

    for data in items:
        subscription_type = data.get("subscription_type") or SubscriptionType.MONTHLY
        product = data.get("product")
        OrderItem.objects.create(
            order=order,
            product=product,
            service_name=data.get("service_name") or (product.name if product else ""),
            quantity=int(data["quantity"]),
            unit_price=money(data["unit_price"]),
            subscription_type=subscription_type,
            subscription_status=data.get("subscription_status") or OrderItem.SUB_ACTIVE,
            subscription_duration=subscription_duration(subscription_type),
            renewal_date=data.get("renewal_date") or next_renewal(start, subscription_type),
        )


def _apply_totals(order: Order, items: list[dict]) -> None:
    order.subtotal, order.total_amount = compute_totals(items)


@transaction.atomic
def create_order(
    *,
    user,
    items: list[dict],
    payment_method: str,
    last_card_digits: str = "",
    address=None,
    order_status: str = Order.STATUS_PENDING,
) -> Order:
    if not items:
        raise EmptyOrderError("An order requires at least one item.")
    if order_status not in VALID_STATUSES:
        raise InvalidStatusError(f"Invalid order status: {order_status}")

    order = Order(
        user=user,
        address=address,
        payment_method=payment_method,
        last_card_digits=last_card_digits or "",
        order_status=order_status,
    )
    _apply_totals(order, items)
    order.full_clean(exclude=["invoice_number"])
    order.save()
    _create_items(order, items)

    logger.info(
        "Order created",
        extra={
            "order_id": str(order.id),
            "invoice_number": order.invoice_number,
            "user_id": str(user.id) if user else None,
            "total_amount": str(order.total_amount),
        },
    )
    return order


@transaction.atomic
def replace_order(order: Order, *, items: list[dict], **fields) -> Order:
    if not items:
        raise EmptyOrderError("An order requires at least one item.")
    status = fields.get("order_status", order.order_status)
    if status not in VALID_STATUSES:
        raise InvalidStatusError(f"Invalid order status: {status}")

    for name, value in fields.items():
        setattr(order, name, value)
    _apply_totals(order, items)
    order.full_clean(exclude=["invoice_number"])
    order.save()

    order.items.all().delete()
    _create_items(order, items)

    logger.info(
        "Order replaced",
        extra={"order_id": str(order.id), "total_amount": str(order.total_amount)},
    )
    return order


def set_status(order: Order, status: str) -> Order:
    if status not in VALID_STATUSES:
        raise InvalidStatusError(f"Invalid order status: {status}")

    previous = order.order_status
    order.order_status = status
    order.save(update_fields=["order_status", "updated_at"])
    logger.info(
        "Order status changed",
        extra={"order_id": str(order.id), "from": previous, "to": status},
    )
    return order


def create_order_from_snapshot(*, user, snapshot: list[dict], payment_method: str = "card") -> Order:
    """
    Snapshot lines carry already-computed unit prices (YEARLY ×12).
    Products deleted since checkout keep their name on the line.
    """
    product_ids = [line["product_id"] for line in snapshot]
    products = {str(pk): p for pk, p in Product.objects.in_bulk(product_ids).items()}

    items = []
    for line in snapshot:
        product = products.get(str(line["product_id"]))
        items.append(
            {
                "product": product,
                "service_name": line.get("name") or (product.name if product else ""),
                "quantity": int(line["quantity"]),
                "unit_price": Decimal(str(line["unit_price"])),
                "subscription_type": line["subscription_type"],
            }
        )

    return create_order(
        user=user,
        items=items,
        payment_method=payment_method,
        order_status=Order.STATUS_PROCESSING,
    )
