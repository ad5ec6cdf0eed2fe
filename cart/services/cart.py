# cart/services/cart.py

"""
CART SERVICE

- add_item: merge on (product, subscription_type), else create
- update_item / remove_item / clear_cart
- cart_summary: lines + total (2dp)
- snapshot: JSON-safe copy of the cart, kept on the payment Transaction

Products must be active and available to enter the cart.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import F

from cart.models import CartItem
from cart.pricing import money
from products.models import Product

logger = logging.getLogger(__name__)


class CartError(Exception):
    """Base error for cart operations."""


class ProductUnavailableError(CartError):
    """Product inactive or not available for sale."""


class CartItemNotFound(CartError):
    """Cart line does not belong to this session."""


def _items(session):
    return CartItem.objects.filter(session=session).select_related("product", "product__category")


def _require_purchasable(product: Product) -> None:
    if not product.active or not product.available:
        raise ProductUnavailableError(f"Product '{product.name}' is not available.")


@transaction.atomic
def add_item(session, *, product: Product, quantity: int, subscription_type: str) -> CartItem:
    _require_purchasable(product)

    item = (
        CartItem.objects.select_for_update()
        .filter(session=session, product=product, subscription_type=subscription_type)
        .first()
    )
    if item is not None:
        CartItem.objects.filter(pk=item.pk).update(quantity=F("quantity") + quantity)
        item.refresh_from_db()
    else:
        item = CartItem.objects.create(
            session=session,
            product=product,
            quantity=quantity,
            subscription_type=subscription_type,
        )

    logger.info(
        "Cart item added",
        extra={
            "session_id": str(session.id),
            "product_id": str(product.id),
            "quantity": item.quantity,
            "subscription_type": subscription_type,
        },
    )
    return item


def _get_item(session, item_id) -> CartItem:
    item = _items(session).filter(pk=item_id).first()
    if item is None:
        raise CartItemNotFound("Cart item not found.")
    return item


@transaction.atomic
def update_item(session, *, item_id, quantity: int, subscription_type: str) -> CartItem:
    item = _get_item(session, item_id)

    duplicate = (
        CartItem.objects.filter(
            session=session,
            product_id=item.product_id,
            subscription_type=subscription_type,
        )
        .exclude(pk=item.pk)
        .first()
    )
    if duplicate is not None:
        # switching to a type already in the cart: fold this line into it
        duplicate.quantity = duplicate.quantity + quantity
        duplicate.save(update_fields=["quantity"])
        item.delete()
        return duplicate

    item.quantity = quantity
    item.subscription_type = subscription_type
    item.save(update_fields=["quantity", "subscription_type"])
    return item


def remove_item(session, *, item_id) -> None:
    _get_item(session, item_id).delete()


def clear_cart(session) -> int:
    deleted, _ = CartItem.objects.filter(session=session).delete()
    return deleted


def cart_summary(session) -> dict:
    items = list(_items(session))
    total = sum((item.total for item in items), Decimal("0.00"))
    return {"items": items, "total": money(total)}


def snapshot(items) -> list[dict]:
    return [
        {
            "product_id": str(item.product_id),
            "name": item.product.name,
            "quantity": item.quantity,
            "subscription_type": item.subscription_type,
            "unit_price": str(item.unit_price),
            "base_unit_price": str(money(item.product.unit_price)),
        }
        for item in items
    ]
