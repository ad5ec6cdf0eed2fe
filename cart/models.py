# cart/models.py

import uuid

from django.core.validators import MinValueValidator
from django.db import models

from cart.pricing import SubscriptionType, line_total, line_unit_price
from products.models import Product
from users.models import Session


class CartItem(models.Model):
    """
    One cart line of a storefront session.

    Rules:
    - (session, product, subscription_type) is unique: adding again bumps quantity
    - quantity >= 1
    - lines die with their session
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    session = models.ForeignKey(Session, on_delete=models.CASCADE, related_name="cart_items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="cart_items")

    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    subscription_type = models.CharField(
        max_length=20,
        choices=SubscriptionType.choices,
        default=SubscriptionType.MONTHLY,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["session", "product", "subscription_type"],
                name="uniq_cart_line_per_session_product_subscription",
            ),
        ]

    @property
    def unit_price(self):
        return line_unit_price(self.product.unit_price, self.subscription_type)

    @property
    def total(self):
        return line_total(self.product.unit_price, self.subscription_type, self.quantity)

    def __str__(self):
        return f"{self.quantity} x {self.product_id} ({self.subscription_type})"
