# orders/models/order_item.py

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from cart.pricing import SubscriptionType, money


class OrderItem(models.Model):
    """
    One ordered service. Each line is also the customer's subscription
    to that service (status, duration in months, renewal date).
    """

    SUB_ACTIVE = "ACTIVE"
    SUB_PENDING = "PENDING"
    SUB_CANCELLED = "CANCELLED"
    SUB_EXPIRED = "EXPIRED"

    SUBSCRIPTION_STATUS_CHOICES = [
        (SUB_ACTIVE, "Active"),
        (SUB_PENDING, "Pending"),
        (SUB_CANCELLED, "Cancelled"),
        (SUB_EXPIRED, "Expired"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    service_name = models.CharField(max_length=255)

    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    subscription_type = models.CharField(
        max_length=20,
        choices=SubscriptionType.choices,
        default=SubscriptionType.MONTHLY,
    )
    subscription_status = models.CharField(
        max_length=20,
        choices=SUBSCRIPTION_STATUS_CHOICES,
        default=SUB_ACTIVE,
    )
    subscription_duration = models.PositiveIntegerField(default=1, help_text="Months")
    renewal_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["subscription_status"]),
        ]

    @property
    def total_price(self) -> Decimal:
        return money(money(self.unit_price) * int(self.quantity or 0))

    def __str__(self):
        return f"{self.service_name} x{self.quantity} ({self.subscription_type})"
