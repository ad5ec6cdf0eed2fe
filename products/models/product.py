# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models

from .category import Category


class Product(models.Model):
    """
    A subscribable security service sold on the storefront.

    STOCK MODEL:
    - `stock` is a plain counter (licences / slots left)
    - `available` is the storefront switch; it can never be true with stock 0

    PRICING:
    - unit_price is the monthly price; YEARLY subscriptions charge 12x
    - discount_price is optional and never above unit_price
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="products",
    )

    name = models.CharField(max_length=100, db_index=True, validators=[MinLengthValidator(3)])
    description = models.TextField(max_length=1000, validators=[MinLengthValidator(10)])
    technical_specs = models.TextField(max_length=2000, validators=[MinLengthValidator(10)])

    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    discount_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    stock = models.PositiveIntegerField(default=0)
    available = models.BooleanField(default=False)
    priority_order = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    active = models.BooleanField(default=True)

    main_image = models.CharField(max_length=500)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-available", "priority_order", "name"]
        indexes = [
            models.Index(fields=["name"]),
            models.Index(fields=["active", "available", "priority_order"]),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if self.stock == 0 and self.available:
            raise ValidationError({"available": "A product without stock cannot be available."})

        if (
            self.discount_price is not None
            and self.unit_price is not None
            and Decimal(self.discount_price) > Decimal(self.unit_price)
        ):
            raise ValidationError({"discount_price": "Discount price cannot exceed unit price."})

    @property
    def is_purchasable(self) -> bool:
        return bool(self.active and self.available and self.stock > 0)
