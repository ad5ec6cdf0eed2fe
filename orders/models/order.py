# orders/models/order.py

import secrets
import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL

last_four_digits = RegexValidator(r"^\d{4}$", "Must be exactly 4 digits.")


def generate_invoice_number() -> str:
    return f"INV-{timezone.now():%Y%m%d}-{secrets.token_hex(3).upper()}"


class Order(models.Model):
    """
    A customer order of subscription services.

    GUARANTEES:
    - invoice_number is generated once: INV-YYYYMMDD-XXXXXX (uppercase hex)
    - subtotal / total_amount are always computed server-side from the items
    """

    STATUS_PENDING = "PENDING"
    STATUS_PROCESSING = "PROCESSING"
    STATUS_CONFIRMED = "CONFIRMED"
    STATUS_ACTIVE = "ACTIVE"
    STATUS_COMPLETED = "COMPLETED"
    STATUS_CANCELLED = "CANCELLED"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_ACTIVE, "Active"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    # statuses that count as revenue in the dashboard
    REVENUE_STATUSES = (STATUS_ACTIVE, STATUS_COMPLETED, STATUS_PROCESSING)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name="orders",
    )
    address = models.ForeignKey(
        "users.Address",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    invoice_number = models.CharField(max_length=32, unique=True, blank=True, editable=False)
    order_date = models.DateTimeField(default=timezone.now)
    order_status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    payment_method = models.CharField(max_length=50, validators=[MinLengthValidator(2)])
    last_card_digits = models.CharField(
        max_length=4,
        blank=True,
        default="",
        validators=[last_four_digits],
    )

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-order_date"]
        indexes = [
            models.Index(fields=["order_date"]),
            models.Index(fields=["order_status"]),
        ]

    def save(self, *args, **kwargs):
        if not self.invoice_number:
            self.invoice_number = generate_invoice_number()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.invoice_number} | {self.total_amount}"
