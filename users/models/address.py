# users/models/address.py

from __future__ import annotations

import uuid

from django.conf import settings
from django.db import models, transaction


class Address(models.Model):
    """
    Billing / shipping address of a user.

    At most one default billing and one default shipping address per user:
    setting a flag clears it on the owner's other addresses.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="addresses",
    )

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    address1 = models.CharField(max_length=255)
    address2 = models.CharField(max_length=255, blank=True, default="")
    postal_code = models.CharField(max_length=20)
    city = models.CharField(max_length=100)
    region = models.CharField(max_length=100, blank=True, default="")
    country = models.CharField(max_length=100)
    mobile_phone = models.CharField(max_length=30, blank=True, default="")

    is_default_billing = models.BooleanField(default=False)
    is_default_shipping = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default_billing", "-created_at"]

    def save(self, *args, **kwargs):
        with transaction.atomic():
            others = Address.objects.filter(user_id=self.user_id).exclude(pk=self.pk)
            if self.is_default_billing:
                others.filter(is_default_billing=True).update(is_default_billing=False)
            if self.is_default_shipping:
                others.filter(is_default_shipping=True).update(is_default_shipping=False)
            super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.address1}, {self.postal_code} {self.city}"
