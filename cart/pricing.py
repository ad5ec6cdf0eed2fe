# cart/pricing.py

"""
SUBSCRIPTION PRICING

Shared by cart, checkout and orders:
- product.unit_price is a monthly price
- YEARLY lines cost 12x unit_price; every other type costs unit_price
- provider amounts are integer cents

Money values are computed server-side only.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from django.db import models

TWOPLACES = Decimal("0.01")
YEARLY_MULTIPLIER = 12


class SubscriptionType(models.TextChoices):
    MONTHLY = "MONTHLY", "Monthly"
    YEARLY = "YEARLY", "Yearly"
    PER_USER = "PER_USER", "Per user"
    PER_MACHINE = "PER_MACHINE", "Per machine"


def money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def line_unit_price(unit_price, subscription_type: str) -> Decimal:
    price = money(unit_price)
    if subscription_type == SubscriptionType.YEARLY:
        return money(price * YEARLY_MULTIPLIER)
    return price


def line_total(unit_price, subscription_type: str, quantity: int) -> Decimal:
    return money(line_unit_price(unit_price, subscription_type) * int(quantity))


def to_cents(amount) -> int:
    return int((money(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))
