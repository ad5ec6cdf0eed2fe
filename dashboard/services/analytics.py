# dashboard/services/analytics.py

"""
PATH: dashboard/services/analytics.py

SALES ANALYTICS

Time frames:
- week    last 7 days, one point per day
- month   last 30 days, one point per day
- 5weeks  last 35 days, one point per week (key = the Monday)

Only revenue orders count (Order.REVENUE_STATUSES) with
order_date >= window start. The window starts at local midnight
N days before today. Values are rounded to cents.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Callable, Optional

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from orders.models import Order, OrderItem

TIME_FRAMES = {
    "week": 7,
    "month": 30,
    "5weeks": 35,
}
DEFAULT_TIME_FRAME = "week"


class InvalidTimeFrame(ValueError):
    pass


def _line_total():
    return ExpressionWrapper(
        F("unit_price") * F("quantity"),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )


def _week_start(d: date) -> date:
    return d - timedelta(days=d.weekday())


def _key_function(time_frame: str) -> Callable[[date], date]:
    if time_frame == "5weeks":
        return _week_start
    return lambda d: d


def _value(amount) -> float:
    return float(Decimal(str(amount or 0)).quantize(Decimal("0.01")))


def window(time_frame: Optional[str], *, now=None):
    """(time_frame, start datetime). Raises InvalidTimeFrame on unknown names."""
    time_frame = time_frame or DEFAULT_TIME_FRAME
    if time_frame not in TIME_FRAMES:
        raise InvalidTimeFrame(
            f"timeFrame must be one of: {', '.join(TIME_FRAMES)}."
        )
    now = now or timezone.now()
    first_day = timezone.localdate(now) - timedelta(days=TIME_FRAMES[time_frame])
    return time_frame, timezone.make_aware(datetime.combine(first_day, time.min))


def revenue_orders(start):
    return Order.objects.filter(
        order_status__in=Order.REVENUE_STATUSES,
        order_date__gte=start,
    )


def revenue_items(start):
    return OrderItem.objects.filter(
        order__order_status__in=Order.REVENUE_STATUSES,
        order__order_date__gte=start,
    )


def daily_sales(time_frame: Optional[str] = None, *, now=None) -> list[dict]:
    time_frame, start = window(time_frame, now=now)
    key = _key_function(time_frame)

    rows = (
        revenue_orders(start)
        .annotate(day=TruncDate("order_date"))
        .values("day")
        .annotate(total=Sum("total_amount"))
    )

    totals: dict[date, Decimal] = defaultdict(Decimal)
    for row in rows:
        totals[key(row["day"])] += row["total"] or Decimal("0")

    return [
        {"date": day.isoformat(), "value": _value(total)}
        for day, total in sorted(totals.items())
    ]


def category_sales(time_frame: Optional[str] = None, *, now=None) -> list[dict]:
    _, start = window(time_frame, now=now)

    rows = (
        revenue_items(start)
        .filter(product__isnull=False)
        .values(name=F("product__category__name"))
        .annotate(total=Sum(_line_total()))
    )

    result = [{"name": row["name"], "value": _value(row["total"])} for row in rows]
    result.sort(key=lambda r: (-r["value"], r["name"]))
    return result


def average_cart(time_frame: Optional[str] = None, *, now=None) -> list[dict]:
    """
    Per date key and category: category revenue divided by the number of
    orders that contain the category.
    """
    time_frame, start = window(time_frame, now=now)
    key = _key_function(time_frame)

    rows = (
        revenue_items(start)
        .filter(product__isnull=False)
        .annotate(day=TruncDate("order__order_date"))
        .values("day", category=F("product__category__name"))
        .annotate(total=Sum(_line_total()), orders=Count("order", distinct=True))
    )

    # an order falls on a single day, so per-day distinct counts add up per week
    buckets: dict[tuple[date, str], list] = defaultdict(lambda: [Decimal("0"), 0])
    for row in rows:
        bucket = buckets[(key(row["day"]), row["category"])]
        bucket[0] += row["total"] or Decimal("0")
        bucket[1] += row["orders"]

    return [
        {
            "date": day.isoformat(),
            "category": category,
            "value": _value(total / orders) if orders else 0.0,
        }
        for (day, category), (total, orders) in sorted(buckets.items())
    ]
