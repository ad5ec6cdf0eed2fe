# dashboard/tests/test_analytics.py

from datetime import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from dashboard.services import analytics
from orders.models import Order
from orders.services.orders import create_order
from products.tests.factories import make_category, make_product

User = get_user_model()

STRONG_PASSWORD = "Cyna@2024a"

# Wednesday
NOW = timezone.make_aware(datetime(2025, 3, 12, 15, 0))


def at(year, month, day):
    return timezone.make_aware(datetime(year, month, day, 12, 0))


class AnalyticsTests(TestCase):
    """
    GUARANTEES:
    - Only ACTIVE / COMPLETED / PROCESSING orders inside the window count
    - The window opens at local midnight of its first day
    - week and month give one point per day, 5weeks one per Monday
    - category sales are sorted by value, highest first
    - average cart = category revenue / orders containing the category
    """

    def setUp(self):
        self.user = User.objects.create_user(email="c@example.com", password=STRONG_PASSWORD)
        self.prevention = make_category("Prévention")
        self.protection = make_category("Protection")
        self.audit = make_product(self.prevention, name="Diagnostic Cyber", unit_price=Decimal("100.00"))
        self.soc = make_product(self.protection, name="Micro SOC", unit_price=Decimal("50.00"))

        self.order(at(2025, 3, 10), Order.STATUS_ACTIVE, [(self.audit, 2)])
        self.order(at(2025, 3, 11), Order.STATUS_COMPLETED, [(self.audit, 1), (self.soc, 1)])
        self.order(at(2025, 3, 11), Order.STATUS_PENDING, [(self.audit, 10)])
        self.order(at(2025, 2, 20), Order.STATUS_PROCESSING, [(self.soc, 3)])
        self.order(at(2025, 1, 2), Order.STATUS_ACTIVE, [(self.soc, 1)])

    def order(self, when, status, lines):
        order = create_order(
            user=self.user,
            payment_method="card",
            order_status=status,
            items=[
                {"product": product, "quantity": quantity, "unit_price": product.unit_price}
                for product, quantity in lines
            ],
        )
        Order.objects.filter(pk=order.pk).update(order_date=when)
        return order

    def test_daily_sales_week(self):
        self.assertEqual(
            analytics.daily_sales("week", now=NOW),
            [
                {"date": "2025-03-10", "value": 200.0},
                {"date": "2025-03-11", "value": 150.0},
            ],
        )

    def test_daily_sales_defaults_to_week(self):
        self.assertEqual(analytics.daily_sales(None, now=NOW), analytics.daily_sales("week", now=NOW))

    def test_daily_sales_month(self):
        self.assertEqual(
            [row["date"] for row in analytics.daily_sales("month", now=NOW)],
            ["2025-02-20", "2025-03-10", "2025-03-11"],
        )

    def test_daily_sales_five_weeks_grouped_by_monday(self):
        self.assertEqual(
            analytics.daily_sales("5weeks", now=NOW),
            [
                {"date": "2025-02-17", "value": 150.0},
                {"date": "2025-03-10", "value": 350.0},
            ],
        )

    def test_category_sales(self):
        self.assertEqual(
            analytics.category_sales("week", now=NOW),
            [
                {"name": "Prévention", "value": 300.0},
                {"name": "Protection", "value": 50.0},
            ],
        )

    def test_average_cart_week(self):
        self.assertEqual(
            analytics.average_cart("week", now=NOW),
            [
                {"date": "2025-03-10", "category": "Prévention", "value": 200.0},
                {"date": "2025-03-11", "category": "Protection", "value": 50.0},
                {"date": "2025-03-11", "category": "Prévention", "value": 100.0},
            ],
        )

    def test_average_cart_five_weeks(self):
        self.assertEqual(
            analytics.average_cart("5weeks", now=NOW),
            [
                {"date": "2025-02-17", "category": "Protection", "value": 150.0},
                {"date": "2025-03-10", "category": "Protection", "value": 50.0},
                {"date": "2025-03-10", "category": "Prévention", "value": 150.0},
            ],
        )

    def test_window_starts_at_midnight(self):
        _, start = analytics.window("week", now=NOW)
        self.assertEqual(start, timezone.make_aware(datetime(2025, 3, 5, 0, 0)))

    def test_order_early_on_first_day_counts(self):
        early = timezone.make_aware(datetime(2025, 3, 5, 9, 0))
        self.order(early, Order.STATUS_COMPLETED, [(self.audit, 1)])

        self.assertEqual(
            analytics.daily_sales("week", now=NOW)[0],
            {"date": "2025-03-05", "value": 100.0},
        )

    def test_unknown_time_frame(self):
        with self.assertRaises(analytics.InvalidTimeFrame):
            analytics.daily_sales("year", now=NOW)


class DashboardApiTests(TestCase):
    """
    GUARANTEES:
    - dashboard:view is required (401 otherwise)
    - an unknown timeFrame gives 400
    """

    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(
            email="manager@example.com", password=STRONG_PASSWORD, role="manager"
        )
        self.customer = User.objects.create_user(email="c@example.com", password=STRONG_PASSWORD)
        product = make_product(make_category(), unit_price=Decimal("80.00"))
        create_order(
            user=self.customer,
            payment_method="card",
            order_status=Order.STATUS_ACTIVE,
            items=[{"product": product, "quantity": 1, "unit_price": product.unit_price}],
        )

    def test_requires_permission(self):
        url = reverse("dashboard:daily-sales")
        self.assertEqual(self.client.get(url).status_code, 401)

        self.client.force_authenticate(self.customer)
        self.assertEqual(self.client.get(url).status_code, 401)

    def test_daily_sales(self):
        self.client.force_authenticate(self.manager)

        response = self.client.get(reverse("dashboard:daily-sales"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.data, [{"date": timezone.localdate().isoformat(), "value": 80.0}]
        )

    def test_category_and_average_cart(self):
        self.client.force_authenticate(self.manager)

        response = self.client.get(reverse("dashboard:category-sales"), {"timeFrame": "month"})
        self.assertEqual(response.data, [{"name": "Prévention", "value": 80.0}])

        response = self.client.get(reverse("dashboard:average-cart"), {"timeFrame": "5weeks"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data[0]["value"], 80.0)

    def test_invalid_time_frame_400(self):
        self.client.force_authenticate(self.manager)
        response = self.client.get(reverse("dashboard:daily-sales"), {"timeFrame": "year"})
        self.assertEqual(response.status_code, 400)
