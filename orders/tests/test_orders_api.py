# orders/tests/test_orders_api.py

import re
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from orders.models import Order, OrderItem
from orders.services.orders import compute_totals, create_order
from products.tests.factories import make_category, make_product

User = get_user_model()

STRONG_PASSWORD = "Cyna@2024a"


def order_payload(user, product, **overrides):
    payload = {
        "user_id": str(user.id),
        "payment_method": "card",
        "last_card_digits": "4242",
        "items": [{"product_id": str(product.id), "quantity": 2, "subscription_type": "MONTHLY"}],
    }
    payload.update(overrides)
    return payload


class OrderTotalsTests(TestCase):
    """
    GUARANTEES:
    - subtotal = Σ unit_price × quantity, rounded to 2 decimals; total = subtotal
    - invoice numbers look like INV-YYYYMMDD-XXXXXX
    """

    def test_compute_totals(self):
        subtotal, total = compute_totals(
            [
                {"unit_price": Decimal("19.99"), "quantity": 3},
                {"unit_price": Decimal("120.00"), "quantity": 1},
            ]
        )
        self.assertEqual(subtotal, Decimal("179.97"))
        self.assertEqual(total, subtotal)

    def test_invoice_number_format(self):
        user = User.objects.create_user(email="c@example.com", password=STRONG_PASSWORD)
        product = make_product(make_category())
        order = create_order(
            user=user,
            payment_method="card",
            items=[{"product": product, "quantity": 1, "unit_price": product.unit_price}],
        )
        self.assertRegex(order.invoice_number, re.compile(r"^INV-\d{8}-[0-9A-F]{6}$"))


class OrderApiTests(TestCase):
    """
    GUARANTEES:
    - orders:* permissions gate the back-office routes (401 otherwise)
    - Prices come from the catalog, totals are server-side
    - PATCH only changes the status; PUT replaces fields and items
    """

    def setUp(self):
        self.client = APIClient()
        self.super_admin = User.objects.create_user(
            email="root@example.com", password=STRONG_PASSWORD, role="super_admin"
        )
        self.manager = User.objects.create_user(
            email="manager@example.com", password=STRONG_PASSWORD, role="manager"
        )
        self.customer = User.objects.create_user(
            email="client@example.com", password=STRONG_PASSWORD
        )
        self.category = make_category()
        self.product = make_product(self.category, unit_price=Decimal("30.00"))
        self.list_url = reverse("orders:order-list")

    def _detail(self, order):
        return reverse("orders:order-detail", args=[order.id])

    def test_anonymous_and_customer_get_401(self):
        self.assertEqual(self.client.get(self.list_url).status_code, 401)

        self.client.force_authenticate(self.customer)
        self.assertEqual(self.client.get(self.list_url).status_code, 401)

    def test_manager_can_read_but_not_create(self):
        self.client.force_authenticate(self.manager)
        self.assertEqual(self.client.get(self.list_url).status_code, 200)

        response = self.client.post(
            self.list_url, order_payload(self.customer, self.product), format="json"
        )
        self.assertEqual(response.status_code, 401)

    def test_create_computes_totals(self):
        self.client.force_authenticate(self.super_admin)
        payload = order_payload(
            self.customer,
            self.product,
            items=[
                {"product_id": str(self.product.id), "quantity": 2, "subscription_type": "MONTHLY"},
                {"product_id": str(self.product.id), "quantity": 1, "subscription_type": "YEARLY"},
            ],
        )
        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["subtotal"], "420.00")
        self.assertEqual(response.data["total_amount"], "420.00")
        self.assertEqual(len(response.data["items"]), 2)

    def test_create_requires_items(self):
        self.client.force_authenticate(self.super_admin)
        response = self.client.post(
            self.list_url, order_payload(self.customer, self.product, items=[]), format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_create_rejects_bad_card_digits(self):
        self.client.force_authenticate(self.super_admin)
        response = self.client.post(
            self.list_url,
            order_payload(self.customer, self.product, last_card_digits="42a2"),
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_create_rejects_unknown_product(self):
        self.client.force_authenticate(self.super_admin)
        payload = order_payload(
            self.customer,
            self.product,
            items=[{"product_id": "00000000-0000-0000-0000-000000000000", "quantity": 1}],
        )
        response = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(response.status_code, 400)

    def test_patch_updates_status_only(self):
        order = create_order(
            user=self.customer,
            payment_method="card",
            items=[{"product": self.product, "quantity": 1, "unit_price": Decimal("30.00")}],
        )
        self.client.force_authenticate(self.super_admin)

        response = self.client.patch(
            self._detail(order),
            {"order_status": "ACTIVE", "payment_method": "virement"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        order.refresh_from_db()
        self.assertEqual(order.order_status, "ACTIVE")
        self.assertEqual(order.payment_method, "card")

        response = self.client.patch(self._detail(order), {"order_status": "SHIPPED"}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_put_replaces_items(self):
        order = create_order(
            user=self.customer,
            payment_method="card",
            items=[{"product": self.product, "quantity": 5, "unit_price": Decimal("30.00")}],
        )
        other = make_product(self.category, name="SOC Managé", unit_price=Decimal("80.00"))
        self.client.force_authenticate(self.super_admin)

        payload = order_payload(
            self.customer,
            other,
            order_status="CONFIRMED",
            items=[{"product_id": str(other.id), "quantity": 1, "subscription_type": "MONTHLY"}],
        )
        response = self.client.put(self._detail(order), payload, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["total_amount"], "80.00")
        self.assertEqual(response.data["order_status"], "CONFIRMED")
        self.assertEqual(OrderItem.objects.filter(order=order).count(), 1)
        self.assertEqual(OrderItem.objects.get(order=order).service_name, "SOC Managé")

    def test_missing_order_is_404(self):
        self.client.force_authenticate(self.super_admin)
        url = reverse("orders:order-detail", args=["00000000-0000-0000-0000-000000000000"])
        self.assertEqual(self.client.get(url).status_code, 404)

    def test_delete(self):
        order = create_order(
            user=self.customer,
            payment_method="card",
            items=[{"product": self.product, "quantity": 1, "unit_price": Decimal("30.00")}],
        )
        self.client.force_authenticate(self.super_admin)
        self.assertEqual(self.client.delete(self._detail(order)).status_code, 204)
        self.assertFalse(Order.objects.exists())
