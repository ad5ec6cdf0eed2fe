# orders/tests/test_invoices.py

import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from orders.models import Order
from orders.services.invoices import invoice_filename, render_invoice
from orders.services.orders import create_order
from products.tests.factories import make_category, make_product
from users.models import Address

User = get_user_model()

STRONG_PASSWORD = "Cyna@2024a"


class InvoiceTests(TestCase):
    """
    GUARANTEES:
    - The owner downloads a PDF named after the invoice number
    - Another user's orders answer 403, staff included
    - Unknown orders answer 404, anonymous callers 401
    - Long orders continue on a second page
    """

    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(
            email="owner@example.com", password=STRONG_PASSWORD, first_name="Jeanne"
        )
        self.other = User.objects.create_user(email="other@example.com", password=STRONG_PASSWORD)
        self.manager = User.objects.create_user(
            email="manager@example.com", password=STRONG_PASSWORD, role="manager"
        )
        self.product = make_product(make_category(), unit_price=Decimal("25.00"))
        self.address = Address.objects.create(
            user=self.owner,
            first_name="Jeanne",
            last_name="Martin",
            address1="10 rue de la Paix",
            postal_code="75002",
            city="Paris",
            country="France",
        )
        self.order = self.make_order(self.owner, lines=1, address=self.address)
        self.other_order = self.make_order(self.other, lines=1)

    def make_order(self, user, *, lines, address=None):
        return create_order(
            user=user,
            address=address,
            payment_method="card",
            last_card_digits="4242",
            order_status=Order.STATUS_ACTIVE,
            items=[
                {"product": self.product, "quantity": 2, "unit_price": self.product.unit_price}
                for _ in range(lines)
            ],
        )

    def url(self, user, order):
        return reverse("orders:order-invoice", args=[user.id, order.id])

    def test_owner_downloads_pdf(self):
        self.client.force_authenticate(self.owner)

        response = self.client.get(self.url(self.owner, self.order))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertIn(f"facture_{self.order.invoice_number}.pdf", response["Content-Disposition"])
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_other_users_order_403(self):
        self.client.force_authenticate(self.owner)

        self.assertEqual(self.client.get(self.url(self.other, self.other_order)).status_code, 403)
        self.assertEqual(self.client.get(self.url(self.owner, self.other_order)).status_code, 403)

    def test_staff_cannot_download_for_customer(self):
        self.client.force_authenticate(self.manager)
        self.assertEqual(self.client.get(self.url(self.owner, self.order)).status_code, 403)

    def test_unknown_order_404(self):
        self.client.force_authenticate(self.owner)
        url = reverse("orders:order-invoice", args=[self.owner.id, uuid.uuid4()])
        self.assertEqual(self.client.get(url).status_code, 404)

    def test_anonymous_401(self):
        self.assertEqual(self.client.get(self.url(self.owner, self.order)).status_code, 401)

    def test_long_order_spans_pages(self):
        long_order = self.make_order(self.owner, lines=45)

        self.assertIn(b"/Count 1", render_invoice(self.order))
        self.assertIn(b"/Count 2", render_invoice(long_order))
        self.assertEqual(invoice_filename(long_order), f"facture_{long_order.invoice_number}.pdf")
