# cyna/tests/test_platform.py

from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import OperationalError
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from orders.models import Order
from products.tests.factories import make_category, make_product

User = get_user_model()

STRONG_PASSWORD = "Cyna@2024a"


class PlatformTests(TestCase):
    """
    GUARANTEES:
    - /api/ and /api/health/ are public
    - health answers 503 when the database cannot be queried
    - / redirects to the API docs
    """

    def setUp(self):
        self.client = APIClient()

    def test_api_root(self):
        response = self.client.get(reverse("api-root"))
        self.assertEqual(response.status_code, 200)
        self.assertIn("products", response.data["modules"])

    def test_health_ok(self):
        response = self.client.get(reverse("health-check"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "ok")

    def test_health_database_down(self):
        with mock.patch("cyna.urls.connections") as connections:
            connections.__getitem__.return_value.cursor.side_effect = OperationalError("down")
            response = self.client.get(reverse("health-check"))

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.data["db"], "down")

    def test_root_redirects_to_docs(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response["Location"], "/api/docs/")


class ApiExceptionHandlerTests(TestCase):
    """
    GUARANTEES:
    - An unexpected error answers 500 with a generic body and is logged
    - A Django ValidationError from full_clean answers 400 with its field errors
    """

    def setUp(self):
        self.client = APIClient()

    def test_unhandled_error_is_generic_500(self):
        manager = User.objects.create_user(
            email="manager@example.com", password=STRONG_PASSWORD, role="manager"
        )
        self.client.force_authenticate(manager)

        with mock.patch("contact.services.stats", side_effect=RuntimeError("boom")), mock.patch(
            "cyna.exceptions.logger"
        ) as logger:
            response = self.client.get(reverse("contact:contact-message-stats"))

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {"detail": "Internal server error."})
        self.assertNotIn("boom", response.content.decode())
        logger.exception.assert_called_once()

    def test_model_validation_error_is_400(self):
        super_admin = User.objects.create_user(
            email="root@example.com", password=STRONG_PASSWORD, role="super_admin"
        )
        customer = User.objects.create_user(email="client@example.com", password=STRONG_PASSWORD)
        product = make_product(make_category(), unit_price=Decimal("30.00"))
        self.client.force_authenticate(super_admin)

        error = DjangoValidationError({"payment_method": ["Unsupported payment method."]})
        with mock.patch.object(Order, "clean", side_effect=error):
            response = self.client.post(
                reverse("orders:order-list"),
                {
                    "user_id": str(customer.id),
                    "payment_method": "card",
                    "last_card_digits": "4242",
                    "items": [
                        {"product_id": str(product.id), "quantity": 1, "subscription_type": "MONTHLY"}
                    ],
                },
                format="json",
            )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {"payment_method": ["Unsupported payment method."]})
        self.assertFalse(Order.objects.exists())
