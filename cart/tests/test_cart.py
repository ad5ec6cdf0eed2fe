# cart/tests/test_cart.py

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from cart.models import CartItem
from products.tests.factories import make_category, make_product
from users.models import Session


class CartTests(TestCase):
    """
    GUARANTEES:
    - The cart is scoped to the X-Session-Token session (401 otherwise)
    - Adding the same product and subscription type merges quantities
    - YEARLY lines cost 12x the monthly unit price
    - Unavailable products are refused with 409
    - Lines of another session are not reachable (404)
    """

    def setUp(self):
        self.client = APIClient()
        self.session = Session.objects.create()
        self.client.credentials(HTTP_X_SESSION_TOKEN=self.session.session_token)
        self.category = make_category()
        self.product = make_product(self.category, unit_price=Decimal("50.00"))
        self.url = reverse("cart:cart")

    def _add(self, **payload):
        payload.setdefault("product_id", str(self.product.id))
        return self.client.post(self.url, payload, format="json")

    def test_requires_session_header(self):
        anonymous = APIClient()
        response = anonymous.get(self.url)
        self.assertEqual(response.status_code, 401)

    def test_expired_session_is_rejected(self):
        self.session.expires_at = timezone.now() - timedelta(minutes=1)
        self.session.save(update_fields=["expires_at"])
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 401)

    def test_add_and_merge(self):
        self.assertEqual(self._add(quantity=2).status_code, 201)
        response = self._add(quantity=3)
        self.assertEqual(response.status_code, 201)

        self.assertEqual(CartItem.objects.count(), 1)
        self.assertEqual(CartItem.objects.get().quantity, 5)
        self.assertEqual(response.data["total"], "250.00")

    def test_different_subscription_types_are_separate_lines(self):
        self._add(quantity=1, subscription_type="MONTHLY")
        response = self._add(quantity=1, subscription_type="YEARLY")

        self.assertEqual(len(response.data["items"]), 2)
        self.assertEqual(response.data["total"], "650.00")

    def test_yearly_line_price(self):
        response = self._add(quantity=2, subscription_type="YEARLY")
        line = response.data["items"][0]
        self.assertEqual(line["unit_price"], "600.00")
        self.assertEqual(line["total"], "1200.00")

    def test_unavailable_product_conflict(self):
        product = make_product(self.category, name="Indisponible", stock=0, available=False)
        response = self._add(product_id=str(product.id))
        self.assertEqual(response.status_code, 409)
        self.assertFalse(CartItem.objects.exists())

    def test_unknown_product_404(self):
        response = self._add(product_id="00000000-0000-0000-0000-000000000000")
        self.assertEqual(response.status_code, 404)

    def test_invalid_quantity_400(self):
        response = self._add(quantity=0)
        self.assertEqual(response.status_code, 400)

    def test_update_line(self):
        self._add(quantity=1)
        item = CartItem.objects.get()
        response = self.client.put(
            self.url,
            {"cart_item_id": str(item.id), "quantity": 4, "subscription_type": "PER_USER"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        item.refresh_from_db()
        self.assertEqual(item.quantity, 4)
        self.assertEqual(item.subscription_type, "PER_USER")
        self.assertEqual(response.data["total"], "200.00")

    def test_update_folds_into_existing_line(self):
        self._add(quantity=1, subscription_type="MONTHLY")
        self._add(quantity=2, subscription_type="YEARLY")
        monthly = CartItem.objects.get(subscription_type="MONTHLY")

        self.client.put(
            self.url,
            {"cart_item_id": str(monthly.id), "quantity": 1, "subscription_type": "YEARLY"},
            format="json",
        )
        self.assertEqual(CartItem.objects.count(), 1)
        self.assertEqual(CartItem.objects.get().quantity, 3)

    def test_other_session_line_is_404(self):
        other = Session.objects.create()
        foreign = CartItem.objects.create(session=other, product=self.product, quantity=1)

        response = self.client.delete(self.url, {"cart_item_id": str(foreign.id)}, format="json")
        self.assertEqual(response.status_code, 404)
        self.assertTrue(CartItem.objects.filter(pk=foreign.pk).exists())

    def test_remove_and_clear(self):
        self._add(quantity=1)
        item = CartItem.objects.get()
        response = self.client.delete(self.url, {"cart_item_id": str(item.id)}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["items"], [])

        self._add(quantity=1)
        response = self.client.post(reverse("cart:cart-clear"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["total"], "0.00")
        self.assertFalse(CartItem.objects.exists())
