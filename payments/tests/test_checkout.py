# payments/tests/test_checkout.py

import json
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework.test import APIClient

from cart.models import CartItem
from orders.models import Order
from payments.models import PaymentMethod, Transaction
from payments.services.stripe import PaymentProviderError
from payments.tests.test_stripe import STRIPE_SETTINGS, signed_header
from products.tests.factories import make_category, make_product
from users.models import Session

User = get_user_model()

STRONG_PASSWORD = "Cyna@2024a"

FAKE_CHECKOUT = {"id": "cs_test_1", "url": "https://checkout.stripe.com/c/pay/cs_test_1"}


@override_settings(PAYMENTS=STRIPE_SETTINGS, FRONTEND_BASE_URL="https://shop.example.com")
class CheckoutTests(TestCase):
    """
    GUARANTEES:
    - Bad or missing session token, or an empty cart, answer 400
    - Line items are priced in cents (YEARLY ×12) in the configured currency
    - A pending Transaction with the cart snapshot is recorded
    - Provider failures answer 502
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="buyer@example.com", password=STRONG_PASSWORD)
        self.session = Session.objects.create(user=self.user)
        self.product = make_product(make_category(), unit_price=Decimal("10.50"))
        CartItem.objects.create(session=self.session, product=self.product, quantity=2, subscription_type="YEARLY")
        self.url = reverse("payments:checkout")

    @mock.patch("payments.services.stripe.create_checkout_session", return_value=FAKE_CHECKOUT)
    def test_checkout_creates_pending_transaction(self, create_session):
        response = self.client.post(self.url, {"session_token": self.session.session_token}, format="json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"session_id": "cs_test_1", "url": FAKE_CHECKOUT["url"]})

        kwargs = create_session.call_args.kwargs
        line = kwargs["line_items"][0]
        self.assertEqual(line["price_data"]["currency"], "eur")
        self.assertEqual(line["price_data"]["unit_amount"], 12600)
        self.assertEqual(line["quantity"], 2)
        self.assertEqual(
            kwargs["success_url"],
            "https://shop.example.com/checkout/success?session_id={CHECKOUT_SESSION_ID}",
        )
        self.assertEqual(kwargs["cancel_url"], "https://shop.example.com/cart")

        tx = Transaction.objects.get()
        self.assertEqual(tx.status, Transaction.STATUS_PENDING)
        self.assertEqual(tx.amount, Decimal("252.00"))
        self.assertEqual(tx.cart_snapshot[0]["unit_price"], "126.00")

    def test_missing_token_400(self):
        self.assertEqual(self.client.post(self.url, {}, format="json").status_code, 400)

    def test_unknown_token_400(self):
        response = self.client.post(self.url, {"session_token": "f" * 64}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_empty_cart_400(self):
        CartItem.objects.all().delete()
        response = self.client.post(self.url, {"session_token": self.session.session_token}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertFalse(Transaction.objects.exists())

    @mock.patch(
        "payments.services.stripe.create_checkout_session",
        side_effect=PaymentProviderError("Stripe URLError: timed out"),
    )
    def test_provider_failure_502(self, _create_session):
        response = self.client.post(self.url, {"session_token": self.session.session_token}, format="json")
        self.assertEqual(response.status_code, 502)
        self.assertNotIn("timed out", response.data["detail"])
        self.assertFalse(Transaction.objects.exists())


@override_settings(PAYMENTS=STRIPE_SETTINGS)
class WebhookTests(TestCase):
    """
    GUARANTEES:
    - Unsigned or badly signed bodies answer 400
    - completed: Transaction succeeded once, PROCESSING order from the snapshot, cart cleared
    - the buyer gets an order confirmation once the order is committed
    - a failed confirmation email does not fail the webhook
    - expired: Transaction expired
    - unrelated events are acknowledged
    - a signed event whose data is not an object is acknowledged and ignored
    """

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("payments:checkout-webhook")
        self.user = User.objects.create_user(email="buyer@example.com", password=STRONG_PASSWORD)
        self.session = Session.objects.create(user=self.user)
        self.product = make_product(make_category(), unit_price=Decimal("40.00"))
        CartItem.objects.create(session=self.session, product=self.product, quantity=3)
        self.tx = Transaction.objects.create(
            provider_checkout_id="cs_test_1",
            session=self.session,
            user=self.user,
            amount=Decimal("120.00"),
            cart_snapshot=[
                {
                    "product_id": str(self.product.id),
                    "name": self.product.name,
                    "quantity": 3,
                    "subscription_type": "MONTHLY",
                    "unit_price": "40.00",
                    "base_unit_price": "40.00",
                }
            ],
        )

    def _send(self, event, *, header=None):
        body = json.dumps(event).encode("utf-8")
        return self.client.post(
            self.url,
            data=body,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=header if header is not None else signed_header(body),
        )

    def _event(self, event_type, checkout_id="cs_test_1"):
        return {"id": "evt_1", "type": event_type, "data": {"object": {"id": checkout_id}}}

    def test_bad_signature_400(self):
        response = self._send(self._event("checkout.session.completed"), header="t=1,v1=00")
        self.assertEqual(response.status_code, 400)
        self.tx.refresh_from_db()
        self.assertEqual(self.tx.status, Transaction.STATUS_PENDING)

    def test_completed_creates_order_and_clears_cart(self):
        response = self._send(self._event("checkout.session.completed"))
        self.assertEqual(response.status_code, 200)

        self.tx.refresh_from_db()
        self.assertEqual(self.tx.status, Transaction.STATUS_SUCCEEDED)
        order = Order.objects.get()
        self.assertEqual(self.tx.order, order)
        self.assertEqual(order.order_status, Order.STATUS_PROCESSING)
        self.assertEqual(order.total_amount, Decimal("120.00"))
        self.assertEqual(order.user, self.user)
        self.assertFalse(CartItem.objects.filter(session=self.session).exists())

    def test_completed_sends_order_confirmation(self):
        with self.captureOnCommitCallbacks(execute=True):
            response = self._send(self._event("checkout.session.completed"))

        self.assertEqual(response.status_code, 200)
        order = Order.objects.get()
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["buyer@example.com"])
        self.assertIn(order.invoice_number, mail.outbox[0].subject)
        self.assertIn(self.product.name, mail.outbox[0].body)
        self.assertIn("120.00", mail.outbox[0].body)

    def test_confirmation_email_failure_keeps_order(self):
        with mock.patch("users.services.emails.send_mail", side_effect=OSError("smtp down")):
            with self.captureOnCommitCallbacks(execute=True):
                response = self._send(self._event("checkout.session.completed"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["detail"], "processed")
        self.assertTrue(Order.objects.exists())
        self.assertEqual(len(mail.outbox), 0)

    def test_guest_checkout_sends_no_confirmation(self):
        self.tx.user = None
        self.tx.save()
        with self.captureOnCommitCallbacks(execute=True):
            self._send(self._event("checkout.session.completed"))
        self.assertEqual(len(mail.outbox), 0)

    def test_completed_is_idempotent(self):
        self._send(self._event("checkout.session.completed"))
        response = self._send(self._event("checkout.session.completed"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Order.objects.count(), 1)

    def test_guest_checkout_creates_no_order(self):
        self.tx.user = None
        self.tx.save()
        self._send(self._event("checkout.session.completed"))
        self.tx.refresh_from_db()
        self.assertEqual(self.tx.status, Transaction.STATUS_SUCCEEDED)
        self.assertFalse(Order.objects.exists())

    def test_expired(self):
        self._send(self._event("checkout.session.expired"))
        self.tx.refresh_from_db()
        self.assertEqual(self.tx.status, Transaction.STATUS_EXPIRED)

    def test_other_events_acknowledged(self):
        response = self._send(self._event("payment_intent.created"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["detail"], "ignored")

    def test_malformed_data_ignored(self):
        for data in ("x", ["cs_test_1"], {"object": "cs_test_1"}):
            response = self._send({"id": "evt_2", "type": "checkout.session.completed", "data": data})
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.data["detail"], "ignored")

        self.tx.refresh_from_db()
        self.assertEqual(self.tx.status, Transaction.STATUS_PENDING)

    def test_confirmation(self):
        url = reverse("payments:checkout-confirmation")
        self.assertEqual(self.client.get(url).status_code, 400)
        self.assertEqual(self.client.get(url, {"session_id": "cs_unknown"}).status_code, 404)

        self._send(self._event("checkout.session.completed"))
        response = self.client.get(url, {"session_id": "cs_test_1"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "succeeded")
        self.assertEqual(str(response.data["order_id"]), str(Order.objects.get().id))


@override_settings(PAYMENTS=STRIPE_SETTINGS)
class PaymentMethodTests(TestCase):
    """
    GUARANTEES:
    - Owner only (401 anonymous, 403 another user)
    - First card creates the provider customer, then attaches
    - One default card per user
    - DELETE detaches at the provider
    """

    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(email="owner@example.com", password=STRONG_PASSWORD)
        self.other = User.objects.create_user(email="other@example.com", password=STRONG_PASSWORD)
        self.url = reverse("payments:payment-method-list", args=[self.owner.id])

    def _payload(self, **overrides):
        payload = {
            "card_name": "Carte pro",
            "stripe_payment_id": "pm_123",
            "last_card_digits": "4242",
            "brand": "visa",
            "expiration_month": 12,
            "expiration_year": 2030,
        }
        payload.update(overrides)
        return payload

    def test_anonymous_401_and_other_user_403(self):
        self.assertEqual(self.client.get(self.url).status_code, 401)
        self.client.force_authenticate(self.other)
        self.assertEqual(self.client.get(self.url).status_code, 403)

    @mock.patch("payments.services.stripe.attach_payment_method", return_value={"id": "pm_123"})
    @mock.patch("payments.services.stripe.create_customer", return_value={"id": "cus_42"})
    def test_add_creates_customer_and_attaches(self, create_customer, attach):
        self.client.force_authenticate(self.owner)
        response = self.client.post(self.url, self._payload(is_default=True), format="json")

        self.assertEqual(response.status_code, 201)
        self.owner.refresh_from_db()
        self.assertEqual(self.owner.stripe_customer_id, "cus_42")
        attach.assert_called_once_with(payment_method_id="pm_123", customer_id="cus_42")
        self.assertTrue(PaymentMethod.objects.get().is_default)

    @mock.patch("payments.services.stripe.attach_payment_method", return_value={})
    @mock.patch("payments.services.stripe.create_customer")
    def test_default_is_unique(self, create_customer, _attach):
        self.owner.stripe_customer_id = "cus_existing"
        self.owner.save()
        self.client.force_authenticate(self.owner)

        self.client.post(self.url, self._payload(is_default=True), format="json")
        self.client.post(
            self.url,
            self._payload(stripe_payment_id="pm_456", last_card_digits="1111", is_default=True),
            format="json",
        )

        create_customer.assert_not_called()
        self.assertEqual(PaymentMethod.objects.filter(user=self.owner, is_default=True).count(), 1)
        self.assertEqual(
            PaymentMethod.objects.get(is_default=True).provider_payment_method_id, "pm_456"
        )

    def test_validation(self):
        self.client.force_authenticate(self.owner)
        response = self.client.post(self.url, self._payload(last_card_digits="42"), format="json")
        self.assertEqual(response.status_code, 400)

    @mock.patch("payments.services.stripe.detach_payment_method", return_value={})
    def test_patch_and_delete(self, detach):
        method = PaymentMethod.objects.create(
            user=self.owner,
            card_name="Carte",
            provider_payment_method_id="pm_9",
            last_card_digits="9999",
            brand="mastercard",
        )
        detail = reverse("payments:payment-method-detail", args=[self.owner.id, method.id])
        self.client.force_authenticate(self.owner)

        response = self.client.patch(detail, {"card_name": "Carte perso", "is_default": True}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data["is_default"])

        response = self.client.delete(detail)
        self.assertEqual(response.status_code, 204)
        detach.assert_called_once_with(payment_method_id="pm_9")
        self.assertFalse(PaymentMethod.objects.exists())
