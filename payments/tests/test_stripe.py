# payments/tests/test_stripe.py

import io
import time
from unittest import mock
from urllib.error import HTTPError, URLError
from urllib.parse import parse_qsl

from django.test import SimpleTestCase, override_settings

from payments.services import stripe

STRIPE_SETTINGS = {
    "STRIPE": {"SECRET_KEY": "sk_test_123", "WEBHOOK_SECRET": "whsec_test", "CURRENCY": "eur"}
}


def signed_header(payload: bytes, *, secret="whsec_test", timestamp=None):
    timestamp = int(time.time()) if timestamp is None else timestamp
    sig = stripe.compute_signature(payload=payload, timestamp=timestamp, secret=secret)
    return f"t={timestamp},v1={sig}"


class WebhookSignatureTests(SimpleTestCase):
    """
    GUARANTEES:
    - v1 = HMAC-SHA256(secret, "<t>.<payload>") is accepted
    - tampered payloads, wrong secrets and stale timestamps are refused
    """

    payload = b'{"type": "checkout.session.completed"}'

    def test_valid_signature(self):
        header = signed_header(self.payload)
        self.assertTrue(
            stripe.verify_webhook_signature(payload=self.payload, header=header, secret="whsec_test")
        )

    def test_tampered_payload(self):
        header = signed_header(self.payload)
        self.assertFalse(
            stripe.verify_webhook_signature(payload=self.payload + b" ", header=header, secret="whsec_test")
        )

    def test_wrong_secret(self):
        header = signed_header(self.payload, secret="whsec_other")
        self.assertFalse(
            stripe.verify_webhook_signature(payload=self.payload, header=header, secret="whsec_test")
        )

    def test_stale_timestamp(self):
        header = signed_header(self.payload, timestamp=int(time.time()) - 301)
        self.assertFalse(
            stripe.verify_webhook_signature(payload=self.payload, header=header, secret="whsec_test")
        )

    def test_any_v1_may_match(self):
        timestamp = int(time.time())
        good = stripe.compute_signature(payload=self.payload, timestamp=timestamp, secret="whsec_test")
        header = f"t={timestamp},v1=deadbeef,v1={good}"
        self.assertTrue(
            stripe.verify_webhook_signature(payload=self.payload, header=header, secret="whsec_test")
        )

    def test_malformed_header(self):
        for header in (None, "", "garbage", "t=abc,v1=00", "v1=00"):
            self.assertFalse(
                stripe.verify_webhook_signature(payload=self.payload, header=header, secret="whsec_test")
            )


class FormEncodingTests(SimpleTestCase):
    def test_nested_keys(self):
        body = stripe.encode_form(
            {
                "mode": "payment",
                "line_items": [
                    {"price_data": {"currency": "eur", "unit_amount": 1200}, "quantity": 2},
                ],
                "metadata": None,
                "flag": True,
            }
        )
        pairs = dict(parse_qsl(body.decode("utf-8")))
        self.assertEqual(pairs["mode"], "payment")
        self.assertEqual(pairs["line_items[0][price_data][currency]"], "eur")
        self.assertEqual(pairs["line_items[0][price_data][unit_amount]"], "1200")
        self.assertEqual(pairs["line_items[0][quantity]"], "2")
        self.assertEqual(pairs["flag"], "true")
        self.assertNotIn("metadata", pairs)


@override_settings(PAYMENTS=STRIPE_SETTINGS)
class StripeClientTests(SimpleTestCase):
    """
    GUARANTEES:
    - Bearer auth and form bodies on every call
    - HTTP errors, network errors and non-JSON bodies raise PaymentProviderError
    """

    @mock.patch("payments.services.stripe.urlopen")
    def test_create_customer(self, urlopen):
        urlopen.return_value.__enter__.return_value.read.return_value = b'{"id": "cus_123"}'

        customer = stripe.create_customer(email="c@example.com", name="Ada Lovelace")

        self.assertEqual(customer["id"], "cus_123")
        req = urlopen.call_args[0][0]
        self.assertEqual(req.full_url, "https://api.stripe.com/v1/customers")
        self.assertEqual(req.get_header("Authorization"), "Bearer sk_test_123")
        self.assertIn(b"email=c%40example.com", req.data)

    @mock.patch("payments.services.stripe.urlopen")
    def test_http_error(self, urlopen):
        urlopen.side_effect = HTTPError(
            "https://api.stripe.com/v1/customers",
            402,
            "Payment Required",
            hdrs=None,
            fp=io.BytesIO(b'{"error": {"message": "Your card was declined."}}'),
        )
        with self.assertRaisesMessage(stripe.PaymentProviderError, "Your card was declined."):
            stripe.create_customer(email="c@example.com")

    @mock.patch("payments.services.stripe.urlopen")
    def test_network_error(self, urlopen):
        urlopen.side_effect = URLError("connection refused")
        with self.assertRaises(stripe.PaymentProviderError):
            stripe.detach_payment_method(payment_method_id="pm_1")

    @mock.patch("payments.services.stripe.urlopen")
    def test_non_json_body(self, urlopen):
        urlopen.return_value.__enter__.return_value.read.return_value = b"<html>oops</html>"
        with self.assertRaises(stripe.PaymentProviderError):
            stripe.attach_payment_method(payment_method_id="pm_1", customer_id="cus_1")

    @override_settings(PAYMENTS={"STRIPE": {"SECRET_KEY": ""}})
    def test_missing_secret_key(self):
        with self.assertRaises(stripe.PaymentProviderError):
            stripe.create_customer(email="c@example.com")
