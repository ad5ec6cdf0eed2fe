# payments/views/checkout.py
"""
CHECKOUT (storefront)

- POST /checkout/                         {session_token} → {session_id, url}
- POST /checkout/webhook/                 provider events (signed)
- GET  /checkout/confirmation/?session_id=

Security hardening:
- Throttled: checkout is public_write, the webhook has its own scope
- Webhook bodies are trusted only after the signature check
"""

from __future__ import annotations

import json
import logging

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from payments.models import Transaction
from payments.serializers import (
    CheckoutRequestSerializer,
    CheckoutResponseSerializer,
    ConfirmationSerializer,
)
from payments.services.checkout import EmptyCartError, handle_event, start_checkout
from payments.services.stripe import PaymentProviderError, verify_webhook_signature
from users.services.exceptions import AccountServiceError
from users.services.sessions import resolve_session
from users.views.sessions import PublicWriteThrottle

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Stripe-Signature"


class WebhookThrottle(AnonRateThrottle):
    scope = "webhook"


class CheckoutView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(request=CheckoutRequestSerializer, responses={200: CheckoutResponseSerializer})
    def post(self, request):
        serializer = CheckoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            session = resolve_session(serializer.validated_data["session_token"])
        except AccountServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            tx = start_checkout(session)
        except EmptyCartError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentProviderError:
            logger.exception("Checkout session creation failed", extra={"session_id": str(session.id)})
            return Response(
                {"detail": "Payment provider unavailable. Please try again."},
                status=status.HTTP_502_BAD_GATEWAY,
            )

        return Response({"session_id": tx.provider_checkout_id, "url": tx.checkout_url})


class StripeWebhookView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [WebhookThrottle]

    @extend_schema(request=None, responses={200: dict})
    def post(self, request):
        raw_body = request.body or b""
        signature = request.headers.get(SIGNATURE_HEADER)

        if not verify_webhook_signature(payload=raw_body, header=signature):
            logger.warning("Invalid webhook signature")
            return Response({"ok": False, "detail": "Invalid signature"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            event = json.loads(raw_body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            return Response({"ok": False, "detail": "Invalid payload"}, status=status.HTTP_400_BAD_REQUEST)
        if not isinstance(event, dict):
            return Response({"ok": False, "detail": "Invalid payload"}, status=status.HTTP_400_BAD_REQUEST)

        outcome = handle_event(event)
        logger.info(
            "Webhook processed",
            extra={"event_type": event.get("type"), "event_id": event.get("id"), "outcome": outcome},
        )
        return Response({"ok": True, "detail": outcome}, status=status.HTTP_200_OK)


class CheckoutConfirmationView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[OpenApiParameter("session_id", str, required=True)],
        responses={200: ConfirmationSerializer},
    )
    def get(self, request):
        checkout_id = (request.query_params.get("session_id") or "").strip()
        if not checkout_id:
            return Response({"detail": "session_id is required."}, status=status.HTTP_400_BAD_REQUEST)

        tx = get_object_or_404(
            Transaction.objects.select_related("order"),
            provider_checkout_id=checkout_id,
        )
        return Response(ConfirmationSerializer(tx).data)
