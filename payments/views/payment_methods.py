# payments/views/payment_methods.py
"""
Saved cards of a user (/users/<id>/payment-methods/...). Owner only.
"""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from payments.models import PaymentMethod
from payments.serializers import (
    PaymentMethodCreateSerializer,
    PaymentMethodSerializer,
    PaymentMethodUpdateSerializer,
)
from payments.services.payment_methods import add_payment_method, remove_payment_method
from payments.services.stripe import PaymentProviderError
from users.ownership import resolve_owner

logger = logging.getLogger(__name__)


def _provider_unavailable():
    return Response(
        {"detail": "Payment provider unavailable. Please try again."},
        status=status.HTTP_502_BAD_GATEWAY,
    )


class PaymentMethodListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: PaymentMethodSerializer(many=True)})
    def get(self, request, user_id):
        owner = resolve_owner(request, user_id)
        methods = PaymentMethod.objects.filter(user=owner)
        return Response(PaymentMethodSerializer(methods, many=True).data)

    @extend_schema(request=PaymentMethodCreateSerializer, responses={201: PaymentMethodSerializer})
    def post(self, request, user_id):
        owner = resolve_owner(request, user_id)
        serializer = PaymentMethodCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        try:
            method = add_payment_method(
                owner,
                provider_payment_method_id=data.pop("stripe_payment_id"),
                **data,
            )
        except PaymentProviderError:
            logger.exception("Payment method registration failed", extra={"user_id": str(owner.id)})
            return _provider_unavailable()

        return Response(PaymentMethodSerializer(method).data, status=status.HTTP_201_CREATED)


class PaymentMethodDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def _get(self, request, user_id, payment_method_id):
        owner = resolve_owner(request, user_id)
        return get_object_or_404(PaymentMethod, pk=payment_method_id, user=owner)

    @extend_schema(responses={200: PaymentMethodSerializer})
    def get(self, request, user_id, payment_method_id):
        return Response(PaymentMethodSerializer(self._get(request, user_id, payment_method_id)).data)

    @extend_schema(request=PaymentMethodUpdateSerializer, responses={200: PaymentMethodSerializer})
    def patch(self, request, user_id, payment_method_id):
        method = self._get(request, user_id, payment_method_id)
        serializer = PaymentMethodUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        for field, value in serializer.validated_data.items():
            setattr(method, field, value)
        method.save()
        return Response(PaymentMethodSerializer(method).data)

    @extend_schema(responses={204: None})
    def delete(self, request, user_id, payment_method_id):
        method = self._get(request, user_id, payment_method_id)
        try:
            remove_payment_method(method)
        except PaymentProviderError:
            logger.exception("Payment method detach failed", extra={"payment_method_id": str(method.id)})
            return _provider_unavailable()
        return Response(status=status.HTTP_204_NO_CONTENT)
