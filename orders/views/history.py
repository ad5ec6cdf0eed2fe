# orders/views/history.py

"""
Customer order history and subscriptions (/users/<id>/...).

Reads: owner, or staff holding orders:view.
Writes and invoice downloads: owner only.
"""

from __future__ import annotations

from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.models import Order, OrderItem
from orders.serializers import (
    OrderSerializer,
    SubscriptionRenewSerializer,
    SubscriptionSerializer,
    SubscriptionUpdateSerializer,
)
from orders.services.invoices import invoice_filename, render_invoice
from orders.services.subscriptions import (
    SubscriptionStateError,
    cancel_subscription,
    renew_subscription,
    subscriptions_for,
    update_subscription,
)
from permissions.roles import PERM_ORDERS_VIEW
from users.ownership import resolve_owner


def _owned_subscription(owner, subscription_id) -> OrderItem:
    item = get_object_or_404(
        OrderItem.objects.select_related("order", "product"),
        pk=subscription_id,
    )
    if item.order.user_id != owner.pk:
        raise PermissionDenied("Subscription does not belong to this user.")
    return item


class UserOrderListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: OrderSerializer(many=True)})
    def get(self, request, user_id):
        owner = resolve_owner(request, user_id, staff_permission=PERM_ORDERS_VIEW)
        orders = Order.objects.filter(user=owner).prefetch_related("items")
        return Response(OrderSerializer(orders, many=True).data)


class OrderInvoiceView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        responses={200: OpenApiResponse(OpenApiTypes.BINARY, description="PDF invoice")},
        description="Download the PDF invoice of one of your orders",
    )
    def get(self, request, user_id, order_id):
        owner = resolve_owner(request, user_id)
        order = get_object_or_404(
            Order.objects.select_related("address").prefetch_related("items"),
            pk=order_id,
        )
        if order.user_id != owner.pk:
            raise PermissionDenied("Order does not belong to this user.")

        response = HttpResponse(render_invoice(order), content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="{invoice_filename(order)}"'
        return response


class SubscriptionListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: SubscriptionSerializer(many=True)})
    def get(self, request, user_id):
        owner = resolve_owner(request, user_id, staff_permission=PERM_ORDERS_VIEW)
        return Response(SubscriptionSerializer(subscriptions_for(owner), many=True).data)


class SubscriptionDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: SubscriptionSerializer})
    def get(self, request, user_id, subscription_id):
        owner = resolve_owner(request, user_id, staff_permission=PERM_ORDERS_VIEW)
        return Response(SubscriptionSerializer(_owned_subscription(owner, subscription_id)).data)

    @extend_schema(request=SubscriptionUpdateSerializer, responses={200: SubscriptionSerializer})
    def patch(self, request, user_id, subscription_id):
        owner = resolve_owner(request, user_id)
        item = _owned_subscription(owner, subscription_id)

        serializer = SubscriptionUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = update_subscription(item, **serializer.validated_data)
        return Response(SubscriptionSerializer(item).data)


class SubscriptionRenewView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=SubscriptionRenewSerializer, responses={201: OrderSerializer})
    def post(self, request, user_id):
        owner = resolve_owner(request, user_id)
        serializer = SubscriptionRenewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        previous = _owned_subscription(owner, data["previous_subscription_id"])
        try:
            order = renew_subscription(previous, subscription_type=data.get("subscription_type"))
        except SubscriptionStateError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class SubscriptionCancelView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: SubscriptionSerializer})
    def post(self, request, user_id, subscription_id):
        owner = resolve_owner(request, user_id)
        item = cancel_subscription(_owned_subscription(owner, subscription_id))
        return Response(SubscriptionSerializer(item).data)
