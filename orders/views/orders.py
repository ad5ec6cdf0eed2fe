# orders/views/orders.py

"""
ORDER VIEWSET (back office)

- GET    /orders/        orders:view
- GET    /orders/<id>/   orders:view
- POST   /orders/        orders:create (totals computed server-side)
- PUT    /orders/<id>/   orders:edit   (replaces fields and items)
- PATCH  /orders/<id>/   orders:edit   (order_status only)
- DELETE /orders/<id>/   orders:delete
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from cart.pricing import line_unit_price
from orders.models import Order
from orders.serializers import OrderSerializer, OrderStatusSerializer, OrderWriteSerializer
from orders.services.orders import OrderError, create_order, replace_order, set_status
from permissions.roles import (
    PERM_ORDERS_CREATE,
    PERM_ORDERS_DELETE,
    PERM_ORDERS_EDIT,
    PERM_ORDERS_VIEW,
    HasPermission,
)
from products.models import Product
from users.models import Address

logger = logging.getLogger(__name__)

User = get_user_model()

_ACTION_PERMISSIONS = {
    "list": PERM_ORDERS_VIEW,
    "retrieve": PERM_ORDERS_VIEW,
    "create": PERM_ORDERS_CREATE,
    "update": PERM_ORDERS_EDIT,
    "partial_update": PERM_ORDERS_EDIT,
    "destroy": PERM_ORDERS_DELETE,
}


def _resolve_order_input(data: dict) -> dict:
    """
    Turn validated OrderWriteSerializer data into create_order / replace_order kwargs.
    Unknown user, address or product ids are input errors (400).
    """
    user = User.objects.filter(pk=data["user_id"]).first()
    if user is None:
        raise serializers.ValidationError({"user_id": ["Unknown user."]})

    address = None
    if data.get("address_id"):
        address = Address.objects.filter(pk=data["address_id"], user=user).first()
        if address is None:
            raise serializers.ValidationError({"address_id": ["Unknown address for this user."]})

    product_ids = [item["product_id"] for item in data["items"]]
    products = Product.objects.in_bulk(product_ids)

    items = []
    for idx, item in enumerate(data["items"]):
        product = products.get(item["product_id"])
        if product is None:
            raise serializers.ValidationError({"items": [f"Unknown product at index {idx}."]})
        items.append(
            {
                "product": product,
                "service_name": product.name,
                "quantity": item["quantity"],
                "unit_price": line_unit_price(product.unit_price, item["subscription_type"]),
                "subscription_type": item["subscription_type"],
                "subscription_status": item.get("subscription_status"),
                "renewal_date": item.get("renewal_date"),
            }
        )

    return {
        "user": user,
        "address": address,
        "order_status": data["order_status"],
        "payment_method": data["payment_method"],
        "last_card_digits": data["last_card_digits"],
        "items": items,
    }


class OrderViewSet(viewsets.ModelViewSet):
    serializer_class = OrderSerializer
    filterset_fields = ["order_status", "user"]

    def get_queryset(self):
        return Order.objects.select_related("user").prefetch_related("items")

    def get_permissions(self):
        self.required_permission = _ACTION_PERMISSIONS.get(self.action, PERM_ORDERS_EDIT)
        return [IsAuthenticated(), HasPermission()]

    @extend_schema(request=OrderWriteSerializer, responses={201: OrderSerializer})
    def create(self, request, *args, **kwargs):
        serializer = OrderWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = create_order(**_resolve_order_input(serializer.validated_data))
        except OrderError as exc:
            raise serializers.ValidationError({"detail": str(exc)}) from exc

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=OrderWriteSerializer, responses={200: OrderSerializer})
    def update(self, request, *args, **kwargs):
        order = self.get_object()
        serializer = OrderWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            replace_order(order, **_resolve_order_input(serializer.validated_data))
        except OrderError as exc:
            raise serializers.ValidationError({"detail": str(exc)}) from exc

        # items were rebuilt; drop the prefetched ones
        order = self.get_queryset().get(pk=order.pk)
        return Response(OrderSerializer(order).data)

    @extend_schema(request=OrderStatusSerializer, responses={200: OrderSerializer})
    def partial_update(self, request, *args, **kwargs):
        return self._update_status(request)

    def _update_status(self, request):
        order = self.get_object()
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        set_status(order, serializer.validated_data["order_status"])
        return Response(OrderSerializer(order).data)

    def perform_destroy(self, instance):
        logger.info(
            "Order deleted",
            extra={"order_id": str(instance.id), "by": str(self.request.user.id)},
        )
        instance.delete()
