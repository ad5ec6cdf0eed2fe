# cart/views.py
"""
CART API (storefront)

The cart belongs to a storefront session, identified by the
X-Session-Token header. Missing, unknown or expired tokens answer 401.

- GET    /cart/         {items, total}
- POST   /cart/         add (merges on product + subscription_type)
- PUT    /cart/         update one line
- DELETE /cart/         remove one line
- POST   /cart/clear/   empty the cart
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import exceptions, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from cart.serializers import (
    CartAddSerializer,
    CartItemSerializer,
    CartRemoveSerializer,
    CartUpdateSerializer,
)
from cart.services.cart import (
    CartItemNotFound,
    ProductUnavailableError,
    add_item,
    cart_summary,
    clear_cart,
    remove_item,
    update_item,
)
from products.models import Product
from users.services.exceptions import AccountServiceError
from users.services.sessions import resolve_session, session_token_from_request

SESSION_HEADER_PARAM = OpenApiParameter(
    "X-Session-Token",
    str,
    location=OpenApiParameter.HEADER,
    required=True,
)


class InvalidSession(exceptions.APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid or expired session."
    default_code = "invalid_session"


class SessionCartMixin:
    permission_classes = [AllowAny]

    def get_session(self, request):
        try:
            return resolve_session(session_token_from_request(request))
        except AccountServiceError as exc:
            raise InvalidSession(str(exc)) from exc

    def summary_response(self, session, *, status_code=status.HTTP_200_OK):
        summary = cart_summary(session)
        return Response(
            {
                "items": CartItemSerializer(summary["items"], many=True).data,
                "total": str(summary["total"]),
            },
            status=status_code,
        )


class CartView(SessionCartMixin, APIView):
    @extend_schema(parameters=[SESSION_HEADER_PARAM], responses={200: dict})
    def get(self, request):
        return self.summary_response(self.get_session(request))

    @extend_schema(parameters=[SESSION_HEADER_PARAM], request=CartAddSerializer, responses={201: dict})
    def post(self, request):
        session = self.get_session(request)
        serializer = CartAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        product = get_object_or_404(Product, pk=data["product_id"])
        try:
            add_item(
                session,
                product=product,
                quantity=data["quantity"],
                subscription_type=data["subscription_type"],
            )
        except ProductUnavailableError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return self.summary_response(session, status_code=status.HTTP_201_CREATED)

    @extend_schema(parameters=[SESSION_HEADER_PARAM], request=CartUpdateSerializer, responses={200: dict})
    def put(self, request):
        session = self.get_session(request)
        serializer = CartUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            update_item(
                session,
                item_id=data["cart_item_id"],
                quantity=data["quantity"],
                subscription_type=data["subscription_type"],
            )
        except CartItemNotFound as exc:
            raise exceptions.NotFound(str(exc)) from exc

        return self.summary_response(session)

    @extend_schema(parameters=[SESSION_HEADER_PARAM], request=CartRemoveSerializer, responses={200: dict})
    def delete(self, request):
        session = self.get_session(request)
        serializer = CartRemoveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            remove_item(session, item_id=serializer.validated_data["cart_item_id"])
        except CartItemNotFound as exc:
            raise exceptions.NotFound(str(exc)) from exc

        return self.summary_response(session)


class CartClearView(SessionCartMixin, APIView):
    @extend_schema(parameters=[SESSION_HEADER_PARAM], request=None, responses={200: dict})
    def post(self, request):
        session = self.get_session(request)
        clear_cart(session)
        return self.summary_response(session)
