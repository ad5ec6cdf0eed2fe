# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Back-office product management (CRUD, gated by products:*)
- Public storefront browsing (list/retrieve/top/search, AllowAny)

Key rules:
- Anonymous and customer callers only see active products
- Storefront order: available first, then priority_order
"""

import logging

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from permissions.roles import (
    PERM_PRODUCTS_CREATE,
    PERM_PRODUCTS_DELETE,
    PERM_PRODUCTS_EDIT,
    PERM_PRODUCTS_VIEW,
    HasPermission,
    user_has_permission,
)
from products.models import Product
from products.serializers import ProductSerializer
from products.services.catalog import DEFAULT_TOP_LIMIT, storefront_order, top_products
from products.services.search import SearchCriteria, SearchParamError, search_products

logger = logging.getLogger(__name__)

_WRITE_PERMISSIONS = {
    "create": PERM_PRODUCTS_CREATE,
    "update": PERM_PRODUCTS_EDIT,
    "partial_update": PERM_PRODUCTS_EDIT,
    "destroy": PERM_PRODUCTS_DELETE,
}


class ProductViewSet(viewsets.ModelViewSet):
    """
    Product endpoints.

    Staff:
    - CRUD

    Public:
    - GET /products/?category=<uuid>&available=true
    - GET /products/top/?limit=6
    - GET /products/search/?query=&description=&features=&minPrice=&maxPrice=&onlyAvailable=&category=
    """

    serializer_class = ProductSerializer
    filterset_fields = ["category", "available"]

    def _sees_inactive(self) -> bool:
        return user_has_permission(self.request.user, PERM_PRODUCTS_VIEW)

    def get_queryset(self):
        qs = Product.objects.select_related("category").prefetch_related("images")
        if not self._sees_inactive():
            qs = qs.filter(active=True)
        return storefront_order(qs)

    def get_permissions(self):
        if self.action in {"list", "retrieve", "top", "search"}:
            return [AllowAny()]

        self.required_permission = _WRITE_PERMISSIONS.get(self.action, PERM_PRODUCTS_EDIT)
        return [IsAuthenticated(), HasPermission()]

    def perform_create(self, serializer):
        product = serializer.save()
        logger.info(
            "Product created",
            extra={"product_id": str(product.id), "by": str(self.request.user.id)},
        )

    def perform_destroy(self, instance):
        logger.info(
            "Product deleted",
            extra={"product_id": str(instance.id), "by": str(self.request.user.id)},
        )
        instance.delete()

    @extend_schema(
        parameters=[OpenApiParameter("limit", int, required=False)],
        responses={200: ProductSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="top")
    def top(self, request):
        raw = request.query_params.get("limit") or DEFAULT_TOP_LIMIT
        try:
            limit = int(raw)
        except (TypeError, ValueError):
            return Response(
                {"detail": "limit must be an integer"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(ProductSerializer(top_products(limit), many=True).data)

    @extend_schema(
        parameters=[
            OpenApiParameter("query", str, required=False),
            OpenApiParameter("description", str, required=False),
            OpenApiParameter("features", str, required=False),
            OpenApiParameter("minPrice", float, required=False),
            OpenApiParameter("maxPrice", float, required=False),
            OpenApiParameter("onlyAvailable", bool, required=False),
            OpenApiParameter("category", str, required=False),
        ],
        responses={200: ProductSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request):
        try:
            criteria = SearchCriteria.from_query_params(request.query_params)
            results = search_products(criteria)
        except SearchParamError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ProductSerializer(results, many=True).data)
