# products/views/category.py

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from permissions.roles import (
    PERM_CATEGORIES_CREATE,
    PERM_CATEGORIES_DELETE,
    PERM_CATEGORIES_EDIT,
    PERM_CATEGORIES_VIEW,
    HasPermission,
    user_has_permission,
)
from products.models import Category, Product
from products.serializers import CategorySerializer, ProductSerializer
from products.services.catalog import (
    CategoryInUseError,
    delete_category,
    storefront_order,
    toggle_category,
)

_WRITE_PERMISSIONS = {
    "create": PERM_CATEGORIES_CREATE,
    "update": PERM_CATEGORIES_EDIT,
    "partial_update": PERM_CATEGORIES_EDIT,
    "toggle": PERM_CATEGORIES_EDIT,
    "destroy": PERM_CATEGORIES_DELETE,
}


class CategoryViewSet(viewsets.ModelViewSet):
    """
    Category API

    Policy:
    - Anyone can READ categories; anonymous/customer callers only see active ones
    - categories:view unlocks inactive categories
    - Writes require the matching categories:* permission
    """

    serializer_class = CategorySerializer
    filterset_fields = ["active"]

    def get_queryset(self):
        qs = Category.objects.all().order_by("name")
        if not user_has_permission(self.request.user, PERM_CATEGORIES_VIEW):
            qs = qs.filter(active=True)
        return qs

    def get_permissions(self):
        if self.action in {"list", "retrieve", "products"}:
            return [AllowAny()]

        self.required_permission = _WRITE_PERMISSIONS.get(self.action, PERM_CATEGORIES_EDIT)
        return [IsAuthenticated(), HasPermission()]

    def _name_taken(self, name, *, exclude_pk=None):
        qs = Category.objects.filter(name__iexact=name)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        return qs.exists()

    def _duplicate_response(self):
        return Response(
            {"detail": "A category with this name already exists."},
            status=status.HTTP_409_CONFLICT,
        )

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if self._name_taken(serializer.validated_data["name"]):
            return self._duplicate_response()

        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        name = serializer.validated_data.get("name")
        if name and self._name_taken(name, exclude_pk=instance.pk):
            return self._duplicate_response()

        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, *args, **kwargs):
        category = self.get_object()
        try:
            delete_category(category)
        except CategoryInUseError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: dict})
    @action(detail=True, methods=["post"], url_path="toggle")
    def toggle(self, request, pk=None):
        """Flip `active` on the category and all of its products."""
        category = self.get_object()
        return Response(toggle_category(category))

    @extend_schema(responses={200: ProductSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="products")
    def products(self, request, pk=None):
        category = self.get_object()
        qs = storefront_order(
            Product.objects.filter(category=category, active=True)
        ).select_related("category").prefetch_related("images")
        return Response(ProductSerializer(qs, many=True).data)
