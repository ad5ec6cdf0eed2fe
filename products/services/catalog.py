# products/services/catalog.py

"""
CATALOG SERVICES

- storefront ordering: available first, then priority_order
- category toggle with product cascade (one transaction)
- category delete guard
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models import QuerySet

from products.models import Category, Product

logger = logging.getLogger(__name__)

DEFAULT_TOP_LIMIT = 6
MAX_TOP_LIMIT = 50


class CatalogError(Exception):
    """Base error for catalog operations."""


class CategoryInUseError(CatalogError):
    """Raised when deleting a category that still has products."""


def storefront_order(qs: QuerySet) -> QuerySet:
    return qs.order_by("-available", "priority_order", "name")


def top_products(limit: int = DEFAULT_TOP_LIMIT) -> QuerySet:
    limit = max(1, min(int(limit), MAX_TOP_LIMIT))
    qs = Product.objects.filter(active=True, category__active=True)
    return storefront_order(qs).select_related("category").prefetch_related("images")[:limit]


@transaction.atomic
def toggle_category(category: Category) -> dict:
    category = Category.objects.select_for_update().get(pk=category.pk)
    category.active = not category.active
    category.save(update_fields=["active", "updated_at"])

    updated = Product.objects.filter(category=category).update(active=category.active)

    logger.info(
        "Category toggled",
        extra={
            "category_id": str(category.id),
            "active": category.active,
            "products_updated": updated,
        },
    )
    return {"active": category.active, "products_updated": updated}


def delete_category(category: Category) -> None:
    if Product.objects.filter(category=category).exists():
        raise CategoryInUseError("Category still has products. Move or delete them first.")
    logger.info("Category deleted", extra={"category_id": str(category.id)})
    category.delete()
