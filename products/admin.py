# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Catalog admin:
- Category list with product counts
- Product page with its carousel images inline
- Availability rule (stock 0 => not available) is enforced by Product.clean(),
  which ModelAdmin forms call, so errors render inline.
"""

from __future__ import annotations

from django.contrib import admin
from django.db.models import Count

from products.models import Category, Product, ProductImage


# =====================================================
# CATEGORY
# =====================================================

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "active", "priority_order", "product_total")
    list_filter = ("active",)
    search_fields = ("name",)
    ordering = ("name",)

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(_product_total=Count("products"))

    def product_total(self, obj):
        return obj._product_total

    product_total.short_description = "Products"
    product_total.admin_order_field = "_product_total"


# =====================================================
# PRODUCT
# =====================================================

class ProductImageInline(admin.TabularInline):
    model = ProductImage
    extra = 1
    fields = ("url", "alt", "position")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "category",
        "unit_price",
        "discount_price",
        "stock",
        "available",
        "active",
        "priority_order",
    )
    list_filter = ("active", "available", "category")
    search_fields = ("name", "description", "technical_specs")
    ordering = ("-available", "priority_order")
    readonly_fields = ("created_at", "updated_at")

    inlines = [ProductImageInline]
