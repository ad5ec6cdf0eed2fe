# cart/admin.py

from django.contrib import admin

from cart.models import CartItem


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("session", "product", "quantity", "subscription_type", "created_at")
    list_filter = ("subscription_type",)
    search_fields = ("product__name", "session__session_token")
