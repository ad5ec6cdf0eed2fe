# orders/admin.py

from django.contrib import admin

from orders.models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = (
        "service_name",
        "quantity",
        "unit_price",
        "subscription_type",
        "subscription_status",
        "renewal_date",
    )


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("invoice_number", "user", "order_status", "total_amount", "order_date")
    list_filter = ("order_status",)
    search_fields = ("invoice_number", "user__email")
    readonly_fields = ("invoice_number", "subtotal", "total_amount", "created_at", "updated_at")
    inlines = [OrderItemInline]


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("service_name", "order", "subscription_type", "subscription_status", "renewal_date")
    list_filter = ("subscription_type", "subscription_status")
    search_fields = ("service_name", "order__invoice_number")
