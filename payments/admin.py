# payments/admin.py

from django.contrib import admin

from payments.models import PaymentMethod, Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("provider_checkout_id", "user", "amount", "currency", "status", "created_at")
    list_filter = ("status", "currency")
    search_fields = ("provider_checkout_id", "user__email")
    readonly_fields = ("cart_snapshot", "provider_payload", "created_at", "updated_at")


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ("user", "brand", "last_card_digits", "is_default", "created_at")
    list_filter = ("brand", "is_default")
    search_fields = ("user__email", "card_name")
