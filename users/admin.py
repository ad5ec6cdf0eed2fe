# users/admin.py

"""
USERS ADMIN REGISTRATION

Custom User + storefront sessions + addresses in Django Admin.
Account tokens are deliberately left out (secrets).
"""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from users.models import Address, Session

User = get_user_model()


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    ordering = ("email",)
    list_display = ("email", "role", "email_verified", "is_staff", "is_active")
    list_filter = ("role", "email_verified", "is_staff", "is_active")
    search_fields = ("email", "first_name", "last_name")

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("first_name", "last_name", "role", "email_verified")}),
        ("Billing", {"fields": ("stripe_customer_id",)}),
        (
            "Permissions",
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                )
            },
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": (
                    "email",
                    "password1",
                    "password2",
                    "role",
                    "is_staff",
                    "is_active",
                ),
            },
        ),
    )


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    list_display = ("session_token", "user", "expires_at", "created_at")
    search_fields = ("session_token", "user__email")
    readonly_fields = ("session_token", "created_at")


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("user", "address1", "city", "country", "is_default_billing", "is_default_shipping")
    search_fields = ("user__email", "city", "postal_code")
