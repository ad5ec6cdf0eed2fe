# payments/urls.py

from django.urls import path

from .views import (
    CheckoutConfirmationView,
    CheckoutView,
    PaymentMethodDetailView,
    PaymentMethodListView,
    StripeWebhookView,
)

app_name = "payments"

urlpatterns = [
    # ---------------- CHECKOUT ----------------
    path("checkout/", CheckoutView.as_view(), name="checkout"),
    path("checkout/webhook/", StripeWebhookView.as_view(), name="checkout-webhook"),
    path(
        "checkout/confirmation/",
        CheckoutConfirmationView.as_view(),
        name="checkout-confirmation",
    ),
    # ---------------- SAVED CARDS ----------------
    path(
        "users/<uuid:user_id>/payment-methods/",
        PaymentMethodListView.as_view(),
        name="payment-method-list",
    ),
    path(
        "users/<uuid:user_id>/payment-methods/<uuid:payment_method_id>/",
        PaymentMethodDetailView.as_view(),
        name="payment-method-detail",
    ),
]
