from .checkout import CheckoutConfirmationView, CheckoutView, StripeWebhookView
from .payment_methods import PaymentMethodDetailView, PaymentMethodListView

__all__ = [
    "CheckoutConfirmationView",
    "CheckoutView",
    "PaymentMethodDetailView",
    "PaymentMethodListView",
    "StripeWebhookView",
]
