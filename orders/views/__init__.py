from .history import (
    OrderInvoiceView,
    SubscriptionCancelView,
    SubscriptionDetailView,
    SubscriptionListView,
    SubscriptionRenewView,
    UserOrderListView,
)
from .orders import OrderViewSet

__all__ = [
    "OrderInvoiceView",
    "OrderViewSet",
    "SubscriptionCancelView",
    "SubscriptionDetailView",
    "SubscriptionListView",
    "SubscriptionRenewView",
    "UserOrderListView",
]
