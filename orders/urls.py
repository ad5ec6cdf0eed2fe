# orders/urls.py

from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    OrderInvoiceView,
    OrderViewSet,
    SubscriptionCancelView,
    SubscriptionDetailView,
    SubscriptionListView,
    SubscriptionRenewView,
    UserOrderListView,
)

app_name = "orders"

router = DefaultRouter()
router.include_root_view = False
router.register("orders", OrderViewSet, basename="order")

urlpatterns = [
    path("users/<uuid:user_id>/orders/", UserOrderListView.as_view(), name="user-orders"),
    path(
        "users/<uuid:user_id>/orders/<uuid:order_id>/invoice/",
        OrderInvoiceView.as_view(),
        name="order-invoice",
    ),
    path(
        "users/<uuid:user_id>/subscriptions/",
        SubscriptionListView.as_view(),
        name="subscription-list",
    ),
    path(
        "users/<uuid:user_id>/subscriptions/renew/",
        SubscriptionRenewView.as_view(),
        name="subscription-renew",
    ),
    path(
        "users/<uuid:user_id>/subscriptions/<uuid:subscription_id>/",
        SubscriptionDetailView.as_view(),
        name="subscription-detail",
    ),
    path(
        "users/<uuid:user_id>/subscriptions/<uuid:subscription_id>/cancel/",
        SubscriptionCancelView.as_view(),
        name="subscription-cancel",
    ),
]

urlpatterns += router.urls
