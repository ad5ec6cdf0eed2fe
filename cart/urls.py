# cart/urls.py

from django.urls import path

from cart.views import CartClearView, CartView

app_name = "cart"

urlpatterns = [
    path("cart/", CartView.as_view(), name="cart"),
    path("cart/clear/", CartClearView.as_view(), name="cart-clear"),
]
