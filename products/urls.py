# products/urls.py

"""
CATALOG URLS

- /api/categories/                 (+ <id>/toggle/, <id>/products/)
- /api/products/                   (+ top/, search/)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from products.views import CategoryViewSet, ProductViewSet

app_name = "products"

router = DefaultRouter()
router.include_root_view = False

router.register(r"categories", CategoryViewSet, basename="category")
router.register(r"products", ProductViewSet, basename="product")

urlpatterns = [
    path("", include(router.urls)),
]
