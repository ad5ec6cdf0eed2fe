# content/urls.py

"""
STOREFRONT CONTENT URLS

- /api/hero-carousel/
- /api/main-message/               (+ active/)
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from content.views import HeroCarouselSlideViewSet, MainMessageViewSet

app_name = "content"

router = DefaultRouter()
router.include_root_view = False

router.register(r"hero-carousel", HeroCarouselSlideViewSet, basename="hero-carousel")
router.register(r"main-message", MainMessageViewSet, basename="main-message")

urlpatterns = [
    path("", include(router.urls)),
]
