# contact/urls.py

from rest_framework.routers import DefaultRouter

from contact.views import ContactMessageViewSet

app_name = "contact"

router = DefaultRouter()
router.include_root_view = False
router.register("contact-messages", ContactMessageViewSet, basename="contact-message")

urlpatterns = router.urls
