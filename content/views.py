# content/views.py

import logging

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from content.models import HeroCarouselSlide, MainMessage
from content.serializers import HeroCarouselSlideSerializer, MainMessageSerializer
from permissions.roles import (
    PERM_HERO_CAROUSEL_CREATE,
    PERM_HERO_CAROUSEL_DELETE,
    PERM_HERO_CAROUSEL_EDIT,
    PERM_HERO_CAROUSEL_VIEW,
    PERM_MAIN_MESSAGE_CREATE,
    PERM_MAIN_MESSAGE_DELETE,
    PERM_MAIN_MESSAGE_EDIT,
    PERM_MAIN_MESSAGE_VIEW,
    HasPermission,
    user_has_permission,
)

logger = logging.getLogger(__name__)

_SLIDE_PERMISSIONS = {
    "create": PERM_HERO_CAROUSEL_CREATE,
    "update": PERM_HERO_CAROUSEL_EDIT,
    "partial_update": PERM_HERO_CAROUSEL_EDIT,
    "destroy": PERM_HERO_CAROUSEL_DELETE,
}

_MESSAGE_PERMISSIONS = {
    "list": PERM_MAIN_MESSAGE_VIEW,
    "retrieve": PERM_MAIN_MESSAGE_VIEW,
    "create": PERM_MAIN_MESSAGE_CREATE,
    "update": PERM_MAIN_MESSAGE_EDIT,
    "partial_update": PERM_MAIN_MESSAGE_EDIT,
    "destroy": PERM_MAIN_MESSAGE_DELETE,
}


class HeroCarouselSlideViewSet(viewsets.ModelViewSet):
    """
    Hero carousel API

    Policy:
    - Anyone can READ slides; the list only shows active ones
    - hero-carousel:view holders may ask for ?all=true
    - Writes require the matching hero-carousel:* permission
    """

    serializer_class = HeroCarouselSlideSerializer
    pagination_class = None

    def get_queryset(self):
        qs = HeroCarouselSlide.objects.all().order_by("priority_order", "created_at")
        if self.action != "list":
            return qs

        wants_all = (self.request.query_params.get("all") or "").lower() in {"1", "true", "yes"}
        if wants_all and user_has_permission(self.request.user, PERM_HERO_CAROUSEL_VIEW):
            return qs
        return qs.filter(active=True)

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            return [AllowAny()]

        self.required_permission = _SLIDE_PERMISSIONS.get(self.action, PERM_HERO_CAROUSEL_EDIT)
        return [IsAuthenticated(), HasPermission()]

    @extend_schema(parameters=[OpenApiParameter("all", bool, required=False)])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def perform_destroy(self, instance):
        logger.info("Carousel slide deleted", extra={"slide_id": str(instance.id)})
        instance.delete()


class MainMessageViewSet(viewsets.ModelViewSet):
    """
    Main message API

    Policy:
    - GET active/ is public
    - everything else requires the matching main-message:* permission
    """

    serializer_class = MainMessageSerializer
    queryset = MainMessage.objects.all()
    filterset_fields = ["active"]

    def get_permissions(self):
        if self.action == "active":
            return [AllowAny()]

        self.required_permission = _MESSAGE_PERMISSIONS.get(self.action, PERM_MAIN_MESSAGE_EDIT)
        return [IsAuthenticated(), HasPermission()]

    @extend_schema(responses={200: MainMessageSerializer})
    @action(detail=False, methods=["get"], url_path="active")
    def active(self, request):
        """Active banner message, or every field null when none is active."""
        message = MainMessage.current()
        if message is None:
            return Response({name: None for name in MainMessageSerializer.Meta.fields})
        return Response(MainMessageSerializer(message).data)

    def perform_destroy(self, instance):
        logger.info("Main message deleted", extra={"message_id": str(instance.id)})
        instance.delete()
