# contact/views.py
"""
CONTACT MESSAGES

Public:
- POST /contact-messages/                  (throttled, public_write)

Back office:
- GET    /contact-messages/                contact:view
- GET    /contact-messages/<id>/           contact:view
- GET    /contact-messages/unread/         contact:view
- GET    /contact-messages/stats/          contact:view
- POST   /contact-messages/<id>/mark-read/ contact:respond
- POST   /contact-messages/<id>/respond/   contact:respond (emails the sender)
- DELETE /contact-messages/<id>/           contact:delete
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from contact import services as contact_services
from contact.models import ContactMessage
from contact.serializers import (
    ContactMessageSerializer,
    ContactResponseSerializer,
    ContactStatsSerializer,
)
from permissions.roles import (
    PERM_CONTACT_DELETE,
    PERM_CONTACT_RESPOND,
    PERM_CONTACT_VIEW,
    HasPermission,
)
from users.views.sessions import PublicWriteThrottle

logger = logging.getLogger(__name__)

_ACTION_PERMISSIONS = {
    "list": PERM_CONTACT_VIEW,
    "retrieve": PERM_CONTACT_VIEW,
    "unread": PERM_CONTACT_VIEW,
    "stats": PERM_CONTACT_VIEW,
    "mark_read": PERM_CONTACT_RESPOND,
    "respond": PERM_CONTACT_RESPOND,
    "destroy": PERM_CONTACT_DELETE,
}


class ContactMessageViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = ContactMessage.objects.all().order_by("-sent_date")
    serializer_class = ContactMessageSerializer
    filterset_fields = ["is_read", "is_responded"]

    def get_permissions(self):
        if self.action == "create":
            return [AllowAny()]
        self.required_permission = _ACTION_PERMISSIONS.get(self.action, PERM_CONTACT_RESPOND)
        return [IsAuthenticated(), HasPermission()]

    def get_throttles(self):
        if self.action == "create":
            return [PublicWriteThrottle()]
        return super().get_throttles()

    def perform_create(self, serializer):
        serializer.instance = contact_services.file_message(
            user=self.request.user,
            **serializer.validated_data,
        )

    @action(detail=False, methods=["get"])
    def unread(self, request):
        qs = self.filter_queryset(self.get_queryset().filter(is_read=False))
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data)

    @extend_schema(responses={200: ContactStatsSerializer})
    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(ContactStatsSerializer(contact_services.stats()).data)

    @extend_schema(request=None, responses={200: ContactMessageSerializer})
    @action(detail=True, methods=["post"], url_path="mark-read")
    def mark_read(self, request, pk=None):
        contact = contact_services.mark_read(self.get_object())
        return Response(self.get_serializer(contact).data)

    @extend_schema(request=ContactResponseSerializer, responses={200: ContactMessageSerializer})
    @action(detail=True, methods=["post"])
    def respond(self, request, pk=None):
        contact = self.get_object()
        serializer = ContactResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            contact = contact_services.respond(
                contact,
                response=serializer.validated_data["response"],
                responder=request.user,
            )
        except contact_services.EmptyResponseError as exc:
            raise serializers.ValidationError({"response": [str(exc)]}) from exc

        return Response(self.get_serializer(contact).data, status=status.HTTP_200_OK)

    def perform_destroy(self, instance):
        logger.info(
            "Contact message deleted",
            extra={"contact_message_id": str(instance.id), "by": str(self.request.user.id)},
        )
        instance.delete()
