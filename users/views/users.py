# users/views/users.py

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import (
    PERM_USERS_CREATE,
    PERM_USERS_DELETE,
    PERM_USERS_EDIT,
    PERM_USERS_VIEW,
    HasPermission,
)
from users.serializers import AdminUserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()

_ACTION_PERMISSIONS = {
    "list": PERM_USERS_VIEW,
    "retrieve": PERM_USERS_VIEW,
    "create": PERM_USERS_CREATE,
    "update": PERM_USERS_EDIT,
    "partial_update": PERM_USERS_EDIT,
    "destroy": PERM_USERS_DELETE,
}


class UserViewSet(viewsets.ModelViewSet):
    """
    Back-office user administration.

    Policy:
    - users:view to read, users:create / users:edit / users:delete to write
    - nobody deletes their own account from here (409)
    """

    queryset = User.objects.all().order_by("-created_at")
    serializer_class = AdminUserSerializer
    filterset_fields = ["role", "is_active", "email_verified"]

    def get_permissions(self):
        self.required_permission = _ACTION_PERMISSIONS.get(self.action, PERM_USERS_EDIT)
        return [IsAuthenticated(), HasPermission()]

    def perform_create(self, serializer):
        user = serializer.save()
        logger.info(
            "User created from back office",
            extra={"user_id": str(user.id), "role": user.role, "by": str(self.request.user.id)},
        )

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            return Response(
                {"detail": "You cannot delete your own account."},
                status=status.HTTP_409_CONFLICT,
            )

        logger.info(
            "User deleted from back office",
            extra={"user_id": str(user.id), "by": str(request.user.id)},
        )
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
