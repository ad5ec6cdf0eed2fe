"""
PATH: users/ownership.py

Per-user resource access (/api/users/<id>/...):
- the owner always passes
- another user passes only with the given staff permission (read routes)
- everyone else gets 403
"""

from __future__ import annotations

import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework.exceptions import PermissionDenied

from permissions.roles import user_has_permission

logger = logging.getLogger(__name__)

User = get_user_model()


def resolve_owner(request, user_id, *, staff_permission: Optional[str] = None):
    """
    Return the user that owns the nested resource, or raise.
    """
    caller = request.user

    if str(caller.pk) == str(user_id):
        return caller

    if staff_permission and user_has_permission(caller, staff_permission):
        return get_object_or_404(User, pk=user_id)

    logger.warning(
        "Cross-user access refused",
        extra={"caller_id": str(caller.pk), "target_user_id": str(user_id), "path": request.path},
    )
    raise PermissionDenied("You cannot access another user's resources.")
