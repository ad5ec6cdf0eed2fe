# cyna/exceptions.py
"""
PATH: cyna/exceptions.py

API ERROR HANDLER

Wraps DRF's default handler:
- DRF exceptions (400/401/403/404/405/409/429...) keep their normal payloads
- Django ValidationError (raised from model.clean / full_clean) becomes 400
- Anything else becomes a generic 500; the real error is only logged
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error."


def _django_validation_payload(exc: DjangoValidationError):
    if hasattr(exc, "error_dict"):
        return exc.message_dict
    return {"detail": exc.messages}


def api_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        set_rollback()
        return Response(
            _django_validation_payload(exc),
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    request = context.get("request")
    logger.exception(
        "Unhandled API error",
        extra={
            "view": view.__class__.__name__ if view is not None else None,
            "path": getattr(request, "path", None),
            "method": getattr(request, "method", None),
        },
    )
    set_rollback()
    return Response(
        {"detail": GENERIC_SERVER_ERROR},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
