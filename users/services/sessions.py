# users/services/sessions.py

from __future__ import annotations

import logging

from users.models import Session
from users.services.exceptions import InvalidTokenError, SessionExpiredError

logger = logging.getLogger(__name__)

SESSION_HEADER = "HTTP_X_SESSION_TOKEN"


def create_session(user=None) -> Session:
    if user is not None and not getattr(user, "is_authenticated", False):
        user = None
    session = Session.objects.create(user=user)
    logger.info(
        "Storefront session created",
        extra={"session_id": str(session.id), "user_id": str(user.id) if user else None},
    )
    return session


def resolve_session(token: str) -> Session:
    """
    Live session for a token.
    Raises InvalidTokenError (unknown) or SessionExpiredError (past expires_at).
    """
    token = (token or "").strip()
    if not token:
        raise InvalidTokenError("Session token is required.")

    session = Session.objects.select_related("user").filter(session_token=token).first()
    if session is None:
        raise InvalidTokenError("Invalid session token.")
    if session.is_expired:
        raise SessionExpiredError("Session has expired.")
    return session


def session_token_from_request(request) -> str:
    return (request.META.get(SESSION_HEADER) or "").strip()
