# users/views/sessions.py
"""
STOREFRONT SESSIONS

- POST /sessions/            public; linked to the caller when a JWT is sent
- GET /sessions/<token>/     404 unknown, 401 expired
- DELETE /sessions/<token>/  removes the session (cart items cascade)
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from users.models import Session
from users.serializers import SessionSerializer
from users.services.sessions import create_session


class PublicWriteThrottle(AnonRateThrottle):
    scope = "public_write"


class SessionCreateView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [PublicWriteThrottle]

    @extend_schema(request=None, responses={201: SessionSerializer})
    def post(self, request):
        session = create_session(request.user)
        return Response(SessionSerializer(session).data, status=status.HTTP_201_CREATED)


class SessionDetailView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: SessionSerializer})
    def get(self, request, session_token):
        session = get_object_or_404(Session, session_token=session_token)
        if session.is_expired:
            return Response(
                {"detail": "Session has expired."},
                status=status.HTTP_401_UNAUTHORIZED,
            )
        return Response(SessionSerializer(session).data)

    @extend_schema(responses={204: None})
    def delete(self, request, session_token):
        session = get_object_or_404(Session, session_token=session_token)
        session.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
