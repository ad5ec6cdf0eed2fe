# users/views/auth.py
"""
USER AUTH VIEWS

- Register: public, always creates a customer, sends the verification email
- Login: email + password -> JWT pair + user payload (401 on bad credentials)
- Me: read / update own profile; an email change is parked until verified

Throttling:
- register/login share the "auth" scope (anonymous, per IP)
"""

from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from users.serializers import (
    LoginSerializer,
    MeUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)
from users.services.accounts import issue_email_verification

logger = logging.getLogger(__name__)


# ---------------- THROTTLES (TARGETED) ----------------
class AuthAnonThrottle(AnonRateThrottle):
    scope = "auth"


# ---------------- REGISTER ----------------
class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AuthAnonThrottle]

    @extend_schema(
        request=RegisterSerializer,
        responses={201: UserSerializer},
        description="Register a customer account and send the verification email",
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("User registered", extra={"user_id": str(user.id)})

        # The account stands even when delivery fails; resend-verification retries.
        try:
            issue_email_verification(user)
        except OSError:
            logger.exception("Verification email failed", extra={"user_id": str(user.id)})

        return Response(
            {
                "message": "User registered successfully. Check your inbox to verify your email.",
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


# ---------------- LOGIN (JWT + EMAIL) ----------------
class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AuthAnonThrottle]

    @extend_schema(
        request=LoginSerializer,
        responses={200: dict},
        description="Authenticate with email and password, returns a JWT pair",
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate(
            request=request,
            username=serializer.validated_data["email"].strip().lower(),
            password=serializer.validated_data["password"],
        )

        if user is None:
            logger.info("Login refused")
            return Response(
                {"detail": "Invalid email or password"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        refresh = RefreshToken.for_user(user)

        return Response(
            {
                "access": str(refresh.access_token),
                "refresh": str(refresh),
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )


# ---------------- CURRENT USER ----------------
class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserSerializer}, description="Current user profile")
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        request=MeUpdateSerializer,
        responses={200: UserSerializer},
        description="Update own names; a new email is applied once verified",
    )
    def patch(self, request):
        serializer = MeUpdateSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = request.user
        for field in ("first_name", "last_name"):
            if field in data:
                setattr(user, field, data[field])
        user.save()

        pending_email = None
        new_email = data.get("email")
        if new_email and new_email != user.email:
            issue_email_verification(user, new_email=new_email)
            pending_email = new_email

        payload = UserSerializer(user).data
        payload["pending_email"] = pending_email
        return Response(payload)
