# users/views/verification.py
"""
EMAIL VERIFICATION + PASSWORD RESET

- verify-email: consume a verification token (400 when missing/unknown/expired)
- resend-verification: authenticated, replaces pending tokens
- password-reset: always 200 with the same message
- password-reset/confirm: consume a reset token and set the password
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from users.serializers import (
    PasswordResetConfirmSerializer,
    PasswordResetRequestSerializer,
    TokenSerializer,
    UserSerializer,
)
from users.services.accounts import (
    confirm_password_reset,
    issue_email_verification,
    request_password_reset,
    verify_email,
)
from users.services.exceptions import AccountServiceError
from users.views.auth import AuthAnonThrottle

PASSWORD_RESET_GENERIC_MESSAGE = (
    "If an account exists for this email, a reset link has been sent."
)


class VerifyEmailView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=TokenSerializer, responses={200: UserSerializer})
    def post(self, request):
        serializer = TokenSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = verify_email(serializer.validated_data["token"])
        except AccountServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {"message": "Email verified successfully.", "user": UserSerializer(user).data}
        )


class ResendVerificationView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: dict})
    def post(self, request):
        if request.user.email_verified:
            return Response({"message": "Email already verified."})

        issue_email_verification(request.user)
        return Response({"message": "Verification email sent."})


class PasswordResetRequestView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AuthAnonThrottle]

    @extend_schema(request=PasswordResetRequestSerializer, responses={200: dict})
    def post(self, request):
        serializer = PasswordResetRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        request_password_reset(serializer.validated_data["email"])
        return Response({"message": PASSWORD_RESET_GENERIC_MESSAGE})


class PasswordResetConfirmView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AuthAnonThrottle]

    @extend_schema(request=PasswordResetConfirmSerializer, responses={200: dict})
    def post(self, request):
        serializer = PasswordResetConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            confirm_password_reset(
                serializer.validated_data["token"],
                serializer.validated_data["password"],
            )
        except AccountServiceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({"message": "Password updated successfully."})
