from .addresses import AddressDetailView, AddressListView
from .auth import LoginView, MeView, RegisterView
from .sessions import SessionCreateView, SessionDetailView
from .users import UserViewSet
from .verification import (
    PasswordResetConfirmView,
    PasswordResetRequestView,
    ResendVerificationView,
    VerifyEmailView,
)

__all__ = [
    "RegisterView",
    "LoginView",
    "MeView",
    "VerifyEmailView",
    "ResendVerificationView",
    "PasswordResetRequestView",
    "PasswordResetConfirmView",
    "UserViewSet",
    "SessionCreateView",
    "SessionDetailView",
    "AddressListView",
    "AddressDetailView",
]
