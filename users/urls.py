# users/urls.py

from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    AddressDetailView,
    AddressListView,
    LoginView,
    MeView,
    PasswordResetConfirmView,
    PasswordResetRequestView,
    RegisterView,
    ResendVerificationView,
    SessionCreateView,
    SessionDetailView,
    UserViewSet,
    VerifyEmailView,
)

app_name = "users"

router = DefaultRouter()
router.include_root_view = False
router.register("users", UserViewSet, basename="user")

urlpatterns = [
    # ---------------- PUBLIC AUTH ----------------
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/verify-email/", VerifyEmailView.as_view(), name="verify-email"),
    path("auth/password-reset/", PasswordResetRequestView.as_view(), name="password-reset"),
    path(
        "auth/password-reset/confirm/",
        PasswordResetConfirmView.as_view(),
        name="password-reset-confirm",
    ),
    # ---------------- AUTHENTICATED ----------------
    path("auth/me/", MeView.as_view(), name="me"),
    path(
        "auth/resend-verification/",
        ResendVerificationView.as_view(),
        name="resend-verification",
    ),
    # ---------------- STOREFRONT SESSIONS ----------------
    path("sessions/", SessionCreateView.as_view(), name="session-create"),
    path("sessions/<str:session_token>/", SessionDetailView.as_view(), name="session-detail"),
    # ---------------- ADDRESSES ----------------
    path("users/<uuid:user_id>/addresses/", AddressListView.as_view(), name="address-list"),
    path(
        "users/<uuid:user_id>/addresses/<uuid:address_id>/",
        AddressDetailView.as_view(),
        name="address-detail",
    ),
]

urlpatterns += router.urls
