# permissions/roles.py

from __future__ import annotations

import logging
from typing import Iterable, Optional

from rest_framework import exceptions, status
from rest_framework.permissions import BasePermission

logger = logging.getLogger(__name__)


# =========================================================
# ROLE CONSTANTS
# =========================================================
ROLE_CUSTOMER = "customer"
ROLE_MANAGER = "manager"
ROLE_ADMIN = "admin"
ROLE_SUPER_ADMIN = "super_admin"

ROLE_CHOICES = [
    (ROLE_CUSTOMER, "Customer"),
    (ROLE_MANAGER, "Manager"),
    (ROLE_ADMIN, "Admin"),
    (ROLE_SUPER_ADMIN, "Super admin"),
]

# Back-office roles (chatbot inbox, staff flag on the user model)
STAFF_ROLES = {
    ROLE_MANAGER,
    ROLE_ADMIN,
    ROLE_SUPER_ADMIN,
}


# =========================================================
# PERMISSION STRINGS ("<resource>:<action>")
# =========================================================
PERM_DASHBOARD_VIEW = "dashboard:view"

PERM_PRODUCTS_VIEW = "products:view"
PERM_PRODUCTS_CREATE = "products:create"
PERM_PRODUCTS_EDIT = "products:edit"
PERM_PRODUCTS_DELETE = "products:delete"

PERM_CATEGORIES_VIEW = "categories:view"
PERM_CATEGORIES_CREATE = "categories:create"
PERM_CATEGORIES_EDIT = "categories:edit"
PERM_CATEGORIES_DELETE = "categories:delete"

PERM_HERO_CAROUSEL_VIEW = "hero-carousel:view"
PERM_HERO_CAROUSEL_CREATE = "hero-carousel:create"
PERM_HERO_CAROUSEL_EDIT = "hero-carousel:edit"
PERM_HERO_CAROUSEL_DELETE = "hero-carousel:delete"

PERM_MAIN_MESSAGE_VIEW = "main-message:view"
PERM_MAIN_MESSAGE_CREATE = "main-message:create"
PERM_MAIN_MESSAGE_EDIT = "main-message:edit"
PERM_MAIN_MESSAGE_DELETE = "main-message:delete"

PERM_USERS_VIEW = "users:view"
PERM_USERS_CREATE = "users:create"
PERM_USERS_EDIT = "users:edit"
PERM_USERS_DELETE = "users:delete"

PERM_ORDERS_VIEW = "orders:view"
PERM_ORDERS_CREATE = "orders:create"
PERM_ORDERS_EDIT = "orders:edit"
PERM_ORDERS_DELETE = "orders:delete"

PERM_CONTACT_VIEW = "contact:view"
PERM_CONTACT_RESPOND = "contact:respond"
PERM_CONTACT_DELETE = "contact:delete"

PERM_PROFILE_EDIT = "profile:edit"

ALL_PERMISSIONS = {
    PERM_DASHBOARD_VIEW,
    PERM_PRODUCTS_VIEW,
    PERM_PRODUCTS_CREATE,
    PERM_PRODUCTS_EDIT,
    PERM_PRODUCTS_DELETE,
    PERM_CATEGORIES_VIEW,
    PERM_CATEGORIES_CREATE,
    PERM_CATEGORIES_EDIT,
    PERM_CATEGORIES_DELETE,
    PERM_HERO_CAROUSEL_VIEW,
    PERM_HERO_CAROUSEL_CREATE,
    PERM_HERO_CAROUSEL_EDIT,
    PERM_HERO_CAROUSEL_DELETE,
    PERM_MAIN_MESSAGE_VIEW,
    PERM_MAIN_MESSAGE_CREATE,
    PERM_MAIN_MESSAGE_EDIT,
    PERM_MAIN_MESSAGE_DELETE,
    PERM_USERS_VIEW,
    PERM_USERS_CREATE,
    PERM_USERS_EDIT,
    PERM_USERS_DELETE,
    PERM_ORDERS_VIEW,
    PERM_ORDERS_CREATE,
    PERM_ORDERS_EDIT,
    PERM_ORDERS_DELETE,
    PERM_CONTACT_VIEW,
    PERM_CONTACT_RESPOND,
    PERM_CONTACT_DELETE,
    PERM_PROFILE_EDIT,
}


# =========================================================
# ROLE → PERMISSION MAP
# =========================================================
_ADMIN_PERMISSIONS = {
    PERM_DASHBOARD_VIEW,
    PERM_PRODUCTS_VIEW,
    PERM_PRODUCTS_CREATE,
    PERM_PRODUCTS_EDIT,
    PERM_PRODUCTS_DELETE,
    PERM_CATEGORIES_VIEW,
    PERM_CATEGORIES_CREATE,
    PERM_CATEGORIES_EDIT,
    PERM_CATEGORIES_DELETE,
    PERM_HERO_CAROUSEL_VIEW,
    PERM_HERO_CAROUSEL_CREATE,
    PERM_HERO_CAROUSEL_EDIT,
    PERM_HERO_CAROUSEL_DELETE,
    PERM_MAIN_MESSAGE_VIEW,
    PERM_MAIN_MESSAGE_CREATE,
    PERM_MAIN_MESSAGE_EDIT,
    PERM_MAIN_MESSAGE_DELETE,
    PERM_USERS_VIEW,
    PERM_USERS_EDIT,
    PERM_ORDERS_VIEW,
    PERM_CONTACT_VIEW,
    PERM_CONTACT_RESPOND,
    PERM_CONTACT_DELETE,
}

ROLE_PERMISSIONS: dict[str, set[str]] = {
    ROLE_CUSTOMER: {
        PERM_PROFILE_EDIT,
    },
    ROLE_MANAGER: {
        PERM_DASHBOARD_VIEW,
        PERM_PRODUCTS_VIEW,
        PERM_CATEGORIES_VIEW,
        PERM_ORDERS_VIEW,
        PERM_CONTACT_VIEW,
        PERM_CONTACT_RESPOND,
    },
    ROLE_ADMIN: _ADMIN_PERMISSIONS,
    ROLE_SUPER_ADMIN: {
        # super admin can do everything (incl. users:create/delete, orders:*)
        *ALL_PERMISSIONS,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def permissions_for(role: Optional[str]) -> set[str]:
    return set(ROLE_PERMISSIONS.get(role or "", set()))


def has_permission(role: Optional[str], permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(role or "", set())


def user_has_permission(user, permission: str) -> bool:
    """
    True only for an authenticated user whose role grants `permission`.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return has_permission(get_user_role(user), permission)


def user_has_any_permission(user, permissions: Iterable[str]) -> bool:
    return any(user_has_permission(user, p) for p in permissions)


# =========================================================
# Errors
# =========================================================
class InsufficientPermission(exceptions.APIException):
    """
    Raised when an authenticated user's role lacks the route's permission.

    Role-gated routes answer 401 both for anonymous callers and for
    callers without the required role.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "You are not authorized to perform this action."
    default_code = "insufficient_permission"


def _deny(request, view, required) -> None:
    user = request.user
    logger.info(
        "Permission refused",
        extra={
            "user_id": str(getattr(user, "id", "")),
            "role": get_user_role(user),
            "required": sorted(required) if isinstance(required, (set, list, tuple)) else required,
            "view": view.__class__.__name__ if view is not None else None,
        },
    )
    raise InsufficientPermission()


# =========================================================
# Base Role Permission
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Base permission for role-based access control.

    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        if get_user_role(user) not in self.allowed_roles:
            _deny(request, view, self.allowed_roles)

        return True


# =========================================================
# Permission-string guards
# =========================================================
class HasPermission(BasePermission):
    """
    Require a specific permission string.

    Usage:
        permission_classes = [HasPermission]
        required_permission = PERM_CONTACT_RESPOND
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_permission", None)
        if not required:
            # deny-by-default when a view forgot to declare its permission
            _deny(request, view, required)

        if not has_permission(get_user_role(user), required):
            _deny(request, view, required)

        return True


class HasAnyPermission(BasePermission):
    """
    Require ANY permission string from a set.

    Usage:
        view.required_any_permissions = {PERM_USERS_VIEW, PERM_ORDERS_VIEW}
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_any_permissions", None)
        if not required or not user_has_any_permission(user, required):
            _deny(request, view, required)

        return True


# =========================================================
# Role shortcuts
# =========================================================
class IsStaffRole(BaseRolePermission):
    allowed_roles = STAFF_ROLES
