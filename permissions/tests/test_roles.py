from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase
from rest_framework.test import APIRequestFactory

from permissions.roles import (
    ALL_PERMISSIONS,
    PERM_CONTACT_RESPOND,
    PERM_DASHBOARD_VIEW,
    PERM_ORDERS_EDIT,
    PERM_PRODUCTS_CREATE,
    PERM_PROFILE_EDIT,
    PERM_USERS_DELETE,
    HasAnyPermission,
    HasPermission,
    InsufficientPermission,
    IsStaffRole,
    has_permission,
    permissions_for,
)

User = get_user_model()


class RolePermissionMapTests(TestCase):
    """
    Role -> permission map.

    GUARANTEES:
    - customer only edits its profile
    - manager reads back office + answers contact messages
    - admin manages catalog/content but not user creation/deletion nor orders writes
    - super_admin holds everything
    - unknown roles hold nothing
    """

    def test_customer(self):
        self.assertEqual(permissions_for("customer"), {PERM_PROFILE_EDIT})

    def test_manager(self):
        self.assertTrue(has_permission("manager", PERM_DASHBOARD_VIEW))
        self.assertTrue(has_permission("manager", PERM_CONTACT_RESPOND))
        self.assertFalse(has_permission("manager", PERM_PRODUCTS_CREATE))

    def test_admin(self):
        self.assertTrue(has_permission("admin", PERM_PRODUCTS_CREATE))
        self.assertFalse(has_permission("admin", PERM_USERS_DELETE))
        self.assertFalse(has_permission("admin", PERM_ORDERS_EDIT))

    def test_super_admin(self):
        self.assertEqual(permissions_for("super_admin"), ALL_PERMISSIONS)

    def test_unknown_role(self):
        self.assertEqual(permissions_for("ghost"), set())
        self.assertFalse(has_permission(None, PERM_PROFILE_EDIT))


class _View:
    def __init__(self, required=None, required_any=None):
        self.required_permission = required
        self.required_any_permissions = required_any


class PermissionClassTests(TestCase):
    """
    GUARANTEES:
    - Anonymous callers are refused without raising (DRF answers 401)
    - Authenticated callers without the permission raise InsufficientPermission (401)
    - A view that declares nothing is refused
    """

    def setUp(self):
        self.factory = APIRequestFactory()
        self.manager = User.objects.create_user(email="m@example.com", password="x", role="manager")
        self.customer = User.objects.create_user(email="c@example.com", password="x")

    def _request_for(self, user):
        request = self.factory.get("/")
        request.user = user
        return request

    def test_anonymous_is_refused(self):
        request = self._request_for(AnonymousUser())
        self.assertFalse(HasPermission().has_permission(request, _View(PERM_DASHBOARD_VIEW)))
        self.assertFalse(IsStaffRole().has_permission(request, None))

    def test_holder_passes(self):
        request = self._request_for(self.manager)
        self.assertTrue(HasPermission().has_permission(request, _View(PERM_DASHBOARD_VIEW)))
        self.assertTrue(
            HasAnyPermission().has_permission(
                request, _View(required_any={PERM_PRODUCTS_CREATE, PERM_CONTACT_RESPOND})
            )
        )
        self.assertTrue(IsStaffRole().has_permission(request, None))

    def test_missing_permission_raises_401(self):
        request = self._request_for(self.customer)
        with self.assertRaises(InsufficientPermission) as ctx:
            HasPermission().has_permission(request, _View(PERM_DASHBOARD_VIEW))
        self.assertEqual(ctx.exception.status_code, 401)

        with self.assertRaises(InsufficientPermission):
            IsStaffRole().has_permission(request, None)

    def test_undeclared_permission_is_refused(self):
        request = self._request_for(self.manager)
        with self.assertRaises(InsufficientPermission):
            HasPermission().has_permission(request, _View())
