# users/tests/test_user_admin.py

import uuid

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

User = get_user_model()

STRONG_PASSWORD = "Cyna@2024a"


class UserAdministrationTests(TestCase):
    """
    Back-office user CRUD.

    GUARANTEES:
    - Role gates every action (401 without the permission)
    - Password required on create, optional on edit
    - Role changes re-align staff flags
    - Self-deletion is refused (409)
    """

    def setUp(self):
        self.client = APIClient()
        self.super_admin = User.objects.create_user(
            email="root@example.com", password=STRONG_PASSWORD, role="super_admin"
        )
        self.admin = User.objects.create_user(
            email="admin@example.com", password=STRONG_PASSWORD, role="admin"
        )
        self.customer = User.objects.create_user(
            email="client@example.com", password=STRONG_PASSWORD, role="customer"
        )

    def _payload(self, **overrides):
        payload = {
            "email": "new.manager@example.com",
            "first_name": "Nina",
            "last_name": "Lopez",
            "role": "manager",
            "password": STRONG_PASSWORD,
        }
        payload.update(overrides)
        return payload

    def test_customer_cannot_list_users(self):
        self.client.force_authenticate(self.customer)
        response = self.client.get(reverse("users:user-list"))
        self.assertEqual(response.status_code, 401)

    def test_anonymous_cannot_list_users(self):
        response = self.client.get(reverse("users:user-list"))
        self.assertEqual(response.status_code, 401)

    def test_admin_can_list_but_not_create(self):
        self.client.force_authenticate(self.admin)

        listing = self.client.get(reverse("users:user-list"))
        self.assertEqual(listing.status_code, 200)
        self.assertEqual(listing.data["count"], 3)

        created = self.client.post(reverse("users:user-list"), self._payload(), format="json")
        self.assertEqual(created.status_code, 401)

    def test_super_admin_creates_staff_user(self):
        self.client.force_authenticate(self.super_admin)
        response = self.client.post(reverse("users:user-list"), self._payload(), format="json")

        self.assertEqual(response.status_code, 201)
        self.assertNotIn("password", response.data)
        user = User.objects.get(email="new.manager@example.com")
        self.assertTrue(user.is_staff)
        self.assertTrue(user.check_password(STRONG_PASSWORD))

    def test_create_requires_password(self):
        self.client.force_authenticate(self.super_admin)
        payload = self._payload()
        payload.pop("password")
        response = self.client.post(reverse("users:user-list"), payload, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("password", response.data)

    def test_edit_without_password_keeps_it(self):
        self.client.force_authenticate(self.admin)
        response = self.client.patch(
            reverse("users:user-detail", args=[self.customer.id]),
            {"role": "manager"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.role, "manager")
        self.assertTrue(self.customer.is_staff)
        self.assertTrue(self.customer.check_password(STRONG_PASSWORD))

    def test_retrieve_unknown_user_returns_404(self):
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("users:user-detail", args=[uuid.uuid4()]))
        self.assertEqual(response.status_code, 404)

    def test_admin_cannot_delete(self):
        self.client.force_authenticate(self.admin)
        response = self.client.delete(reverse("users:user-detail", args=[self.customer.id]))
        self.assertEqual(response.status_code, 401)

    def test_super_admin_deletes_user_but_not_self(self):
        self.client.force_authenticate(self.super_admin)

        response = self.client.delete(reverse("users:user-detail", args=[self.customer.id]))
        self.assertEqual(response.status_code, 204)
        self.assertFalse(User.objects.filter(pk=self.customer.pk).exists())

        response = self.client.delete(reverse("users:user-detail", args=[self.super_admin.id]))
        self.assertEqual(response.status_code, 409)
