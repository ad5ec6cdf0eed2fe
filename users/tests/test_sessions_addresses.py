# users/tests/test_sessions_addresses.py

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from users.models import Address, Session

User = get_user_model()


class SessionTests(TestCase):
    """
    GUARANTEES:
    - Anyone can open a session; it is linked to the caller when authenticated
    - Unknown tokens answer 404, expired ones 401
    """

    def setUp(self):
        self.client = APIClient()

    def test_guest_session(self):
        response = self.client.post(reverse("users:session-create"))
        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(response.data["session_token"]), 64)
        self.assertIsNone(response.data["user_id"])

    def test_authenticated_session_is_linked(self):
        user = User.objects.create_user(email="s@example.com", password="Cyna@2024a")
        self.client.force_authenticate(user)
        response = self.client.post(reverse("users:session-create"))
        self.assertEqual(response.status_code, 201)
        self.assertEqual(Session.objects.get().user, user)

    def test_unknown_session_returns_404(self):
        response = self.client.get(reverse("users:session-detail", args=["0" * 64]))
        self.assertEqual(response.status_code, 404)

    def test_expired_session_returns_401(self):
        session = Session.objects.create(expires_at=timezone.now() - timedelta(minutes=5))
        response = self.client.get(reverse("users:session-detail", args=[session.session_token]))
        self.assertEqual(response.status_code, 401)

    def test_delete_session(self):
        session = Session.objects.create()
        response = self.client.delete(reverse("users:session-detail", args=[session.session_token]))
        self.assertEqual(response.status_code, 204)
        self.assertFalse(Session.objects.exists())


class AddressTests(TestCase):
    """
    GUARANTEES:
    - Owner has full CRUD
    - Staff with users:view can read, other users get 403
    - Only one default billing address per user
    """

    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(email="owner@example.com", password="Cyna@2024a")
        self.other = User.objects.create_user(email="other@example.com", password="Cyna@2024a")
        self.admin = User.objects.create_user(
            email="admin@example.com", password="Cyna@2024a", role="admin"
        )

    def _payload(self, **overrides):
        payload = {
            "first_name": "Anne",
            "last_name": "Petit",
            "address1": "12 rue de la Paix",
            "postal_code": "75002",
            "city": "Paris",
            "country": "France",
            "is_default_billing": True,
        }
        payload.update(overrides)
        return payload

    def test_owner_creates_and_lists(self):
        self.client.force_authenticate(self.owner)
        url = reverse("users:address-list", args=[self.owner.id])

        response = self.client.post(url, self._payload(), format="json")
        self.assertEqual(response.status_code, 201)

        listing = self.client.get(url)
        self.assertEqual(listing.status_code, 200)
        self.assertEqual(len(listing.data), 1)

    def test_missing_field_returns_400(self):
        self.client.force_authenticate(self.owner)
        payload = self._payload()
        payload.pop("city")
        response = self.client.post(
            reverse("users:address-list", args=[self.owner.id]), payload, format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_default_billing_is_unique(self):
        first = Address.objects.create(user=self.owner, **self._payload())
        second = Address.objects.create(user=self.owner, **self._payload(address1="1 place Bellecour"))

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertFalse(first.is_default_billing)
        self.assertTrue(second.is_default_billing)

    def test_other_user_gets_403(self):
        self.client.force_authenticate(self.other)
        response = self.client.get(reverse("users:address-list", args=[self.owner.id]))
        self.assertEqual(response.status_code, 403)

    def test_staff_can_read_but_not_write(self):
        Address.objects.create(user=self.owner, **self._payload())
        self.client.force_authenticate(self.admin)
        url = reverse("users:address-list", args=[self.owner.id])

        self.assertEqual(self.client.get(url).status_code, 200)
        self.assertEqual(self.client.post(url, self._payload(), format="json").status_code, 403)

    def test_owner_updates_and_deletes(self):
        address = Address.objects.create(user=self.owner, **self._payload())
        self.client.force_authenticate(self.owner)
        url = reverse("users:address-detail", args=[self.owner.id, address.id])

        response = self.client.patch(url, {"city": "Lyon"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["city"], "Lyon")

        response = self.client.delete(url)
        self.assertEqual(response.status_code, 204)
        self.assertFalse(Address.objects.exists())
