# permissions/management/commands/seed_users.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import (
    ROLE_ADMIN,
    ROLE_CUSTOMER,
    ROLE_MANAGER,
    ROLE_SUPER_ADMIN,
    STAFF_ROLES,
)
from users.validators import validate_password_strength


@dataclass(frozen=True)
class SeedUserSpec:
    label: str
    role: str
    email: str
    first_name: str
    last_name: str


SEED_USERS = [
    SeedUserSpec("Super admin", ROLE_SUPER_ADMIN, "superadmin@cyna.fr", "Super", "Admin"),
    SeedUserSpec("Admin", ROLE_ADMIN, "admin@cyna.fr", "Alice", "Admin"),
    SeedUserSpec("Manager", ROLE_MANAGER, "manager@cyna.fr", "Marc", "Manager"),
    SeedUserSpec("Customer", ROLE_CUSTOMER, "customer@cyna.fr", "Claire", "Client"),
]


def _upsert_user(*, User, spec: SeedUserSpec, password: str, force_password: bool):
    """
    Idempotent user seed:
    - create if missing
    - re-align role/staff flags if the account exists
    """
    user, created = User.objects.get_or_create(
        email=spec.email,
        defaults={
            "first_name": spec.first_name,
            "last_name": spec.last_name,
            "role": spec.role,
            "is_staff": spec.role in STAFF_ROLES,
            "is_superuser": spec.role == ROLE_SUPER_ADMIN,
            "email_verified": True,
        },
    )

    dirty = False
    if user.role != spec.role:
        user.role = spec.role
        dirty = True

    staff = spec.role in STAFF_ROLES
    if user.is_staff != staff:
        user.is_staff = staff
        dirty = True

    if created or force_password:
        user.set_password(password)
        dirty = True

    if dirty:
        user.save()

    return user, created


class Command(BaseCommand):
    help = "Seed one account per role (super_admin, admin, manager, customer)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Cyna@2024a",
            help="Password for seeded users (must satisfy the password policy).",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset the password of already-existing seeded users too.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        try:
            validate_password_strength(password)
        except ValueError as exc:
            raise CommandError(f"--password rejected: {exc}") from exc

        User = get_user_model()
        created_count = 0

        for spec in SEED_USERS:
            _, created = _upsert_user(
                User=User,
                spec=spec,
                password=password,
                force_password=force_password,
            )
            if created:
                created_count += 1
                self.stdout.write(f"created: {spec.label} <{spec.email}> ({spec.role})")
            else:
                self.stdout.write(f"exists:  {spec.label} <{spec.email}> ({spec.role})")

        self.stdout.write(self.style.SUCCESS(f"Seeded users. Created: {created_count}"))
