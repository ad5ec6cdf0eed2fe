# users/management/commands/ensure_superuser.py

"""
PATH: users/management/commands/ensure_superuser.py

Deploy-time super admin bootstrap.

- Reads AUTO_ADMIN_EMAIL + AUTO_ADMIN_PASSWORD from env (django-environ).
- Idempotent: creates the account if missing; re-aligns role/flags/password otherwise.
- The password must satisfy the account password policy.
- Never prints the password.
"""

from __future__ import annotations

import environ
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import ROLE_SUPER_ADMIN
from users.validators import validate_password_strength

env = environ.Env()


class Command(BaseCommand):
    help = "Create/update the super admin account from AUTO_ADMIN_* env vars (idempotent)."

    def handle(self, *args, **options):
        email = (env("AUTO_ADMIN_EMAIL", default="") or "").strip().lower()
        password = (env("AUTO_ADMIN_PASSWORD", default="") or "").strip()

        if not email or not password:
            self.stdout.write(self.style.WARNING("AUTO_ADMIN_* env vars not set. Skipping."))
            return

        try:
            validate_password_strength(password)
        except ValueError as exc:
            raise CommandError(f"AUTO_ADMIN_PASSWORD rejected: {exc}") from exc

        User = get_user_model()

        with transaction.atomic():
            user = User.objects.filter(email__iexact=email).first()

            if user:
                user.role = ROLE_SUPER_ADMIN
                user.is_active = True
                user.is_staff = True
                user.is_superuser = True
                user.email_verified = True
                user.set_password(password)
                user.save()
                self.stdout.write(self.style.SUCCESS(f"Super admin ensured: {email} (updated)"))
                return

            User.objects.create_superuser(email=email, password=password)
            self.stdout.write(self.style.SUCCESS(f"Super admin ensured: {email} (created)"))
