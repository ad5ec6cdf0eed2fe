"""
PATH: manage.py

Django management entrypoint.

Key safeguard:
- If DJANGO_SETTINGS_MODULE is unset OR set to the settings *package*
  ("cyna.settings"), it is forced to a concrete module ("cyna.settings.dev").
  cyna/settings/__init__.py loads nothing on purpose.

Production:
- Production must set DJANGO_SETTINGS_MODULE=cyna.settings.prod explicitly.
- Admin bootstrap lives in `manage.py ensure_superuser`.
"""

from __future__ import annotations

import os
import sys


def _ensure_settings_module() -> None:
    current = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()

    if not current or current == "cyna.settings":
        os.environ["DJANGO_SETTINGS_MODULE"] = "cyna.settings.dev"


def main() -> None:
    _ensure_settings_module()

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
