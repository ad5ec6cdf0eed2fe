# cyna/asgi.py
"""
PATH: cyna/asgi.py

ASGI config for the CYNA project.
Defaults to dev settings unless DJANGO_SETTINGS_MODULE is set externally.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "cyna.settings.dev")

application = get_asgi_application()
