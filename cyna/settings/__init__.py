# cyna/settings/__init__.py
"""
PATH: cyna/settings/__init__.py

Settings package entrypoint.

Nothing is imported here. Use DJANGO_SETTINGS_MODULE to select:
- cyna.settings.dev   (local development, tests)
- cyna.settings.prod  (production)
"""
