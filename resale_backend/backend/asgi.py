# backend/asgi.py
"""
ASGI config for the resale settlement backend.

Defaults to dev settings; production deployments set
DJANGO_SETTINGS_MODULE=backend.settings.prod explicitly.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_asgi_application()
