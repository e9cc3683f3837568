"""ASGI entry point for the tenancy lifecycle API.

Defaults to the development settings; deployments set
DJANGO_SETTINGS_MODULE to ``config.settings.prod``.
"""

import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_asgi_application()
