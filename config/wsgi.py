"""WSGI entry point for the tenancy lifecycle API.

Used by runserver and by gunicorn/uwsgi in deployments, which set
DJANGO_SETTINGS_MODULE to ``config.settings.prod``.
"""

import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
