"""WSGI config for the skycast HTTP surface."""
from __future__ import annotations

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "skycast_web.settings")

application = get_wsgi_application()
