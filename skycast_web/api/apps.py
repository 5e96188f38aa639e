from __future__ import annotations

from django.apps import AppConfig


class ApiConfig(AppConfig):
    name = "skycast_web.api"
    label = "skycast_api"
