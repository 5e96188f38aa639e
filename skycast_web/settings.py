"""Django settings for the skycast CLI and HTTP surface."""
from __future__ import annotations

from pathlib import Path
import os

from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent


def env(name: str, default: str | None = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    value = os.environ.get(name, default)
    if value is None:
        raise ImproperlyConfigured(f"Environment variable {name} is required")
    return value


def env_float(name: str, default: float) -> float:
    raw = env(name, str(default))
    try:
        return float(raw)
    except ValueError as exc:
        raise ImproperlyConfigured(f"Environment variable {name} must be a number, got {raw!r}") from exc


SECRET_KEY = env("DJANGO_SECRET_KEY", "skycast-insecure-development-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "skycast_web.api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "skycast_web.urls"

WSGI_APPLICATION = "skycast_web.wsgi.application"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Nothing is stored; contrib.auth only needs a configured connection.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DB_NAME", str(BASE_DIR / "db.sqlite3")),
    }
}

# Upstream feeds ---------------------------------------------------------
WEATHERAPI_KEY = env("WEATHERAPI_KEY", "")
WEATHER_CACHE_DIR = os.environ.get("WEATHER_CACHE_DIR") or None
WEATHER_CACHE_TTL = env_float("WEATHER_CACHE_TTL", 3600)
WEATHER_HTTP_TIMEOUT = env_float("WEATHER_HTTP_TIMEOUT", 10.0)
WEATHER_FETCH_TIMEOUT = env_float("WEATHER_FETCH_TIMEOUT", 30.0)
WEATHER_USER_AGENT = env("WEATHER_USER_AGENT", "skycast/0.1")

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
}

LOG_LEVEL = env("SKYCAST_LOG_LEVEL", "WARNING").upper()

# stdout belongs to the JSON the CLI prints, so logs go to stderr.
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s - %(message)s"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "plain",
        },
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True
