"""
Django settings for core_backend project.

Values come from the environment; a local .env file is loaded first so
development machines don't need exported variables.
"""

import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


def env_bool(name, default=False):
    return os.environ.get(name, str(default)).lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("SECRET_KEY", "django-insecure-dev-only-key")

DEBUG = env_bool("DEBUG", True)

ALLOWED_HOSTS = [h.strip() for h in os.environ.get("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]


# Application definition

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "django_filters",
    "core_backend",
    "venues",
    "menu",
    "orders",
    "payments",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "venues.middleware.VenueMiddleware",
]

ROOT_URLCONF = "core_backend.urls"

WSGI_APPLICATION = "core_backend.wsgi.application"
ASGI_APPLICATION = "core_backend.asgi.application"


# Database

DATABASES = {
    "default": {
        "ENGINE": os.environ.get("DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.environ.get("DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.environ.get("DB_USER", ""),
        "PASSWORD": os.environ.get("DB_PASSWORD", ""),
        "HOST": os.environ.get("DB_HOST", ""),
        "PORT": os.environ.get("DB_PORT", ""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Internationalization

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True


# Django REST Framework

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_FILTER_BACKENDS": ["django_filters.rest_framework.DjangoFilterBackend"],
    "DEFAULT_PAGINATION_CLASS": "rest_framework.pagination.LimitOffsetPagination",
    "PAGE_SIZE": 50,
    "EXCEPTION_HANDLER": "core_backend.exceptions.engine_exception_handler",
    "COERCE_DECIMAL_TO_STRING": True,
}


# Identity context (set by the upstream gateway)

VENUE_HEADER = os.environ.get("VENUE_HEADER", "X-Venue-ID")
STAFF_HEADER = os.environ.get("STAFF_HEADER", "X-Staff-ID")


# Transaction engine

DEFAULT_TAX_RATE = Decimal(os.environ.get("DEFAULT_TAX_RATE", "0.08"))
DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "USD")
ORDER_NUMBER_MAX_RETRIES = int(os.environ.get("ORDER_NUMBER_MAX_RETRIES", "5"))

PAYMENT_CARD_PROCESSOR = os.environ.get(
    "PAYMENT_CARD_PROCESSOR", "payments.processors.SimulatedCardProcessor"
)
SIMULATED_PROCESSOR_FEE_RATE = Decimal(os.environ.get("SIMULATED_PROCESSOR_FEE_RATE", "0.029"))
SIMULATED_PROCESSOR_FEE_FIXED = Decimal(os.environ.get("SIMULATED_PROCESSOR_FEE_FIXED", "0.30"))


# Logging

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        "orders": {"level": LOG_LEVEL},
        "payments": {"level": LOG_LEVEL},
        "venues": {"level": LOG_LEVEL},
        "menu": {"level": LOG_LEVEL},
        "core_backend": {"level": LOG_LEVEL},
    },
}
