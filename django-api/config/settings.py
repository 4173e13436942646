"""Django settings for the Conference Central API.

Values that differ between deployments come from environment variables.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "insecure-dev-key-change-me")
DEBUG = os.environ.get("DJANGO_DEBUG", "false").lower() in ("1", "true", "yes")
ALLOWED_HOSTS = [
    host.strip() for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",") if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "conferences",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "config.urls"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("CONFERENCE_DB_PATH", str(BASE_DIR / "db.sqlite3")),
        # Writers take the lock at BEGIN and queue behind each other.
        "OPTIONS": {
            "transaction_mode": "IMMEDIATE",
            "timeout": float(os.environ.get("CONFERENCE_DB_TIMEOUT", "20")),
        },
        # A file, not shared-cache memory, so lock waits honor the timeout.
        "TEST": {
            "NAME": os.environ.get(
                "CONFERENCE_TEST_DB_PATH", str(BASE_DIR / "test_db.sqlite3")
            ),
        },
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "conference-central",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
USE_TZ = True
TIME_ZONE = "UTC"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "conferences.handlers.authentication.TrustedHeaderAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "EXCEPTION_HANDLER": "conferences.handlers.errors.domain_exception_handler",
    "UNAUTHENTICATED_USER": None,
    "TEST_REQUEST_DEFAULT_FORMAT": "json",
}

CONFERENCE_CENTRAL = {
    "TRANSACTION_MAX_ATTEMPTS": int(os.environ.get("CONFERENCE_TRANSACTION_MAX_ATTEMPTS", "5")),
    "TRANSACTION_BACKOFF_SECONDS": float(os.environ.get("CONFERENCE_TRANSACTION_BACKOFF", "0.01")),
    "CONFERENCE_LIST_CACHE_TIMEOUT": int(os.environ.get("CONFERENCE_LIST_CACHE_TIMEOUT", "60")),
}

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "conferences": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
        },
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    },
}
