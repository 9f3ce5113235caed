"""
Django settings for the review web interface.
"""

import os
from pathlib import Path

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent

# Security settings
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-secret-key-change-in-production")
DEBUG = os.environ.get("DJANGO_DEBUG", "True").lower() == "true"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,*").split(",")

# --- Reverse proxy support (CSRF, HTTPS termination) ---
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
USE_X_FORWARDED_HOST = True

CSRF_TRUSTED_ORIGINS = [
    o.strip() for o in os.environ.get("DJANGO_CSRF_TRUSTED_ORIGINS", "").split(",") if o.strip()
]
CSRF_COOKIE_SECURE = os.environ.get("DJANGO_CSRF_COOKIE_SECURE", "false").lower() in (
    "1",
    "true",
    "yes",
    "on",
)


# Application definition
INSTALLED_APPS = [
    "django.contrib.messages",
    "article_screening.review.web",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
]

ROOT_URLCONF = "article_screening.review.web.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
                "article_screening.review.web.context_processors.screening_context",
            ],
        },
    },
]

# No database: all screening data lives behind the screening API
DATABASES = {}

# Sessions hold the review queue; keep them in the process cache
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "article-screening",
    }
}
SESSION_ENGINE = "django.contrib.sessions.backends.cache"
SESSION_COOKIE_AGE = 86400  # 1 day in seconds
SESSION_COOKIE_SAMESITE = "Lax"
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SECURE = os.environ.get("SESSION_COOKIE_SECURE", "false").lower() in (
    "true",
    "1",
    "yes",
)

MESSAGE_STORAGE = "django.contrib.messages.storage.session.SessionStorage"

# Logging
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
        },
        "article_screening": {
            "handlers": ["console"],
            "level": "INFO",
        },
    },
}

# Custom settings for our app
# These will be set at runtime from config; timeout and retries are read
# from the environment by load_config()
SCREENING_CONFIG_PATH = os.environ.get("SCREENING_CONFIG_PATH", "config.yaml")
SCREENING_API_URL = os.environ.get("SCREENING_API_URL", "")

# How long the login form remembers the last reviewer/role (days);
# None falls back to web.remember_days in the config file
_remember_days = os.environ.get("SCREENING_REMEMBER_DAYS")
SCREENING_REMEMBER_DAYS = int(_remember_days) if _remember_days else None
