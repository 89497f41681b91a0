"""
Base settings to build other settings files upon.
"""

from datetime import timedelta
from pathlib import Path

import environ

BASE_DIR = Path(__file__).resolve(strict=True).parent.parent.parent
# salon_admin/
APPS_DIR = BASE_DIR / "salon_admin"
env = environ.Env()

READ_DOT_ENV_FILE = env.bool("DJANGO_READ_DOT_ENV_FILE", default=False)
if READ_DOT_ENV_FILE:
    # OS environment variables take precedence over variables from .env
    env.read_env(str(BASE_DIR / ".env"))

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = env.bool("DJANGO_DEBUG", False)
# https://docs.djangoproject.com/en/dev/ref/settings/#time-zone
TIME_ZONE = "UTC"
# https://docs.djangoproject.com/en/dev/ref/settings/#language-code
LANGUAGE_CODE = "en-us"
# https://docs.djangoproject.com/en/dev/ref/settings/#use-i18n
USE_I18N = True
# https://docs.djangoproject.com/en/dev/ref/settings/#use-tz
USE_TZ = True

# DATABASES
# ------------------------------------------------------------------------------
# Only sessions live in the database; salon data belongs to the remote API.
# https://docs.djangoproject.com/en/dev/ref/settings/#databases
DATABASES = {
    "default": env.db(
        "DATABASE_URL",
        default=f"sqlite:///{BASE_DIR / 'salon_admin.sqlite3'}",
    ),
}
DATABASES["default"]["ATOMIC_REQUESTS"] = True
# https://docs.djangoproject.com/en/stable/ref/settings/#std:setting-DEFAULT_AUTO_FIELD
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# URLS
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#root-urlconf
ROOT_URLCONF = "config.urls"
# https://docs.djangoproject.com/en/dev/ref/settings/#wsgi-application
WSGI_APPLICATION = "config.wsgi.application"

# APPS
# ------------------------------------------------------------------------------
DJANGO_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
]
THIRD_PARTY_APPS = [
    "rest_framework",
    "drf_spectacular",
]
LOCAL_APPS = [
    "salon_admin.accounts",
    "salon_admin.store",
    "salon_admin.dashboard",
    "salon_admin.realtime",
]
# https://docs.djangoproject.com/en/dev/ref/settings/#installed-apps
INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

# AUTHENTICATION
# ------------------------------------------------------------------------------
# Entry point unauthenticated dashboard requests are sent to.
# https://docs.djangoproject.com/en/dev/ref/settings/#login-url
LOGIN_URL = env("DJANGO_LOGIN_URL", default="/api/v1/auth/login/")

# MIDDLEWARE
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#middleware
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "salon_admin.accounts.middleware.AdminSessionMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

# SESSIONS
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#session-engine
SESSION_ENGINE = "django.contrib.sessions.backends.db"
SESSION_COOKIE_HTTPONLY = True

# TEMPLATES
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#templates
# Only the schema docs page renders templates.
TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

# SECURITY
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#csrf-cookie-httponly
CSRF_COOKIE_HTTPONLY = True
# https://docs.djangoproject.com/en/dev/ref/settings/#x-frame-options
X_FRAME_OPTIONS = "DENY"

# LOGGING
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#logging
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(levelname)s %(asctime)s %(module)s %(process)d %(thread)d %(message)s",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        "socketio": {"level": "WARNING"},
        "engineio": {"level": "WARNING"},
    },
}

# django-rest-framework
# -------------------------------------------------------------------------------
# django-rest-framework - https://www.django-rest-framework.org/api-guide/settings/
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "salon_admin.accounts.authentication.AdminTokenAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": ("rest_framework.permissions.IsAuthenticated",),
    "DEFAULT_RENDERER_CLASSES": ("rest_framework.renderers.JSONRenderer",),
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "salon_admin.dashboard.api.exceptions.api_exception_handler",
    "UNAUTHENTICATED_USER": None,
}

# By Default swagger ui is available only to admin user(s). You can change permission classes to change that
# See more configuration options at https://drf-spectacular.readthedocs.io/en/latest/settings.html#settings
SPECTACULAR_SETTINGS = {
    "TITLE": "Salon Admin API",
    "DESCRIPTION": "Dashboard endpoints for the salon booking administration portal",
    "VERSION": "1.0.0",
    "SERVE_PERMISSIONS": ["rest_framework.permissions.AllowAny"],
    "SERVE_AUTHENTICATION": [],
    "SCHEMA_PATH_PREFIX": "/api/v1",
    "POSTPROCESSING_HOOKS": [
        "drf_spectacular.hooks.postprocess_schema_enums",
        "config.schema.group_tags",
    ],
}

# SALON API
# ------------------------------------------------------------------------------
SALON_API_BASE_URL = env("SALON_API_URL", default="https://api.blushrz.com/api")
SALON_ENVIRONMENT = env("SALON_ENV", default="production")
# Seconds
SALON_API_TIMEOUT = env.float("SALON_API_TIMEOUT", default=30.0)
SALON_REFRESH_TIMEOUT = env.float("SALON_REFRESH_TIMEOUT", default=10.0)

# Role that bypasses every permission check.
SALON_SUPER_ROLE = env("SALON_SUPER_ROLE", default="super_admin")

# "remote" talks to SALON_API_BASE_URL; "memory" uses the in-process fake store.
SALON_BACKEND = env("SALON_BACKEND", default="remote")
SALON_MEMORY_SEED = env.bool("SALON_MEMORY_SEED", default=True)

# Token cookies (max age in seconds per cookie name)
SALON_TOKEN_COOKIE_MAX_AGE = {
    "admin_token": int(timedelta(days=7).total_seconds()),
    "admin_refresh_token": int(timedelta(days=30).total_seconds()),
}
SALON_TOKEN_COOKIE_SECURE = env.bool("SALON_TOKEN_COOKIE_SECURE", default=True)
SALON_TOKEN_COOKIE_SAMESITE = env("SALON_TOKEN_COOKIE_SAMESITE", default="Strict")

# Durable token file used by the management commands.
SALON_TOKEN_FILE = env("SALON_TOKEN_FILE", default=str(BASE_DIR / ".salon-tokens.json"))

# Paths the admin session middleware refuses without an access token.
DASHBOARD_GUARDED_PREFIXES = ["/api/v1/dashboard/"]

# REALTIME
# ------------------------------------------------------------------------------
SALON_WS_URL = env("SALON_WS_URL", default="wss://api.blushrz.com")
SALON_WS_PATH = env("SALON_WS_PATH", default="socket.io")
SALON_REALTIME = {
    "HANDSHAKE_TIMEOUT": 10.0,
    "MAX_RECONNECT_ATTEMPTS": 5,
    "RECONNECT_DELAY": 1.0,
    "TRANSPORTS": ["websocket", "polling"],
}
