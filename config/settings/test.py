"""
With these settings, tests run faster.
"""

from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="AlGzerkUv160WCFbKM8vn2qyFYWS5jX0AHND8TnRj55iqlMSPtJsUllwpba1oqOO",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#test-runner
TEST_RUNNER = "django.test.runner.DiscoverRunner"
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["testserver", "localhost"]

# DATABASES
# ------------------------------------------------------------------------------
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    },
}

# SALON API
# ------------------------------------------------------------------------------
# Tests never reach the network: HTTP is faked at the requests adapter level.
SALON_API_BASE_URL = "https://api.test/api"
SALON_WS_URL = "wss://ws.test"
SALON_ENVIRONMENT = "test"
SALON_BACKEND = "memory"
SALON_MEMORY_SEED = True
SALON_TOKEN_COOKIE_SECURE = False
