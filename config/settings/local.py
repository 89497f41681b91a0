from .base import *  # noqa: F403
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
# https://docs.djangoproject.com/en/dev/ref/settings/#debug
DEBUG = True
# https://docs.djangoproject.com/en/dev/ref/settings/#secret-key
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="R3JgqE7hW0xkD6mVbYpL2nTfS9aUcZo4iKe1MyQw8HvXsNd5GtBrCj",
)
# https://docs.djangoproject.com/en/dev/ref/settings/#allowed-hosts
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

# Token cookies over plain http during development
SALON_TOKEN_COOKIE_SECURE = False
SALON_ENVIRONMENT = env("SALON_ENV", default="development")
