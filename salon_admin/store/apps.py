from __future__ import annotations

from django.apps import AppConfig
from django.conf import settings
from django.utils.translation import gettext_lazy as _


class StoreConfig(AppConfig):
    name = "salon_admin.store"
    verbose_name = _("Store")

    def ready(self) -> None:
        self.reset()

    def reset(self, *, seed: bool | None = None) -> None:
        """Rebuild the in-memory repositories, optionally with sample data."""

        from .gateways import build_repositories  # noqa: PLC0415

        if seed is None:
            seed = getattr(settings, "SALON_MEMORY_SEED", True)
        self.repositories = build_repositories(seed=seed)
