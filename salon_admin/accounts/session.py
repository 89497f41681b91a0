from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from typing import TYPE_CHECKING
from typing import Any

from django.conf import settings

from salon_admin.client.exceptions import ApiError
from salon_admin.client.exceptions import AuthenticationError
from salon_admin.client.http import ApiClient
from salon_admin.client.services import ApiService

from .permissions import has_permission

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Callable

    from salon_admin.client.tokens import TokenStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminUser:
    id: str
    name: str = ""
    email: str = ""
    role: str = ""
    permissions: tuple[str, ...] = field(default_factory=tuple)
    avatar: str | None = None
    last_login: str | None = None

    # DRF's IsAuthenticated looks at this attribute.
    is_authenticated = True

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AdminUser:
        permissions = payload.get("permissions") or ()
        return cls(
            id=str(payload.get("id", "")),
            name=payload.get("name") or "",
            email=payload.get("email") or "",
            role=payload.get("role") or "",
            permissions=tuple(p for p in permissions if isinstance(p, str)),
            avatar=payload.get("avatar"),
            last_login=payload.get("lastLogin"),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "permissions": list(self.permissions),
            "avatar": self.avatar,
            "lastLogin": self.last_login,
        }


class AdminSession:
    """Login state of one dashboard user, on top of an explicit ``ApiClient``."""

    def __init__(self, api: ApiService) -> None:
        self.api = api
        self.expired = False
        self._user: AdminUser | None = None

    @property
    def tokens(self) -> TokenStore:
        return self.api.client.tokens

    def is_authenticated(self) -> bool:
        return bool(self.tokens.get_access_token())

    async def login(self, email: str, password: str) -> tuple[AdminUser, str]:
        data = await self.api.auth.login(email, password)
        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            msg = "Login response did not include an access token."
            raise AuthenticationError(msg, payload=data)
        self.tokens.set_tokens(token, data.get("refreshToken"))
        self.expired = False
        self._user = AdminUser.from_payload(data.get("user") or {})
        logger.info("Admin %s logged in", self._user.email or self._user.id)
        return self._user, token

    async def logout(self) -> None:
        try:
            await self.api.auth.logout()
        except ApiError as exc:
            # The local session ends regardless of what the server says.
            logger.info("Logout request failed: %s", exc)
        finally:
            self.tokens.clear()
            self._user = None

    async def get_current_user(self) -> AdminUser:
        if self._user is None:
            data = await self.api.auth.me()
            self._user = AdminUser.from_payload(data or {})
        return self._user

    async def has_permission(self, permission: str) -> bool:
        if not self.is_authenticated():
            return False
        return has_permission(await self.get_current_user(), permission)

    def mark_expired(self) -> None:
        self.expired = True
        self._user = None

    def close(self) -> None:
        self.api.client.close()


def build_api_client(
    tokens: TokenStore,
    on_session_expired: Callable[[], None] | None = None,
) -> ApiClient:
    return ApiClient(
        settings.SALON_API_BASE_URL,
        tokens,
        timeout=getattr(settings, "SALON_API_TIMEOUT", 30.0),
        refresh_timeout=getattr(settings, "SALON_REFRESH_TIMEOUT", 10.0),
        on_session_expired=on_session_expired,
    )


def build_admin_session(tokens: TokenStore) -> AdminSession:
    """Wire a token store, client and API service into an ``AdminSession``."""

    session: AdminSession | None = None

    def on_session_expired() -> None:
        if session is not None:
            session.mark_expired()

    client = build_api_client(tokens, on_session_expired)
    api = ApiService(client, environment=getattr(settings, "SALON_ENVIRONMENT", "production"))
    session = AdminSession(api)
    return session
