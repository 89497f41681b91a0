from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "admin_token"
REFRESH_TOKEN_KEY = "admin_refresh_token"
TOKEN_KEYS = (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY)


class TokenMedium(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryMedium:
    """Process-local medium; forgets everything when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key) or None

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileMedium:
    """Durable medium backed by a small JSON document on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) and value else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class TokenStore:
    """Access/refresh token pair kept redundantly in two mediums.

    Writes go to both mediums, reads prefer the short-lived cookie medium and
    fall back to the durable one, so clearing either medium alone does not log
    the user out. Tokens are opaque strings.
    """

    def __init__(self, cookie: TokenMedium, durable: TokenMedium) -> None:
        self.cookie = cookie
        self.durable = durable

    def _get(self, key: str) -> str | None:
        return self.cookie.get(key) or self.durable.get(key)

    def _set(self, key: str, value: str) -> None:
        self.cookie.set(key, value)
        self.durable.set(key, value)

    def get_access_token(self) -> str | None:
        return self._get(ACCESS_TOKEN_KEY)

    def get_refresh_token(self) -> str | None:
        return self._get(REFRESH_TOKEN_KEY)

    def set_access_token(self, token: str) -> None:
        self._set(ACCESS_TOKEN_KEY, token)

    def set_refresh_token(self, token: str) -> None:
        self._set(REFRESH_TOKEN_KEY, token)

    def set_tokens(self, access: str, refresh: str | None = None) -> None:
        self.set_access_token(access)
        if refresh:
            self.set_refresh_token(refresh)

    def clear(self) -> None:
        for key in TOKEN_KEYS:
            self.cookie.delete(key)
            self.durable.delete(key)
