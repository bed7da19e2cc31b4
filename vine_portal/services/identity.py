"""
Identity resolution against the hosted auth provider.

Public API
----------
SupabaseAuthProvider.get_user(token)   → Ok(Identity) | Err(reason)
get_auth_provider()                    → process-wide provider (FastAPI dependency)

The provider never raises for expected failures (bad token, provider down);
those come back as Err so the gateway can answer 401 deterministically.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Protocol

import httpx

from vine_portal.core.config import settings
from vine_portal.core.result import Err, Ok, Result

logger = logging.getLogger("vine_portal.identity")


@dataclass(frozen=True)
class Identity:
    """Authenticated principal as issued by the auth provider."""
    id: str
    email: Optional[str] = None


class AuthProvider(Protocol):
    def get_user(self, token: str) -> Result[Identity]:
        ...


class SupabaseAuthProvider:
    """Verifies access tokens with `GET {url}/auth/v1/user`."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self._transport = transport

    def get_user(self, token: str) -> Result[Identity]:
        headers = {"apikey": self.anon_key, "Authorization": f"Bearer {token}"}
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.get(f"{self.base_url}/auth/v1/user", headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Auth provider unreachable: %s", exc.__class__.__name__)
            return Err("auth_provider_unreachable")

        if resp.status_code in (401, 403):
            return Err("invalid_token")
        if resp.status_code != 200:
            logger.warning("Auth provider returned status %s", resp.status_code)
            return Err(f"auth_provider_status_{resp.status_code}")

        try:
            payload = resp.json()
        except ValueError:
            return Err("auth_provider_invalid_payload")
        user_id = payload.get("id") if isinstance(payload, dict) else None
        if not user_id:
            return Err("no_identity")
        return Ok(Identity(id=str(user_id), email=payload.get("email")))


@lru_cache(maxsize=1)
def get_auth_provider() -> AuthProvider:
    return SupabaseAuthProvider(
        base_url=settings.SUPABASE_URL,
        anon_key=settings.SUPABASE_ANON_KEY,
        timeout=settings.AUTH_TIMEOUT_SECONDS,
    )
