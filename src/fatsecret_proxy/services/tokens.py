"""OAuth2 client-credentials token management."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

import httpx

from fatsecret_proxy.adapters.fatsecret_client import TokenClient
from fatsecret_proxy.errors import TokenAcquisitionFailed
from fatsecret_proxy.services.cache import Cache, utc_now

BASIC_SCOPE = "basic"
BARCODE_SCOPE = "basic barcode"

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessToken:
    """Bearer token with its absolute expiry."""

    token: str
    expires_at: datetime


@dataclass
class TokenManager:
    """Fetch and cache access tokens, one per scope.

    Tokens live in the shared cache under ``token:<scope>`` with a TTL of the
    vendor lifetime minus ``safety_margin_seconds``, so a token is never sent
    when it is about to expire. Concurrent misses for the same scope wait on a
    per-scope lock and reuse the token fetched by the first caller.
    """

    token_client: TokenClient
    cache: Cache
    safety_margin_seconds: float = 100
    clock: Callable[[], datetime] = utc_now
    _locks: dict[str, asyncio.Lock] = field(default_factory=dict, init=False)

    async def get_access_token(self, scope: str = BASIC_SCOPE) -> str:
        """Return a valid bearer token for the scope, fetching one if needed."""
        cache_key = _cache_key(scope)
        cached = self._cached(cache_key)
        if cached is not None:
            return cached.token

        lock = self._locks.setdefault(cache_key, asyncio.Lock())
        async with lock:
            cached = self._cached(cache_key)
            if cached is not None:
                return cached.token
            access_token = await self._request(scope)
            ttl = (access_token.expires_at - self.clock()).total_seconds()
            self.cache.set(cache_key, access_token, ttl_seconds=ttl)
            return access_token.token

    def _cached(self, cache_key: str) -> AccessToken | None:
        cached = self.cache.get(cache_key)
        if isinstance(cached, AccessToken) and self.clock() < cached.expires_at:
            return cached
        return None

    def invalidate(self, scope: str = BASIC_SCOPE) -> None:
        """Drop a cached token so the next call performs a new grant."""
        self.cache.delete(_cache_key(scope))

    async def _request(self, scope: str) -> AccessToken:
        _logger.info("Requesting FatSecret access token: scope=%s", scope)
        try:
            payload = await self.token_client.request_token(scope)
        except httpx.HTTPStatusError as exc:
            _logger.warning(
                "Token grant rejected: scope=%s status=%s",
                scope,
                exc.response.status_code,
            )
            raise TokenAcquisitionFailed(
                "Failed to obtain access token",
                details={"status": exc.response.status_code},
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("Token grant failed: scope=%s error=%s", scope, exc)
            raise TokenAcquisitionFailed("Failed to obtain access token") from exc

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise TokenAcquisitionFailed("Token response has no access_token")
        try:
            expires_in = float(payload.get("expires_in", 0))
        except (TypeError, ValueError):
            expires_in = 0.0
        lifetime = max(expires_in - self.safety_margin_seconds, 0.0)
        _logger.info(
            "Obtained FatSecret access token: scope=%s lifetime=%ss", scope, lifetime
        )
        return AccessToken(
            token=token, expires_at=self.clock() + timedelta(seconds=lifetime)
        )


def _cache_key(scope: str) -> str:
    return f"token:{scope}"
