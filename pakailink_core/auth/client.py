"""
Auth Client
===========
Obtains, caches and refreshes the PakaiLink B2B access token.
"""

import asyncio
import math
from typing import Any, Dict, Optional

import httpx
import structlog

from ..config import PakaiLinkConfig
from ..exceptions import AuthenticationError, ServiceTimeoutError, ServiceUnavailableError
from ..logs import token_preview
from ..signature import SignatureEngine, create_token_headers, dump_json, snap_timestamp
from .token_store import InMemoryTokenStore, TokenStore

logger = structlog.get_logger(__name__)

TOKEN_REQUEST_BODY = {"grantType": "client_credentials"}
DEFAULT_EXPIRES_IN = 900


def _parse_expires_in(value: Any) -> float:
    """Server token lifetime in seconds; unreadable or non-positive values fall back to the default."""
    try:
        expires_in = float(value)
    except (TypeError, ValueError):
        return DEFAULT_EXPIRES_IN
    if not math.isfinite(expires_in) or expires_in <= 0:
        return DEFAULT_EXPIRES_IN
    return expires_in


class AuthClient:
    """
    B2B token lifecycle: ``NO_TOKEN -> TOKEN_CACHED -> (ttl elapses) -> NO_TOKEN``.

    Token fetches are single-flight per client: concurrent callers that
    miss the cache wait on one lock and re-check the cache before going to
    the network.
    """

    def __init__(
        self,
        config: PakaiLinkConfig,
        signature_engine: SignatureEngine,
        token_store: Optional[TokenStore] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config
        self.signature_engine = signature_engine
        self.token_store = token_store or InMemoryTokenStore()
        self.cache_key = config.token_cache_key
        self._http_client = http_client
        self._owns_client = http_client is None
        self._lock = asyncio.Lock()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def get_access_token(self) -> str:
        """Return the cached token, fetching a new one on a cache miss."""
        cached = await self.token_store.get(self.cache_key)
        if cached is not None:
            logger.debug("Using cached B2B access token")
            return cached.value

        async with self._lock:
            cached = await self.token_store.get(self.cache_key)
            if cached is not None:
                return cached.value
            logger.debug("Generating new B2B access token")
            return await self._fetch_and_store()

    async def refresh_token(self, stale_token: Optional[str] = None) -> str:
        """
        Evict the cached token and fetch a new one.

        Args:
            stale_token: The token the caller saw rejected. If another
                coroutine has already replaced it, that newer token is
                returned without a network call.
        """
        async with self._lock:
            if stale_token is not None:
                cached = await self.token_store.get(self.cache_key)
                if cached is not None and cached.value != stale_token:
                    logger.debug("Token already refreshed by a concurrent caller")
                    return cached.value

            logger.info("Refreshing B2B access token")
            await self.token_store.forget(self.cache_key)
            return await self._fetch_and_store()

    async def is_token_expired(self) -> bool:
        return not await self.token_store.has(self.cache_key)

    async def clear_token(self) -> None:
        logger.debug("Clearing cached token")
        await self.token_store.forget(self.cache_key)

    async def get_token_info(self) -> Dict[str, Any]:
        """Current token state, safe to log."""
        cached = await self.token_store.get(self.cache_key)
        return {
            "has_token": cached is not None,
            "token_preview": token_preview(cached.value) if cached else None,
            "cache_key": self.cache_key,
        }

    async def _fetch_and_store(self) -> str:
        """Request a new token from the provider. Caller must hold the lock."""
        timestamp = snap_timestamp()
        signature = self.signature_engine.sign_asymmetric(self.config.client_id, timestamp)
        headers = create_token_headers(self.config.client_id, timestamp, signature)
        endpoint = self.config.endpoints.b2b_token

        logger.info("Requesting B2B access token", endpoint=endpoint, client_id=self.config.client_id)

        client = await self._get_client()
        try:
            response = await client.post(endpoint, headers=headers, content=dump_json(TOKEN_REQUEST_BODY))
        except httpx.TimeoutException:
            raise ServiceTimeoutError("Token request timed out")
        except httpx.TransportError as e:
            raise ServiceUnavailableError(f"Failed to connect: {e}")

        if not response.is_success:
            logger.error("Failed to obtain B2B access token", status=response.status_code, body=response.text)
            raise AuthenticationError(
                f"Failed to obtain B2B access token: {response.text}",
                status_code=response.status_code,
                details=response.text,
            )

        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, dict) or not data.get("accessToken"):
            logger.error("Invalid token response", status=response.status_code)
            raise AuthenticationError(
                "Invalid token response: missing accessToken",
                status_code=response.status_code,
                details=data,
            )

        access_token = data["accessToken"]
        expires_in = _parse_expires_in(data.get("expiresIn"))

        ttl = self.config.token_ttl
        if ttl >= expires_in:
            # The cache must never outlive the server-side token
            logger.warning("Configured token TTL exceeds server expiry", ttl=ttl, expires_in=expires_in)
            ttl = math.ceil(expires_in) - 1

        if ttl < 1:
            logger.warning("Token expires too soon to cache", expires_in=expires_in)
            return access_token

        await self.token_store.put(self.cache_key, access_token, ttl)
        logger.info("B2B access token obtained", expires_in=expires_in, cache_ttl=ttl)
        return access_token
