"""
Token Store
===========
Key/value storage for the B2B access token with passive TTL expiry.
"""

import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CachedToken:
    """A bearer token as held in the cache."""
    value: str
    cached_at: float
    ttl_seconds: int

    def is_expired(self, now: float) -> bool:
        return now - self.cached_at >= self.ttl_seconds

    def to_json(self) -> str:
        return json.dumps({
            "value": self.value,
            "cachedAt": self.cached_at,
            "ttlSeconds": self.ttl_seconds,
        })

    @classmethod
    def from_json(cls, raw: str) -> "CachedToken":
        data = json.loads(raw)
        return cls(
            value=data["value"],
            cached_at=float(data["cachedAt"]),
            ttl_seconds=int(data["ttlSeconds"]),
        )


class TokenStore(ABC):
    """Cache backend interface. Entries expire passively when their TTL elapses."""

    @abstractmethod
    async def get(self, key: str) -> Optional[CachedToken]:
        ...

    @abstractmethod
    async def put(self, key: str, value: str, ttl_seconds: int) -> CachedToken:
        ...

    @abstractmethod
    async def forget(self, key: str) -> None:
        ...

    async def has(self, key: str) -> bool:
        return await self.get(key) is not None


class InMemoryTokenStore(TokenStore):
    """
    Process-local token store.

    Suitable for a single worker; use RedisTokenStore to share the token
    across processes.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, CachedToken] = {}

    async def get(self, key: str) -> Optional[CachedToken]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return entry

    async def put(self, key: str, value: str, ttl_seconds: int) -> CachedToken:
        entry = CachedToken(value=value, cached_at=self._clock(), ttl_seconds=ttl_seconds)
        self._entries[key] = entry
        return entry

    async def forget(self, key: str) -> None:
        self._entries.pop(key, None)


class RedisTokenStore(TokenStore):
    """
    Redis-backed token store.

    Expiry is delegated to Redis via ``SET ... EX``, so reads simply miss
    once the TTL has elapsed.
    """

    def __init__(self, redis_client):
        """
        Args:
            redis_client: Async Redis client (redis.asyncio)
        """
        self.redis = redis_client

    @classmethod
    def from_url(cls, url: str) -> "RedisTokenStore":
        import redis.asyncio as redis

        return cls(redis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> Optional[CachedToken]:
        raw = await self.redis.get(key)
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return CachedToken.from_json(raw)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable cached token", key=key, error=str(e))
            await self.redis.delete(key)
            return None

    async def put(self, key: str, value: str, ttl_seconds: int) -> CachedToken:
        entry = CachedToken(value=value, cached_at=time.time(), ttl_seconds=ttl_seconds)
        await self.redis.set(key, entry.to_json(), ex=ttl_seconds)
        return entry

    async def forget(self, key: str) -> None:
        await self.redis.delete(key)

    async def has(self, key: str) -> bool:
        return bool(await self.redis.exists(key))
