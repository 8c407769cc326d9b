"""
Auth Module
===========
B2B token acquisition and caching.
"""

from .token_store import CachedToken, TokenStore, InMemoryTokenStore, RedisTokenStore
from .client import AuthClient

__all__ = [
    "CachedToken",
    "TokenStore",
    "InMemoryTokenStore",
    "RedisTokenStore",
    "AuthClient",
]
