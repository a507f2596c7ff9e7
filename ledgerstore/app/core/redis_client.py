"""
Redis client initialization for web persistence.

The web backend keeps the whole database image in an async key-value store.
Redis is the default store; anything exposing async ``get``/``set`` works.
"""

from typing import Optional, Protocol

import redis.asyncio as redis

from ledgerstore.app.core.config import Settings


class KeyValueStore(Protocol):
    """Async byte-blob store keyed by string."""

    async def get(self, key: str) -> Optional[bytes]:
        ...

    async def set(self, key: str, value: bytes) -> object:
        ...


def create_redis_store(settings: Settings) -> "redis.Redis":
    """
    Create an async Redis client for storing the database image.

    Responses are left undecoded because the stored value is binary.
    """
    return redis.from_url(
        settings.redis_url,
        decode_responses=False,
    )

