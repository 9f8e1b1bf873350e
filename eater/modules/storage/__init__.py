"""
Storage Module - Black Box Interface

Purpose: Own the Redis connection the credential store writes through
Interface: StorageModule(store_config) used as an async context manager,
           or connect()/disconnect()/is_reachable()
Hidden: Redis URL parsing, connection pooling, response decoding

Values come back as str so the cipher can treat them as Fernet tokens.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ...config.provider import StoreConfig

logger = logging.getLogger(__name__)


class StorageModule:
    """Connection owner for the credential store's Redis database."""

    def __init__(self, store_config: StoreConfig):
        self.config = store_config
        self._client: Optional[redis.Redis] = None

    async def connect(self) -> redis.Redis:
        """Return the client, opening the pool on first use."""
        if self._client is None:
            logger.debug(f"Opening credential storage for namespace {self.config.namespace}")
            self._client = redis.from_url(self.config.redis_url, decode_responses=True)
        return self._client

    async def disconnect(self):
        """Close the pool. Safe to call when never connected."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def is_reachable(self) -> bool:
        """Whether Redis answers a PING."""
        client = await self.connect()
        try:
            return bool(await client.ping())
        except (RedisError, OSError) as e:
            logger.warning(f"Credential storage unreachable: {type(e).__name__}")
            return False

    async def __aenter__(self) -> redis.Redis:
        return await self.connect()

    async def __aexit__(self, *exc):
        await self.disconnect()


__all__ = ["StorageModule"]
