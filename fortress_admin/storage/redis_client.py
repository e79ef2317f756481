"""
Fortress Admin — Redis Client Manager.

Optional async Redis connection used for login attempt counters that
must be shared between worker processes.
"""

from __future__ import annotations

import logging
from typing import Optional

import redis.asyncio as aioredis

logger = logging.getLogger("fortress.storage.redis")


class RedisManager:
    """Manages a shared async Redis connection pool."""

    def __init__(self, url: Optional[str] = None) -> None:
        self.url = url
        self.client: Optional[aioredis.Redis] = None

    async def connect(self) -> None:
        """Connect to Redis. No-op when no URL is configured."""
        if not self.url:
            return
        client = aioredis.from_url(
            self.url,
            decode_responses=True,
            max_connections=20,
        )
        # self.client stays None if the ping fails
        await client.ping()
        self.client = client
        logger.info("Redis connected: %s", self.url)

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None
            logger.info("Redis disconnected")
