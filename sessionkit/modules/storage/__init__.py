"""
Storage Module - Black Box Interface

Purpose: Session provider implementations and their persistence plumbing
Interface: MemoryProvider, RedisProvider, StorageModule.connect()
Hidden: Redis key layout, value encoding, connection handling

Any backend satisfying the session Provider contract can be registered instead.
"""

import os
from typing import Optional

import redis.asyncio as redis

from .codec import decode_value, encode_value
from .memory import MemoryProvider, MemorySession
from .redis_provider import RedisProvider, RedisSession


class StorageModule:
    """Black box Redis connection holder."""

    def __init__(self, connection_url: Optional[str] = None):
        """Initialize storage with connection URL."""
        self.url = connection_url or os.getenv("REDIS_URL", "redis://localhost:6379/0")
        self._client = None

    async def connect(self) -> redis.Redis:
        """Get storage connection."""
        if not self._client:
            self._client = redis.from_url(self.url, decode_responses=True)
        return self._client

    async def disconnect(self):
        """Close storage connection."""
        if self._client:
            await self._client.aclose()
            self._client = None


__all__ = [
    "MemoryProvider",
    "MemorySession",
    "RedisProvider",
    "RedisSession",
    "StorageModule",
    "decode_value",
    "encode_value",
]
