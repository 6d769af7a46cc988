"""
Storage Module - Upstash Redis client

Provides the singleton sync Upstash Redis client used as durable session
storage for carts, plus key and TTL conventions.
"""

import os
from typing import Optional

from upstash_redis import Redis

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

_sync_redis_client: Optional[Redis] = None


def get_redis_sync() -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Cart operations are synchronous from the caller's point of view, so the
    REST client is used in its blocking flavour.
    """
    global _sync_redis_client

    if _sync_redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _sync_redis_client = Redis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _sync_redis_client


class RedisKeys:
    """Redis key prefixes."""

    SESSION = "session:"  # session:{session_id}:{name}

    @staticmethod
    def session_key(session_id: str, name: str) -> str:
        return f"{RedisKeys.SESSION}{session_id}:{name}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    SESSION = 86400  # 24 hours, abandoned carts expire
