"""Session storage for the order snapshot."""
from typing import Any, Optional, Protocol

from eshops.db import TTL, RedisKeys, get_redis_sync

__all__ = ["SessionStorage", "RedisSessionStorage", "get_redis_sync"]


class SessionStorage(Protocol):
    """String-keyed slot store scoped to one client session."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> Any: ...


class RedisSessionStorage:
    """
    Session storage on top of Upstash Redis.

    Keys are namespaced by session id and every write refreshes the TTL, so
    a cart lives as long as the session keeps touching it.
    """

    def __init__(self, redis, session_id: str, ttl: int = TTL.SESSION):
        if not session_id:
            raise ValueError("session_id must be a non-empty string")
        self.redis = redis
        self.session_id = session_id
        self.ttl = ttl

    def _key(self, key: str) -> str:
        return RedisKeys.session_key(self.session_id, key)

    def get(self, key: str) -> Optional[str]:
        return self.redis.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self.redis.set(self._key(key), value, ex=self.ttl)
