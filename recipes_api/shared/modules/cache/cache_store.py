# Abstract cache interface (Redis today, anything key/value later)
from typing import Optional


class CacheStore:
    def get(self, cache_key: str) -> Optional[str]:
        """Return the cached value, or None on a miss."""
        raise NotImplementedError

    def set(self, cache_key: str, value: str, ttl_seconds: Optional[int] = None):
        """Store a value. A ttl of None means the entry never expires."""
        raise NotImplementedError

    def delete(self, cache_key: str):
        """Drop a key. Deleting an absent key is a no-op."""
        raise NotImplementedError
