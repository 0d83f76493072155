"""
Environment-driven settings for the recipes backend.
"""
import os
from dataclasses import dataclass
from typing import Optional

AUTH_MODES = ("none", "api_key", "jwt")


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    mongo_uri: str = "mongodb://localhost:27017/recipes"
    mongo_database: Optional[str] = None
    mongo_collection: str = "recipes"
    mongo_timeout_ms: int = 5000

    cache_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None
    redis_timeout_s: float = 2.0
    cache_key_prefix: str = ""

    tag_search_case_insensitive: bool = False

    auth_mode: str = "none"
    api_key: Optional[str] = None
    jwt_secret: Optional[str] = None
    admin_username: str = "admin"
    admin_password: str = "password"

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Read settings from environment variables, falling back to defaults.
        """
        auth_mode = os.environ.get("AUTH_MODE", "none").strip().lower()
        if auth_mode not in AUTH_MODES:
            raise ValueError(f"AUTH_MODE must be one of {AUTH_MODES}, got '{auth_mode}'")

        return cls(
            mongo_uri=os.environ.get("MONGO_URI", cls.mongo_uri),
            mongo_database=os.environ.get("MONGO_DATABASE") or None,
            mongo_collection=os.environ.get("MONGO_COLLECTION", cls.mongo_collection),
            mongo_timeout_ms=int(os.environ.get("MONGO_TIMEOUT_MS", cls.mongo_timeout_ms)),
            cache_enabled=_env_bool("CACHE_ENABLED", cls.cache_enabled),
            redis_host=os.environ.get("REDIS_HOST", cls.redis_host),
            redis_port=int(os.environ.get("REDIS_PORT", cls.redis_port)),
            redis_db=int(os.environ.get("REDIS_DB", cls.redis_db)),
            redis_password=os.environ.get("REDIS_PASSWORD") or None,
            redis_timeout_s=float(os.environ.get("REDIS_TIMEOUT_S", cls.redis_timeout_s)),
            cache_key_prefix=os.environ.get("CACHE_KEY_PREFIX", cls.cache_key_prefix),
            tag_search_case_insensitive=_env_bool(
                "TAG_SEARCH_CASE_INSENSITIVE", cls.tag_search_case_insensitive
            ),
            auth_mode=auth_mode,
            api_key=os.environ.get("API_KEY") or None,
            jwt_secret=os.environ.get("JWT_SECRET") or None,
            admin_username=os.environ.get("ADMIN_USERNAME", cls.admin_username),
            admin_password=os.environ.get("ADMIN_PASSWORD", cls.admin_password),
            log_level=os.environ.get("LOG_LEVEL", cls.log_level),
        )
