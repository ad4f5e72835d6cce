import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()

APP_VERSION = "0.1.0"


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_backend: str = os.getenv("CACHE_BACKEND", "memory")
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "1000"))
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "scrobble-cache")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Rate limiting
    rate_limit_max_requests: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
    rate_limit_window_ms: int = int(os.getenv("RATE_LIMIT_WINDOW_MS", "60000"))
    rate_limit_cleanup_interval: float = float(os.getenv("RATE_LIMIT_CLEANUP_INTERVAL", "60"))

    # Upstream APIs
    lastfm_api_key: str = os.getenv("LASTFM_API_KEY", "")
    lastfm_api_root: str = os.getenv("LASTFM_API_ROOT", "https://ws.audioscrobbler.com/2.0/")
    musicbrainz_api_root: str = os.getenv("MUSICBRAINZ_API_ROOT", "https://musicbrainz.org/ws/2")
    cover_art_api_root: str = os.getenv("COVER_ART_API_ROOT", "https://coverartarchive.org")
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "10"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "info")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8787"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    @property
    def user_agent(self) -> str:
        """User-Agent sent to every upstream API."""
        return f"LastFMViewer/{APP_VERSION}"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_backend not in ("memory", "redis"):
            raise ValueError(f"CACHE_BACKEND must be 'memory' or 'redis', got {self.cache_backend!r}")

        if self.cache_max_entries <= 0:
            raise ValueError("CACHE_MAX_ENTRIES must be positive")

        if self.rate_limit_max_requests <= 0 or self.rate_limit_window_ms <= 0:
            raise ValueError("RATE_LIMIT_MAX_REQUESTS and RATE_LIMIT_WINDOW_MS must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create an asyncio Redis client instance."""
    config = config or settings
    return redis.from_url(
        config.redis_url,
        password=config.redis_password,
        decode_responses=False,
    )
