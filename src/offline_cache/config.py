import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urlsplit

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SEED_URLS = (
    "/",
    "/index.html",
    "/manifest.json",
    "/icons/icon-192x192.png",
    "/icons/icon-512x512.png",
    "/icons/apple-touch-icon.png",
)

SEED_POLICIES = ("strict", "best_effort")
CACHE_BACKENDS = ("memory", "redis")


def _split_list(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    """Parse a comma-separated env value into a tuple, ignoring blanks."""
    if value is None:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache generation
    cache_version: str = os.getenv("CACHE_VERSION", "pricebetter-ai-v1")
    seed_urls: tuple[str, ...] = _split_list(os.getenv("SEED_URLS"), DEFAULT_SEED_URLS)
    seed_policy: str = os.getenv("SEED_POLICY", "strict")

    # Routing
    api_prefix: str = os.getenv("API_PREFIX", "/api/")
    origin_url: str = os.getenv("ORIGIN_URL", "http://localhost:5000")
    root_document: str = os.getenv("ROOT_DOCUMENT", "/")
    fetch_timeout: float = float(os.getenv("FETCH_TIMEOUT", "10.0"))

    # Storage
    cache_backend: str = os.getenv("CACHE_BACKEND", "memory")
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "offline_cache")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "info")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    @property
    def origin(self) -> str:
        """Scheme and authority of the origin, without a trailing slash.

        Returns:
            Origin string such as ``http://localhost:5000``
        """
        parts = urlsplit(self.origin_url)
        return f"{parts.scheme}://{parts.netloc}"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not self.cache_version:
            raise ValueError("CACHE_VERSION must not be empty")

        if not self.api_prefix.startswith("/"):
            raise ValueError(f"API_PREFIX must start with '/', got {self.api_prefix!r}")

        if urlsplit(self.origin_url).scheme not in ("http", "https"):
            raise ValueError(f"ORIGIN_URL must be an http(s) URL, got {self.origin_url!r}")

        if self.seed_policy not in SEED_POLICIES:
            raise ValueError(f"SEED_POLICY must be one of {list(SEED_POLICIES)}, got {self.seed_policy!r}")

        if self.cache_backend not in CACHE_BACKENDS:
            raise ValueError(
                f"CACHE_BACKEND must be one of {list(CACHE_BACKENDS)}, got {self.cache_backend!r}"
            )

        if self.fetch_timeout <= 0:
            raise ValueError("FETCH_TIMEOUT must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create an asyncio Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )
