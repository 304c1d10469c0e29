"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class SessionConfig:
    """Session manager configuration."""
    provider_name: str
    cookie_name: str = "sessionid"
    max_lifetime: int = 3600
    sweep_interval: Optional[int] = None
    persist_cookie: bool = True
    strict_tokens: bool = False

    def __post_init__(self):
        if not self.provider_name:
            raise ValueError("provider_name is required")
        if not self.cookie_name:
            raise ValueError("cookie_name is required")
        if self.max_lifetime <= 0:
            raise ValueError(f"max_lifetime must be positive, got {self.max_lifetime}")
        if self.sweep_interval is not None and self.sweep_interval <= 0:
            raise ValueError(f"sweep_interval must be positive, got {self.sweep_interval}")

    @property
    def effective_sweep_interval(self) -> int:
        """Seconds between sweeps; defaults to the idle lifetime."""
        return self.sweep_interval or self.max_lifetime

    @property
    def cookie_max_age(self) -> int:
        """Cookie Max-Age; 0 means a browser-session cookie."""
        return self.max_lifetime if self.persist_cookie else 0


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool


@dataclass
class RedisConfig:
    """Redis connection configuration."""
    url: str
    key_prefix: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_session_config(self) -> SessionConfig:
        """Get session configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...

    def get_redis_config(self) -> RedisConfig:
        """Get Redis configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_session_config(self) -> SessionConfig:
        """Get session configuration from environment variables."""
        return SessionConfig(
            provider_name=os.getenv("SESSION_PROVIDER", "memory"),
            cookie_name=os.getenv("SESSION_COOKIE_NAME", "sessionid"),
            max_lifetime=_env_int("SESSION_MAX_LIFETIME", "3600"),
            sweep_interval=_env_int("SESSION_SWEEP_INTERVAL", "0") or None,
            persist_cookie=_env_bool("SESSION_PERSIST_COOKIE", "true"),
            strict_tokens=_env_bool("SESSION_STRICT", "false"),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=_env_int("API_PORT", "8080"),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=_env_bool("API_DEBUG", "false"),
        )

    def get_redis_config(self) -> RedisConfig:
        """Get Redis configuration from environment variables."""
        return RedisConfig(
            url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            key_prefix=os.getenv("REDIS_KEY_PREFIX", "sessionkit"),
        )
