import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sessionkit.config.provider import EnvConfigProvider, SessionConfig


def test_session_config_defaults(monkeypatch):
    """Test defaults when no session variables are set."""
    for name in (
        "SESSION_PROVIDER",
        "SESSION_COOKIE_NAME",
        "SESSION_MAX_LIFETIME",
        "SESSION_SWEEP_INTERVAL",
        "SESSION_PERSIST_COOKIE",
        "SESSION_STRICT",
    ):
        monkeypatch.delenv(name, raising=False)

    config = EnvConfigProvider().get_session_config()

    assert config.provider_name == "memory"
    assert config.cookie_name == "sessionid"
    assert config.max_lifetime == 3600
    assert config.sweep_interval is None
    assert config.effective_sweep_interval == 3600
    assert config.cookie_max_age == 3600
    assert not config.strict_tokens


def test_session_config_from_env(monkeypatch):
    monkeypatch.setenv("SESSION_PROVIDER", "redis")
    monkeypatch.setenv("SESSION_COOKIE_NAME", "gosessionid")
    monkeypatch.setenv("SESSION_MAX_LIFETIME", "600")
    monkeypatch.setenv("SESSION_SWEEP_INTERVAL", "60")
    monkeypatch.setenv("SESSION_PERSIST_COOKIE", "false")
    monkeypatch.setenv("SESSION_STRICT", "true")

    config = EnvConfigProvider().get_session_config()

    assert config.provider_name == "redis"
    assert config.cookie_name == "gosessionid"
    assert config.max_lifetime == 600
    assert config.effective_sweep_interval == 60
    assert config.cookie_max_age == 0
    assert config.strict_tokens


def test_invalid_integer_env(monkeypatch):
    monkeypatch.setenv("SESSION_MAX_LIFETIME", "an hour")

    with pytest.raises(ValueError, match="SESSION_MAX_LIFETIME"):
        EnvConfigProvider().get_session_config()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"provider_name": ""},
        {"provider_name": "memory", "cookie_name": ""},
        {"provider_name": "memory", "max_lifetime": 0},
        {"provider_name": "memory", "sweep_interval": -5},
    ],
)
def test_session_config_validation(kwargs):
    """Test that nonsensical session settings are rejected up front."""
    with pytest.raises(ValueError):
        SessionConfig(**kwargs)


def test_redis_and_api_config(monkeypatch):
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379/2")
    monkeypatch.setenv("API_PORT", "9000")

    provider = EnvConfigProvider()

    assert provider.get_redis_config().url == "redis://cache:6379/2"
    assert provider.get_api_config().port == 9000
