import importlib
import os
from types import ModuleType

import pytest
from pydantic import ValidationError


def _reload_settings_with_env(
    monkeypatch: pytest.MonkeyPatch, env: dict[str, str | None]
) -> ModuleType:
    # Clear related envs first to avoid leakage across tests
    prefixes = ("REDIS_", "SERIES_", "LOG_")
    for key in list(os.environ.keys()):
        if key.startswith(prefixes):
            monkeypatch.delenv(key, raising=False)

    for k, v in env.items():
        if v is None:
            monkeypatch.delenv(k, raising=False)
        else:
            monkeypatch.setenv(k, str(v))

    # Reload to reconstruct settings instances with new env
    import moving_count.config.settings as settings

    settings = importlib.reload(settings)
    return settings


def test_series_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(monkeypatch, {})

    assert settings.series_settings.sample_interval == 60
    assert settings.series_settings.history_to_keep == 3600
    assert settings.series_settings.backend == "memory"

    policy = settings.series_settings.default_policy()
    assert policy.sample_interval == 60.0
    assert policy.history_to_keep == 3600.0


def test_series_settings_env_override(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(
        monkeypatch,
        {
            "SERIES_SAMPLE_INTERVAL": "30",
            "SERIES_HISTORY_TO_KEEP": "600",
            "SERIES_BACKEND": "redis",
        },
    )

    assert settings.series_settings.sample_interval == 30
    assert settings.series_settings.history_to_keep == 600
    assert settings.series_settings.backend == "redis"


@pytest.mark.parametrize(
    "env",
    [
        {"SERIES_SAMPLE_INTERVAL": "-1"},
        {"SERIES_HISTORY_TO_KEEP": "-60"},
        {"SERIES_BACKEND": "sqlite"},
    ],
)
def test_series_settings_rejects_invalid(monkeypatch: pytest.MonkeyPatch, env: dict[str, str]):
    settings = _reload_settings_with_env(monkeypatch, {})
    for k, v in env.items():
        monkeypatch.setenv(k, v)

    with pytest.raises(ValidationError):
        settings.SeriesSettings()


def test_redis_settings_defaults_and_url(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(monkeypatch, {})

    assert settings.redis_settings.host == "localhost"
    assert settings.redis_settings.port == 6379
    assert settings.redis_settings.db == 0
    assert settings.redis_settings.password in (None, "")
    assert settings.redis_settings.ssl is False
    assert settings.redis_settings.connection_timeout == 10
    assert settings.redis_settings.key_prefix == "mc"
    assert settings.redis_settings.lock_timeout == 10.0
    assert settings.redis_settings.lock_blocking_timeout == 5.0

    # url without password and without SSL
    assert settings.redis_settings.url == "redis://localhost:6379/0"


def test_redis_settings_url_with_password_and_ssl(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(
        monkeypatch,
        {
            "REDIS_HOST": "redis.example.local",
            "REDIS_PORT": "6380",
            "REDIS_DB": "2",
            "REDIS_PASSWORD": "s3cr3t",
            "REDIS_SSL": "true",
            "REDIS_KEY_PREFIX": "pageviews",
        },
    )

    assert settings.redis_settings.url == "rediss://:s3cr3t@redis.example.local:6380/2"
    assert settings.redis_settings.key_prefix == "pageviews"


def test_logging_settings_default(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(monkeypatch, {})
    assert settings.logging_settings.level == "INFO"
    assert settings.logging_settings.to_file is False


def test_logging_settings_env_override(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(
        monkeypatch, {"LOG_LEVEL": "DEBUG", "LOG_DIR": "/tmp/mc-logs"}
    )
    assert settings.logging_settings.level == "DEBUG"
    assert settings.logging_settings.dir == "/tmp/mc-logs"

