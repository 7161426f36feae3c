from __future__ import annotations

import pytest
from dependency_injector import providers

from moving_count.application.series_registry import SeriesRegistry
from moving_count.config.containers import ApplicationContainer, InfrastructureContainer
from moving_count.config.settings import RedisSettings, SeriesSettings
from moving_count.infra.cache.cache_client import RedisConnectionManager
from moving_count.infra.store.memory_store import MemorySampleStore
from moving_count.infra.store.redis_store import RedisSampleStore


@pytest.fixture
def container(monkeypatch: pytest.MonkeyPatch) -> ApplicationContainer:
    for key in ("SERIES_BACKEND", "SERIES_SAMPLE_INTERVAL", "SERIES_HISTORY_TO_KEEP"):
        monkeypatch.delenv(key, raising=False)
    return ApplicationContainer()


def test_memory_backend_builds_registry(container: ApplicationContainer) -> None:
    container.infra.series_config.override(providers.Object(SeriesSettings(backend="memory")))

    registry = container.registry()
    assert isinstance(registry, SeriesRegistry)
    assert isinstance(registry.store, MemorySampleStore)
    assert container.registry() is registry


def test_default_policy_follows_series_settings(container: ApplicationContainer) -> None:
    container.infra.series_config.override(
        providers.Object(SeriesSettings(sample_interval=5, history_to_keep=120))
    )

    registry = container.registry()
    assert registry.default_policy.sample_interval == 5
    assert registry.default_policy.history_to_keep == 120
    assert registry.register("clicks").sample_interval == 5


def test_redis_backend_selected_from_settings(container: ApplicationContainer) -> None:
    container.infra.series_config.override(providers.Object(SeriesSettings(backend="redis")))
    container.infra.redis_config.override(
        providers.Object(RedisSettings(key_prefix="pv", lock_timeout=2.0))
    )

    store = container.stores.store()
    assert isinstance(store, RedisSampleStore)
    assert store.key_prefix == "pv"
    assert store.keys("page_views").samples() == "pv:page_views:samples"


@pytest.mark.asyncio
async def test_redis_resource_lifecycle(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    async def fake_initialize(self: RedisConnectionManager, redis_url: str | None = None) -> None:
        calls.append("initialize")

    async def fake_close(self: RedisConnectionManager) -> None:
        calls.append("close")

    monkeypatch.setattr(RedisConnectionManager, "initialize", fake_initialize)
    monkeypatch.setattr(RedisConnectionManager, "close", fake_close)

    infra = InfrastructureContainer()
    await infra.init_resources()
    assert calls == ["initialize"]

    await infra.shutdown_resources()
    assert calls == ["initialize", "close"]
