from __future__ import annotations

import pytest

from moving_count.application.series_registry import SeriesRegistry
from moving_count.common.exceptions.base import InvalidArgumentError
from moving_count.core.types import ErrorCode
from moving_count.infra.store.memory_store import MemorySampleStore
from tests.factory_builders import NYT, FrozenClock, build_counter, build_policy


@pytest.fixture
def registry() -> SeriesRegistry:
    return SeriesRegistry(MemorySampleStore(), build_policy(), clock=FrozenClock())


def test_register_returns_same_instance_for_same_name(registry: SeriesRegistry) -> None:
    first = registry.register("page_views")
    assert registry.register("page_views") is first
    assert registry.get("page_views") is first
    assert len(registry) == 1
    assert "page_views" in registry


def test_register_uses_default_policy(registry: SeriesRegistry) -> None:
    series = registry.register("page_views")
    assert series.policy == registry.default_policy


def test_register_with_conflicting_policy_raises(registry: SeriesRegistry) -> None:
    registry.register("clicks", build_policy(sample_interval=5, history_to_keep=120))

    # 같은 정책은 허용
    registry.register("clicks", build_policy(sample_interval=5, history_to_keep=120))

    with pytest.raises(InvalidArgumentError) as exc_info:
        registry.register("clicks", build_policy(sample_interval=10, history_to_keep=120))
    assert exc_info.value.error_code is ErrorCode.POLICY_CONFLICT
    assert exc_info.value.series == "clicks"


def test_get_unknown_series_raises_key_error(registry: SeriesRegistry) -> None:
    with pytest.raises(KeyError):
        registry.get("missing")


def test_names_are_sorted(registry: SeriesRegistry) -> None:
    registry.register("page_views")
    registry.register("clicks")
    assert registry.names() == ["clicks", "page_views"]


@pytest.mark.asyncio
async def test_registered_series_share_store_but_not_records(registry: SeriesRegistry) -> None:
    page_views = registry.register("page_views")
    clicks = registry.register("clicks")

    await page_views.record(build_counter(NYT))
    await clicks.record(build_counter(NYT, NYT))

    assert page_views.store is clicks.store
    assert await page_views.grand_total() == 1
    assert await clicks.grand_total() == 2
