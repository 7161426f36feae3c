from __future__ import annotations

from datetime import datetime, timedelta, timezone

from moving_count.application.series import MovingCountSeries
from moving_count.common.metrics.counter import FrequencyCounter
from moving_count.core.dto.internal.series import RetentionPolicy
from moving_count.infra.store.memory_store import MemorySampleStore

NYT = "http://www.nytimes.com"
NYT_ARTICLE = "http://www.nytimes.com/article.html"

BASE_TIME = datetime(2010, 7, 29, 16, 23, 50, tzinfo=timezone.utc)


class FrozenClock:
    """고정/이동 가능한 테스트용 시계"""

    def __init__(self, now: datetime = BASE_TIME) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now

    def rewind(self, seconds: float) -> datetime:
        return self.advance(-seconds)


def build_counter(*labels: str, **counts: int) -> FrequencyCounter:
    """라벨 나열은 increment, 키워드는 set으로 채운 카운터"""
    counter = FrequencyCounter()
    for label in labels:
        counter.increment(label)
    for label, count in counts.items():
        counter.set(label, count)
    return counter


def build_policy(sample_interval: float = 60, history_to_keep: float = 3600) -> RetentionPolicy:
    return RetentionPolicy(sample_interval=sample_interval, history_to_keep=history_to_keep)


def build_memory_series(
    name: str = "page_views",
    *,
    policy: RetentionPolicy | None = None,
    clock: FrozenClock | None = None,
    store: MemorySampleStore | None = None,
) -> MovingCountSeries:
    return MovingCountSeries(
        name,
        store or MemorySampleStore(),
        policy or build_policy(),
        clock=clock or FrozenClock(),
    )


async def record_existing_counts(
    series: MovingCountSeries, clock: FrozenClock, distance: float
) -> None:
    """`distance`초 전에 NYT 1건을 기록하고 시계를 원위치"""
    clock.rewind(distance)
    await series.record(build_counter(NYT))
    clock.advance(distance)
