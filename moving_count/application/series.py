"""카운트 시계열 집계 엔진.

카운트를 주기적으로 스냅샷해 저장하고, 시간에 걸쳐 집계합니다 (카운트용 rrdtool).

기록:
    counter = FrequencyCounter()
    counter.increment("http://www.nytimes.com")
    await page_views.record(counter, 1280420630)

    timestamp를 생략하면 현재 시각으로 기록합니다. 최신 저장 샘플과의 거리가
    sample_interval 보다 짧으면 SampleTooSoonError가 발생합니다
    (재시작 등으로 인한 카운트 중복 기록 방지).

조회:
    await page_views.totals(limit=10)
    await page_views.grand_total(category_like="http://www.nytimes.com%", window=300)
"""

from __future__ import annotations

import dataclasses
from datetime import datetime

from moving_count.common.exceptions.base import InvalidArgumentError, SampleTooSoonError
from moving_count.common.logger import PipelineLogger
from moving_count.common.metrics.counter import FrequencyCounter
from moving_count.core.dto.internal.series import RetentionPolicy, SampleQuery
from moving_count.core.types import (
    DurationLike,
    LabelCount,
    TimestampLike,
    store_backend_format,
)
from moving_count.core.utils.timestamp import (
    Clock,
    duration_seconds,
    from_epoch,
    resolve_timestamp,
    to_epoch,
    utc_now,
)
from moving_count.infra.store.base import SampleStore

logger = PipelineLogger.get_logger("series", "app")


class MovingCountSeries:
    """하나의 논리 메트릭 스트림에 대한 보존 이력과 집계.

    - 간격 검증은 카테고리별이 아닌 시리즈 전체의 최신 sample_time 기준입니다.
    - 퍼지 기준은 벽시계가 아니라 방금 기록한 timestamp 입니다.
    - 검증/삽입/퍼지는 저장소 트랜잭션 하나로 원자적으로 수행됩니다.
    """

    def __init__(
        self,
        name: str,
        store: SampleStore,
        policy: RetentionPolicy | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """
        Args:
            name: 시리즈 이름 (저장소 키/파티션)
            store: 저장소 협력자
            policy: 보존 정책 (기본: 60초 간격, 1시간 보존)
            clock: timestamp 생략 시 사용할 시계
        """
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(f"series name must be a non-empty string: {name!r}")

        self.name = name
        self.store = store
        self.policy = policy or RetentionPolicy()
        self._clock = clock
        self._logger = logger.bind(series=name)

    @property
    def sample_interval(self) -> float:
        return self.policy.sample_interval

    @property
    def history_to_keep(self) -> float:
        return self.policy.history_to_keep

    async def record(
        self, counter: FrequencyCounter, timestamp: TimestampLike = None
    ) -> bool:
        """counter 스냅샷을 timestamp 시각으로 기록합니다.

        빈 카운터도 간격 검증과 퍼지는 수행하며 삽입만 건너뜁니다.
        counter는 한 번 읽고 보관하지 않습니다.

        Raises:
            SampleTooSoonError: 최신 저장 샘플과 너무 가까울 때 (아무것도 쓰지 않음)
            StorageError: 저장소 I/O 실패
        """
        sample_time = resolve_timestamp(timestamp, self._clock)
        batch = counter.snapshot()
        cutoff = to_epoch(sample_time) - self.history_to_keep

        async with self.store.transaction(self.name) as tx:
            latest = await tx.max_sample_time()
            self._check_sample_valid(sample_time, latest)

            if batch:
                tx.insert_records(batch.to_records(sample_time))
            tx.delete_older_than(cutoff)

        self._logger.debug(
            f"Recorded {len(batch)} categories at {sample_time.isoformat()}",
            extra={"purged": tx.deleted_count},
        )
        return True

    def _check_sample_valid(self, sample_time: datetime, latest: float | None) -> None:
        # 데이터가 없으면 당연히 유효
        if latest is None:
            return

        distance = abs(to_epoch(sample_time) - latest)
        if distance < self.sample_interval:
            error = SampleTooSoonError.build(
                sample_interval=self.sample_interval,
                distance=distance,
                latest_sample=from_epoch(latest),
                timestamp=sample_time,
                series=self.name,
            )
            self._logger.warning(error.message, extra=error.to_dict())
            raise error

    async def _build_query(
        self,
        category_like: str | None,
        window: DurationLike | None,
        limit: int | None = None,
    ) -> SampleQuery:
        # 인자 검증을 I/O보다 먼저
        query = SampleQuery(category_like=category_like, limit=limit)
        if window is None:
            return query

        seconds = duration_seconds(window, "window")
        latest = await self.store.max_sample_time(self.name)
        if latest is None:
            return query
        return dataclasses.replace(query, after=latest - seconds)

    async def totals(
        self,
        *,
        category_like: str | None = None,
        window: DurationLike | None = None,
        limit: int | None = None,
    ) -> list[LabelCount]:
        """카테고리별 전체 이력 합계 (합계 내림차순, 동률은 카테고리 오름차순).

        Args:
            category_like: LIKE 패턴 ('%' 와일드카드)
            window: 최신 저장 샘플 기준 최근 n초(또는 timedelta)만 합산
            limit: 상위 n개 그룹
        """
        query = await self._build_query(category_like, window, limit)
        if query.limit == 0:
            return []
        return await self.store.sum_grouped_by_category(self.name, query)

    async def grand_total(
        self,
        *,
        category_like: str | None = None,
        window: DurationLike | None = None,
    ) -> int:
        """모든 카테고리에 걸친 단일 합계. 일치하는 레코드가 없으면 0."""
        query = await self._build_query(category_like, window)
        return await self.store.sum_all(self.name, query)

    async def latest_sample_time(self) -> datetime | None:
        latest = await self.store.max_sample_time(self.name)
        return None if latest is None else from_epoch(latest)

    async def count_records(self) -> int:
        return await self.store.count_records(self.name)

    async def clear(self) -> int:
        removed = await self.store.clear(self.name)
        self._logger.info(f"Cleared {removed} records")
        return removed

    def __repr__(self) -> str:
        backend = store_backend_format(self.store.backend)
        return (
            f"MovingCountSeries(name={self.name!r}, backend={backend}, "
            f"sample_interval={self.sample_interval:g}, "
            f"history_to_keep={self.history_to_keep:g})"
        )
