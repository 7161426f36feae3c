"""Redis 기반 레코드 저장소.

키 레이아웃
- <prefix>:<series>:samples  sorted set. 멤버는 orjson으로 인코딩한
  SampleRecordDTO, score는 sample_time(epoch 초)입니다.
- <prefix>:<series>:lock     시리즈 쓰기 락 (redis-py Lock)

쓰기 경로
- transaction(): 시리즈 락을 잡은 채로 읽기를 수행하고, 스테이징된 삽입/퍼지를
  하나의 MULTI/EXEC 파이프라인으로 커밋합니다.
- 락 획득 실패, 연결 오류 등은 StorageError로 변환되어 재시도 없이 전파됩니다.

집계
- score 범위로 1차 필터링(window)한 뒤 멤버를 디코딩해 카테고리 패턴/합계를 계산합니다.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

from redis.asyncio import Redis
from redis.exceptions import LockError

from moving_count.common.exceptions.base import StorageError
from moving_count.common.exceptions.exception_rule import (
    STORAGE_EXCEPTIONS,
    to_storage_error,
    wrap_storage_errors,
)
from moving_count.common.logger import PipelineLogger
from moving_count.common.serde import decode_record, encode_record
from moving_count.config.settings import redis_settings
from moving_count.core.dto.internal.series import (
    SampleQuery,
    SampleRecord,
    SeriesKeyBuilderDomain,
)
from moving_count.core.types import ErrorCode, LabelCount, StoreBackend
from moving_count.infra.cache.cache_client import RedisConnectionManager
from moving_count.infra.store.base import (
    SampleStore,
    SampleTransaction,
    group_totals,
    sum_counts,
)

logger = PipelineLogger.get_logger("redis", "store")


def _exclusive(score: float) -> str:
    """Redis score 범위의 배타 경계 표기"""
    return f"({score!r}"


class RedisSampleStore(SampleStore):
    """sorted set 기반 SampleStore 구현."""

    backend = StoreBackend.REDIS

    def __init__(
        self,
        manager: RedisConnectionManager | None = None,
        key_prefix: str | None = None,
        lock_timeout: float | None = None,
        lock_blocking_timeout: float | None = None,
    ) -> None:
        """
        Args:
            manager: Redis 연결 관리자 (기본: 싱글톤)
            key_prefix: 키 접두사 (기본: REDIS_KEY_PREFIX)
            lock_timeout: 쓰기 락 만료 시간(초)
            lock_blocking_timeout: 쓰기 락 획득 대기 시간(초)
        """
        self._manager = manager or RedisConnectionManager.get_instance()
        self.key_prefix = key_prefix or redis_settings.key_prefix
        self._lock_timeout = (
            redis_settings.lock_timeout if lock_timeout is None else lock_timeout
        )
        self._lock_blocking_timeout = (
            redis_settings.lock_blocking_timeout
            if lock_blocking_timeout is None
            else lock_blocking_timeout
        )

    @property
    def redis(self) -> Redis:
        client = self._manager.client
        if client is None:
            raise StorageError(
                message="Redis client is not initialized",
                error_code=ErrorCode.STORAGE_UNAVAILABLE,
            )
        return client

    def keys(self, series: str) -> SeriesKeyBuilderDomain:
        return SeriesKeyBuilderDomain(prefix=self.key_prefix, series=series)

    @staticmethod
    def _mapping(records: Sequence[SampleRecord]) -> dict[bytes, float]:
        return {encode_record(r): r.sample_time for r in records}

    async def _load(self, series: str, query: SampleQuery) -> list[SampleRecord]:
        lower = "-inf" if query.after is None else _exclusive(query.after)
        members = await self.redis.zrange(
            self.keys(series).samples(), lower, "+inf", byscore=True
        )
        return [decode_record(m) for m in members]

    @wrap_storage_errors("insert_records", kind="redis")
    async def insert_records(self, series: str, records: Sequence[SampleRecord]) -> None:
        if not records:
            return
        await self.redis.zadd(self.keys(series).samples(), self._mapping(records))

    @wrap_storage_errors("max_sample_time", kind="redis")
    async def max_sample_time(self, series: str) -> float | None:
        rows = await self.redis.zrange(self.keys(series).samples(), -1, -1, withscores=True)
        if not rows:
            return None
        return float(rows[0][1])

    @wrap_storage_errors("delete_older_than", kind="redis")
    async def delete_older_than(self, series: str, cutoff: float) -> int:
        return int(
            await self.redis.zremrangebyscore(
                self.keys(series).samples(), "-inf", _exclusive(cutoff)
            )
        )

    @wrap_storage_errors("sum_grouped_by_category", kind="redis")
    async def sum_grouped_by_category(
        self, series: str, query: SampleQuery
    ) -> list[LabelCount]:
        return group_totals(await self._load(series, query), query)

    @wrap_storage_errors("sum_all", kind="redis")
    async def sum_all(self, series: str, query: SampleQuery) -> int:
        return sum_counts(await self._load(series, query), query)

    @wrap_storage_errors("count_records", kind="redis")
    async def count_records(self, series: str) -> int:
        return int(await self.redis.zcard(self.keys(series).samples()))

    @wrap_storage_errors("clear", kind="redis")
    async def clear(self, series: str) -> int:
        key = self.keys(series).samples()
        removed = int(await self.redis.zcard(key))
        await self.redis.delete(key)
        return removed

    async def _commit(self, tx: SampleTransaction) -> int:
        """스테이징된 삽입/퍼지를 MULTI/EXEC 하나로 실행, 삭제 건수 반환"""
        key = self.keys(tx.series).samples()
        records = tx.pending_records
        cutoff = tx.pending_cutoff
        if not records and cutoff is None:
            return 0

        async with self.redis.pipeline(transaction=True) as pipe:
            if records:
                pipe.zadd(key, self._mapping(records))
            if cutoff is not None:
                pipe.zremrangebyscore(key, "-inf", _exclusive(cutoff))
            results = await pipe.execute()

        return int(results[-1]) if cutoff is not None else 0

    @asynccontextmanager
    async def transaction(self, series: str) -> AsyncIterator[SampleTransaction]:
        keys = self.keys(series)
        lock = self.redis.lock(
            keys.lock(),
            timeout=self._lock_timeout,
            blocking_timeout=self._lock_blocking_timeout,
        )

        try:
            acquired = await lock.acquire()
        except STORAGE_EXCEPTIONS as e:
            raise to_storage_error(e, kind="redis", series=series) from e

        if not acquired:
            logger.warning(
                "Series lock not acquired",
                extra={"series": series, "blocking_timeout": self._lock_blocking_timeout},
            )
            raise StorageError(
                message=(
                    f"Could not acquire write lock for series {series!r} "
                    f"within {self._lock_blocking_timeout}s"
                ),
                error_code=ErrorCode.LOCK_NOT_ACQUIRED,
                series=series,
            )

        try:
            tx = SampleTransaction(self, series)
            yield tx

            try:
                tx.deleted_count = await self._commit(tx)
            except STORAGE_EXCEPTIONS as e:
                raise to_storage_error(e, kind="redis", series=series) from e

            logger.debug(
                f"Committed {len(tx.pending_records)} records",
                extra={"series": series, "deleted": tx.deleted_count},
            )
        finally:
            try:
                await lock.release()
            except LockError as e:
                # 락이 timeout으로 먼저 만료된 경우. 커밋 결과는 이미 확정됨
                logger.warning(
                    f"Series lock release failed: {e}",
                    extra={"series": series, "lock_timeout": self._lock_timeout},
                )
