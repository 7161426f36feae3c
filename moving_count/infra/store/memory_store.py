"""인프로세스 레코드 저장소.

- 시리즈별 레코드 리스트 + 시리즈별 asyncio.Lock
- 트랜잭션 커밋은 await 없이 한 번에 적용되어 이벤트 루프 관점에서 원자적입니다.
- 프로세스 재시작 시 데이터는 유지되지 않습니다.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

from moving_count.common.logger import PipelineLogger
from moving_count.core.dto.internal.series import SampleQuery, SampleRecord
from moving_count.core.types import LabelCount, StoreBackend
from moving_count.infra.store.base import (
    SampleStore,
    SampleTransaction,
    group_totals,
    sum_counts,
)

logger = PipelineLogger.get_logger("memory", "store")


class MemorySampleStore(SampleStore):
    """dict 기반 SampleStore 구현."""

    backend = StoreBackend.MEMORY

    def __init__(self) -> None:
        self._records: dict[str, list[SampleRecord]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, series: str) -> asyncio.Lock:
        lock = self._locks.get(series)
        if lock is None:
            lock = self._locks[series] = asyncio.Lock()
        return lock

    def _apply_insert(self, series: str, records: Sequence[SampleRecord]) -> None:
        if records:
            self._records.setdefault(series, []).extend(records)

    def _apply_delete(self, series: str, cutoff: float) -> int:
        current = self._records.get(series, [])
        kept = [r for r in current if not r.sample_time < cutoff]
        self._records[series] = kept
        return len(current) - len(kept)

    async def insert_records(self, series: str, records: Sequence[SampleRecord]) -> None:
        self._apply_insert(series, records)

    async def max_sample_time(self, series: str) -> float | None:
        records = self._records.get(series)
        if not records:
            return None
        return max(r.sample_time for r in records)

    async def delete_older_than(self, series: str, cutoff: float) -> int:
        return self._apply_delete(series, cutoff)

    async def sum_grouped_by_category(
        self, series: str, query: SampleQuery
    ) -> list[LabelCount]:
        return group_totals(self._records.get(series, ()), query)

    async def sum_all(self, series: str, query: SampleQuery) -> int:
        return sum_counts(self._records.get(series, ()), query)

    async def count_records(self, series: str) -> int:
        return len(self._records.get(series, ()))

    async def clear(self, series: str) -> int:
        return len(self._records.pop(series, []))

    def records(self, series: str) -> list[SampleRecord]:
        """저장된 레코드 복사본 (검사/테스트용)"""
        return list(self._records.get(series, ()))

    @asynccontextmanager
    async def transaction(self, series: str) -> AsyncIterator[SampleTransaction]:
        async with self._lock_for(series):
            tx = SampleTransaction(self, series)
            yield tx

            # 본문이 정상 종료된 경우에만 도달
            self._apply_insert(series, tx.pending_records)
            if tx.pending_cutoff is not None:
                tx.deleted_count = self._apply_delete(series, tx.pending_cutoff)
            logger.debug(
                f"Committed {len(tx.pending_records)} records",
                extra={"series": series, "deleted": tx.deleted_count},
            )
