"""시리즈 레코드 저장소 계약.

구성 요소
- SampleStore: 시리즈가 요구하는 저장소 인터페이스 (ABC).
- SampleTransaction: 쓰기 경로의 작업 단위. 읽기는 즉시 수행하고,
  삽입/퍼지는 스테이징했다가 트랜잭션 종료 시 원자적으로 커밋합니다.
- filter_records / group_totals / sum_counts: 레코드 목록 기반 공통 집계.

설계 원칙
- 시리즈 단위 직렬화: transaction()은 같은 시리즈에 대한 다른 쓰기와 겹치지 않습니다.
- 본문에서 예외가 나면 스테이징된 작업은 버려집니다 (부분 쓰기 없음).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import AbstractAsyncContextManager
from typing import Iterable, Iterator, Sequence

from moving_count.core.dto.internal.series import SampleQuery, SampleRecord
from moving_count.core.types import LabelCount, StoreBackend
from moving_count.core.utils.pattern import like_match


class SampleTransaction:
    """시리즈 쓰기 작업 단위.

    저장소의 transaction() 컨텍스트 안에서만 유효합니다.
    """

    __slots__ = ("series", "_store", "_records", "_cutoff", "deleted_count")

    def __init__(self, store: SampleStore, series: str) -> None:
        self.series = series
        self._store = store
        self._records: list[SampleRecord] = []
        self._cutoff: float | None = None
        self.deleted_count: int = 0

    async def max_sample_time(self) -> float | None:
        return await self._store.max_sample_time(self.series)

    def insert_records(self, records: Iterable[SampleRecord]) -> None:
        self._records.extend(records)

    def delete_older_than(self, cutoff: float) -> None:
        # 여러 번 호출되면 가장 넓은 범위의 퍼지를 유지
        self._cutoff = cutoff if self._cutoff is None else max(self._cutoff, cutoff)

    @property
    def pending_records(self) -> tuple[SampleRecord, ...]:
        return tuple(self._records)

    @property
    def pending_cutoff(self) -> float | None:
        return self._cutoff


class SampleStore(ABC):
    """시리즈가 요구하는 append-only 레코드 저장소."""

    backend: StoreBackend

    @abstractmethod
    async def insert_records(self, series: str, records: Sequence[SampleRecord]) -> None:
        """레코드 일괄 삽입"""

    @abstractmethod
    async def max_sample_time(self, series: str) -> float | None:
        """시리즈 전체(모든 카테고리)에서 가장 최근 sample_time. 없으면 None."""

    @abstractmethod
    async def delete_older_than(self, series: str, cutoff: float) -> int:
        """sample_time < cutoff 인 레코드 삭제, 삭제 건수 반환"""

    @abstractmethod
    async def sum_grouped_by_category(
        self, series: str, query: SampleQuery
    ) -> list[LabelCount]:
        """카테고리별 합계 (합계 내림차순, 동률은 카테고리 오름차순)"""

    @abstractmethod
    async def sum_all(self, series: str, query: SampleQuery) -> int:
        """조건에 맞는 레코드 카운트 총합 (없으면 0)"""

    @abstractmethod
    async def count_records(self, series: str) -> int:
        """저장된 레코드 수"""

    @abstractmethod
    async def clear(self, series: str) -> int:
        """시리즈의 모든 레코드 삭제, 삭제 건수 반환"""

    @abstractmethod
    def transaction(self, series: str) -> AbstractAsyncContextManager[SampleTransaction]:
        """시리즈 단위로 직렬화된 쓰기 트랜잭션"""


def filter_records(
    records: Iterable[SampleRecord], query: SampleQuery
) -> Iterator[SampleRecord]:
    """category_like, after 필터를 AND로 적용"""
    for record in records:
        if query.after is not None and not record.sample_time > query.after:
            continue
        if not like_match(query.category_like, record.category):
            continue
        yield record


def group_totals(records: Iterable[SampleRecord], query: SampleQuery) -> list[LabelCount]:
    """카테고리별 합계를 내림차순으로 정렬 후 limit 적용"""
    sums: dict[str, int] = defaultdict(int)
    for record in filter_records(records, query):
        sums[record.category] += record.count

    ranked = sorted(sums.items(), key=lambda kv: (-kv[1], kv[0]))
    if query.limit is not None:
        ranked = ranked[: query.limit]
    return ranked


def sum_counts(records: Iterable[SampleRecord], query: SampleQuery) -> int:
    return sum(record.count for record in filter_records(records, query))
