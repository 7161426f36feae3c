from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from moving_count.common.exceptions.base import InvalidArgumentError
from moving_count.core.types import (
    DEFAULT_HISTORY_TO_KEEP_S,
    DEFAULT_SAMPLE_INTERVAL_S,
    DurationLike,
    LabelCount,
)
from moving_count.core.utils.timestamp import duration_seconds, from_epoch, to_epoch


def validate_count(count: object) -> int:
    """카운트는 음수가 아닌 int만 허용 (bool 제외)"""
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidArgumentError(f"count must be a non-negative integer: {count!r}")
    if count < 0:
        raise InvalidArgumentError(f"count must be a non-negative integer: {count!r}")
    return count


@dataclass(slots=True, frozen=True, match_args=False)
class RetentionPolicy:
    """시리즈 보존 정책 (불변).

    - sample_interval: 샘플 간 최소 간격(초). 시리즈 전체 기준으로 검증합니다.
    - history_to_keep: 보존 이력 깊이(초). 기록 시각 기준으로 그보다 오래된 레코드를 삭제합니다.

    timedelta 입력도 허용하며 내부적으로 float 초로 정규화합니다.
    """

    sample_interval: DurationLike = DEFAULT_SAMPLE_INTERVAL_S
    history_to_keep: DurationLike = DEFAULT_HISTORY_TO_KEEP_S

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "sample_interval",
            duration_seconds(self.sample_interval, "sample_interval"),
        )
        object.__setattr__(
            self,
            "history_to_keep",
            duration_seconds(self.history_to_keep, "history_to_keep"),
        )


@dataclass(slots=True, frozen=True, repr=False, match_args=False, kw_only=True)
class SampleRecord:
    """영속 레코드 (category, count, sample_time). 생성 후 변경되지 않습니다."""

    category: str
    count: int
    sample_time: float

    @property
    def sample_datetime(self) -> datetime:
        return from_epoch(self.sample_time)

    def __repr__(self) -> str:
        return (
            f"SampleRecord(category={self.category!r}, count={self.count}, "
            f"sample_time={self.sample_datetime.isoformat()})"
        )


@dataclass(slots=True, frozen=True, match_args=False)
class SampleBatch:
    """FrequencyCounter 스냅샷 (불변). 저장 순서는 의미가 없습니다."""

    entries: tuple[LabelCount, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def to_records(self, sample_time: datetime) -> list[SampleRecord]:
        """모든 항목에 동일한 sample_time을 찍어 레코드로 변환"""
        ts = to_epoch(sample_time)
        return [
            SampleRecord(category=category, count=count, sample_time=ts)
            for category, count in self.entries
        ]


@dataclass(slots=True, frozen=True, match_args=False, kw_only=True)
class SampleQuery:
    """집계 요청 필터 (모두 선택, AND 결합).

    - category_like: SQL LIKE 패턴
    - after: 이 epoch 초보다 "큰" sample_time만 포함 (window 해석 결과)
    - limit: 상위 n개 그룹 (sum_grouped_by_category 전용)
    """

    category_like: str | None = None
    after: float | None = None
    limit: int | None = None

    def __post_init__(self) -> None:
        if self.limit is not None:
            if isinstance(self.limit, bool) or not isinstance(self.limit, int):
                raise InvalidArgumentError(f"limit must be an integer: {self.limit!r}")
            if self.limit < 0:
                raise InvalidArgumentError(f"limit must be non-negative: {self.limit!r}")
        if self.category_like is not None and not isinstance(self.category_like, str):
            raise InvalidArgumentError(
                f"category_like must be a string: {self.category_like!r}"
            )


@dataclass(slots=True, frozen=True, repr=False, match_args=False, kw_only=True)
class SeriesKeyBuilderDomain:
    """시리즈별 Redis 키 빌더."""

    prefix: str
    series: str

    def samples(self) -> str:
        return f"{self.prefix}:{self.series}:samples"

    def lock(self) -> str:
        return f"{self.prefix}:{self.series}:lock"
