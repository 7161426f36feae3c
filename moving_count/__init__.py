"""moving_count: 라벨별 빈도 카운트를 시간에 걸쳐 보존/집계합니다.

공개 API:
- FrequencyCounter: 라벨별 빈도 카운터
- MovingCountSeries: 간격 검증/보존 퍼지/집계 엔진
- SeriesRegistry: 메트릭 종류별 시리즈 관리
- RetentionPolicy, SampleBatch, SampleRecord, SampleQuery: 도메인 타입
- MemorySampleStore, RedisSampleStore: 저장소 구현
- InvalidArgumentError, SampleTooSoonError, StorageError: 도메인 예외
"""

from moving_count.application.series import MovingCountSeries
from moving_count.application.series_registry import SeriesRegistry
from moving_count.common.exceptions.base import (
    InvalidArgumentError,
    MovingCountException,
    SampleTooSoonError,
    StorageError,
)
from moving_count.common.metrics.counter import FrequencyCounter
from moving_count.core.dto.internal.series import (
    RetentionPolicy,
    SampleBatch,
    SampleQuery,
    SampleRecord,
)
from moving_count.infra.store import (
    MemorySampleStore,
    RedisSampleStore,
    SampleStore,
    SampleTransaction,
)

__all__ = [
    "FrequencyCounter",
    "MovingCountSeries",
    "SeriesRegistry",
    "RetentionPolicy",
    "SampleBatch",
    "SampleQuery",
    "SampleRecord",
    "SampleStore",
    "SampleTransaction",
    "MemorySampleStore",
    "RedisSampleStore",
    "MovingCountException",
    "InvalidArgumentError",
    "SampleTooSoonError",
    "StorageError",
]
