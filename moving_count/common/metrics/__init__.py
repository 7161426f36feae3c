"""카운트 수집 계층.

공개 API:
- FrequencyCounter: 라벨별 빈도 카운터 (SampleBatch 스냅샷 생성)
"""

from moving_count.common.metrics.counter import FrequencyCounter

__all__ = [
    "FrequencyCounter",
]
