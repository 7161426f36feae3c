from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Final, Literal, TypeAlias, assert_never

# 공통 타입/별칭을 한곳에 모읍니다.
# - 코어 계층 어디서나 재사용 가능한 최소 단위만 정의합니다.

Label: TypeAlias = str
Count: TypeAlias = int
LabelCount: TypeAlias = tuple[Label, Count]

# 타임스탬프 입력: None(현재 시각) | Unix epoch 초 | datetime
TimestampLike: TypeAlias = datetime | int | float | None
# 기간 입력: 초 단위 숫자 | timedelta
DurationLike: TypeAlias = timedelta | int | float

StoreBackendName: TypeAlias = Literal["memory", "redis"]

DEFAULT_SAMPLE_INTERVAL_S: Final[float] = 60.0
DEFAULT_HISTORY_TO_KEEP_S: Final[float] = 3600.0


class StoreBackend(Enum):
    """샘플 저장소 백엔드 Enum.

    설정(SERIES_BACKEND)에는 문자열 값(value)이 저장됩니다.
    """

    MEMORY = "memory"
    REDIS = "redis"


def store_backend_format(backend: StoreBackend) -> str:
    """백엔드 로깅 포맷터: Enum 분기 완전탐색 보장."""
    match backend:
        case StoreBackend.MEMORY:
            return StoreBackend.MEMORY.value
        case StoreBackend.REDIS:
            return StoreBackend.REDIS.value
        case _:
            assert_never(backend)
