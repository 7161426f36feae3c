"""샘플 타임스탬프/기간 정규화 유틸리티.

- 타임스탬프는 항상 UTC aware datetime(초 단위 절삭)으로 정규화합니다.
- 저장소에는 Unix epoch 초(float)로 기록합니다.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Callable

from moving_count.common.exceptions.base import InvalidArgumentError
from moving_count.core.types import DurationLike, TimestampLike

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """현재 UTC 시각 (초 단위 절삭)"""
    return datetime.now(timezone.utc).replace(microsecond=0)


def resolve_timestamp(timestamp: TimestampLike, clock: Clock = utc_now) -> datetime:
    """샘플 타임스탬프 정규화.

    Args:
        timestamp: None(현재 시각) | Unix epoch 초 | datetime (naive는 UTC로 간주)
        clock: None일 때 사용할 시계

    Returns:
        UTC aware datetime (초 단위 절삭)
    """
    match timestamp:
        case None:
            resolved = clock()
        case bool():
            raise InvalidArgumentError(f"timestamp must not be a bool: {timestamp!r}")
        case int() | float():
            if not math.isfinite(timestamp):
                raise InvalidArgumentError(f"timestamp must be finite: {timestamp!r}")
            try:
                resolved = datetime.fromtimestamp(timestamp, tz=timezone.utc)
            except (OverflowError, ValueError, OSError) as e:
                raise InvalidArgumentError(
                    f"timestamp out of range: {timestamp!r}", original_exception=e
                ) from e
        case datetime():
            resolved = timestamp
        case _:
            raise InvalidArgumentError(
                f"timestamp must be datetime, epoch seconds or None: {timestamp!r}"
            )

    if resolved.tzinfo is None:
        resolved = resolved.replace(tzinfo=timezone.utc)
    return resolved.astimezone(timezone.utc).replace(microsecond=0)


def to_epoch(moment: datetime) -> float:
    return moment.timestamp()


def from_epoch(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def duration_seconds(duration: DurationLike, name: str = "duration") -> float:
    """기간 입력(초 | timedelta)을 음수가 아닌 float 초로 정규화"""
    match duration:
        case bool():
            raise InvalidArgumentError(f"{name} must not be a bool: {duration!r}")
        case timedelta():
            seconds = duration.total_seconds()
        case int() | float():
            seconds = float(duration)
        case _:
            raise InvalidArgumentError(
                f"{name} must be seconds or a timedelta: {duration!r}"
            )

    if not math.isfinite(seconds) or seconds < 0:
        raise InvalidArgumentError(f"{name} must be a non-negative duration: {duration!r}")
    return seconds
