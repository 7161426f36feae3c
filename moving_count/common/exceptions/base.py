from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from moving_count.core.types import ErrorCode, ErrorDomain


@dataclass(slots=True, eq=False)
class MovingCountException(Exception):
    """moving_count 기본 예외 클래스

    운영/관측/정책 판단을 위한 구조화 필드를 포함하며, `to_dict()`는
    로그 직렬화 시 일관된 스키마를 제공합니다.
    """

    message: str
    original_exception: Exception | None = None

    # 구조화 필드 (운영/관측/정책 판단용)
    error_domain: ErrorDomain = ErrorDomain.UNKNOWN
    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR
    retryable: bool = False
    series: str | None = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 로그 데이터로 변환"""
        result: dict[str, Any] = {
            "error": self.message,
            "error_type": self.__class__.__name__,
            "error_domain": self.error_domain.value,
            "error_code": self.error_code.value,
            "retryable": self.retryable,
        }

        if self.series:
            result["series"] = self.series

        if self.original_exception:
            result["original_error"] = str(self.original_exception)
            result["original_error_type"] = self.original_exception.__class__.__name__

        return result


@dataclass(slots=True, eq=False)
class InvalidArgumentError(MovingCountException):
    """잘못된 카운트/기간/limit 또는 정책 충돌"""

    error_domain: ErrorDomain = ErrorDomain.VALIDATION
    error_code: ErrorCode = ErrorCode.INVALID_ARGUMENT


@dataclass(slots=True, eq=False, kw_only=True)
class SampleTooSoonError(MovingCountException):
    """샘플 간격 검증 실패.

    최신 저장 샘플과의 거리(distance)가 sample_interval 보다 짧을 때 발생합니다.
    호출자는 `remaining`으로 "X초 이르다"를 보고할 수 있습니다.
    """

    sample_interval: float
    distance: float
    latest_sample: datetime
    timestamp: datetime

    error_domain: ErrorDomain = ErrorDomain.SAMPLING
    error_code: ErrorCode = ErrorCode.SAMPLE_TOO_SOON

    @classmethod
    def build(
        cls,
        *,
        sample_interval: float,
        distance: float,
        latest_sample: datetime,
        timestamp: datetime,
        series: str | None = None,
    ) -> SampleTooSoonError:
        remaining = sample_interval - distance
        return cls(
            message=(
                f"Data recorded at {latest_sample.isoformat()} making "
                f"{timestamp.isoformat()} {remaining:0.2f}s too soon "
                f"on a {sample_interval:g}s interval."
            ),
            sample_interval=sample_interval,
            distance=distance,
            latest_sample=latest_sample,
            timestamp=timestamp,
            series=series,
        )

    @property
    def remaining(self) -> float:
        return self.sample_interval - self.distance

    def to_dict(self) -> dict[str, Any]:
        result = MovingCountException.to_dict(self)
        result.update(
            {
                "sample_interval": self.sample_interval,
                "distance": self.distance,
                "remaining": round(self.remaining, 2),
                "latest_sample": self.latest_sample.isoformat(),
                "timestamp": self.timestamp.isoformat(),
            }
        )
        return result


@dataclass(slots=True, eq=False)
class StorageError(MovingCountException):
    """저장소 I/O 실패. 재시도 정책은 호출자/저장소에 위임합니다."""

    error_domain: ErrorDomain = ErrorDomain.STORAGE
    error_code: ErrorCode = ErrorCode.STORAGE_UNAVAILABLE
    retryable: bool = True
