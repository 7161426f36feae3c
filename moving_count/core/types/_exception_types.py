"""트라이/캐치 블록에서 사용할 예외 분류 정의 모듈.

광범위한 Exception 사용을 지양하고, 의도한 예외만 명시적으로 처리하기 위해 사용합니다.
"""

from enum import StrEnum
from typing import TypeAlias


class ErrorDomain(StrEnum):
    """에러 도메인 분류"""

    VALIDATION = "validation"
    SAMPLING = "sampling"
    STORAGE = "storage"
    UNKNOWN = "unknown"


class ErrorCode(StrEnum):
    """에러 코드 분류"""

    INVALID_ARGUMENT = "invalid_argument"
    POLICY_CONFLICT = "policy_conflict"
    SAMPLE_TOO_SOON = "sample_too_soon"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    LOCK_NOT_ACQUIRED = "lock_not_acquired"
    CORRUPT_RECORD = "corrupt_record"
    UNKNOWN_ERROR = "unknown_error"


ErrorCategory: TypeAlias = tuple[ErrorDomain, ErrorCode, bool]
ExceptionGroup: TypeAlias = type[BaseException] | tuple[type[BaseException], ...]
