from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import ValidationError
from redis.exceptions import (
    AuthenticationError as RedisAuthenticationError,
)
from redis.exceptions import (
    ConnectionError as RedisConnectionError,
)
from redis.exceptions import (
    DataError as RedisDataError,
)
from redis.exceptions import (
    LockError as RedisLockError,
)
from redis.exceptions import (
    ResponseError as RedisResponseError,
)
from redis.exceptions import (
    TimeoutError as RedisTimeoutError,
)

from moving_count.common.exceptions.base import StorageError
from moving_count.common.logger import PipelineLogger
from moving_count.core.dto.internal.common import RuleDomain
from moving_count.core.types import ErrorCategory, ErrorCode, ErrorDomain

logger = PipelineLogger.get_logger("storage_errors", "infra")

T = TypeVar("T")

# Redis
RedisException = (
    RedisConnectionError,
    RedisDataError,
    RedisResponseError,
    RedisTimeoutError,
    RedisAuthenticationError,
    RedisLockError,
)

# 저장된 레코드 역직렬화 실패
DESERIALIZATION_ERRORS = (
    ValueError,
    TypeError,
    KeyError,
    ValidationError,
)

# 저장소 경계에서 StorageError로 감싸는 예외 전체
STORAGE_EXCEPTIONS = (
    *RedisException,
    *DESERIALIZATION_ERRORS,
    OSError,
)


# 1) Redis 규칙 (구체 -> 포괄)
RULES_REDIS: list[RuleDomain] = [
    RuleDomain(
        kinds=("redis", "store"),
        exc=RedisAuthenticationError,
        result=(ErrorDomain.STORAGE, ErrorCode.STORAGE_UNAVAILABLE, False),
    ),
    RuleDomain(
        kinds=("redis", "store"),
        exc=RedisLockError,
        result=(ErrorDomain.STORAGE, ErrorCode.LOCK_NOT_ACQUIRED, True),
    ),
    RuleDomain(
        kinds=("redis", "store"),
        exc=RedisDataError,
        result=(ErrorDomain.STORAGE, ErrorCode.CORRUPT_RECORD, False),
    ),
    RuleDomain(
        kinds=("redis", "store"),
        exc=RedisException,
        result=(ErrorDomain.STORAGE, ErrorCode.STORAGE_UNAVAILABLE, True),
    ),
]

# 2) 역직렬화 규칙 (모든 저장소 공통)
RULES_SERDE: list[RuleDomain] = [
    RuleDomain(
        kinds=("serde", "redis", "store"),
        exc=DESERIALIZATION_ERRORS,
        result=(ErrorDomain.STORAGE, ErrorCode.CORRUPT_RECORD, False),
    ),
]

# 3) 소켓 레벨
RULES_OS: list[RuleDomain] = [
    RuleDomain(
        kinds=("redis", "store"),
        exc=OSError,
        result=(ErrorDomain.STORAGE, ErrorCode.STORAGE_UNAVAILABLE, True),
    ),
]

# 주의: 매칭 우선순위를 보장하기 위해 선언 순서를 유지합니다.
RULES: list[RuleDomain] = [*RULES_REDIS, *RULES_SERDE, *RULES_OS]


def classify_exception(err: BaseException, kind: str) -> ErrorCategory:
    """예외 → (ErrorDomain, ErrorCode, retryable) 분류기 (규칙 테이블 기반)

    kind가 rule.kinds에 포함된 규칙만 고려하며, 규칙은 "구체 → 포괄" 순서로
    선언되어 가장 특수한 규칙이 먼저 매칭됩니다.
    """
    for rule in RULES:
        if kind in rule.kinds and isinstance(err, rule.exc):
            return rule.result

    return (ErrorDomain.UNKNOWN, ErrorCode.UNKNOWN_ERROR, False)


def to_storage_error(
    err: Exception, *, kind: str = "store", series: str | None = None
) -> StorageError:
    """저수준 예외를 분류 결과가 채워진 StorageError로 변환"""
    domain, code, retryable = classify_exception(err, kind)
    if domain is ErrorDomain.UNKNOWN:
        domain, code = ErrorDomain.STORAGE, ErrorCode.STORAGE_UNAVAILABLE
    return StorageError(
        message=f"{err.__class__.__name__}: {err}",
        original_exception=err,
        error_domain=domain,
        error_code=code,
        retryable=retryable,
        series=series,
    )


def wrap_storage_errors(
    phase: str, kind: str = "store"
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """저장소 코루틴 메서드에서 발생한 I/O 예외를 StorageError로 변환하는 데코레이터.

    - 첫 번째 위치 인자(self 다음)를 시리즈 이름으로 간주해 에러에 기록합니다.
    - 재시도하지 않습니다. 원본 예외는 `__cause__`와 `original_exception`에 남습니다.
    - 이미 StorageError인 경우 그대로 전파합니다.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
            try:
                return await func(self, *args, **kwargs)
            except StorageError:
                raise
            except STORAGE_EXCEPTIONS as e:
                series = args[0] if args and isinstance(args[0], str) else None
                error = to_storage_error(e, kind=kind, series=series)
                logger.error(
                    f"Storage failure in {phase}: {error.message}",
                    extra={"phase": phase, **error.to_dict()},
                )
                raise error from e

        return wrapper

    return decorator
