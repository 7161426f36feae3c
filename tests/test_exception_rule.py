from __future__ import annotations

from datetime import datetime, timezone

import pytest
from redis.exceptions import AuthenticationError, LockError
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from moving_count.common.exceptions.base import (
    InvalidArgumentError,
    SampleTooSoonError,
    StorageError,
)
from moving_count.common.exceptions.exception_rule import (
    classify_exception,
    to_storage_error,
    wrap_storage_errors,
)
from moving_count.core.types import ErrorCode, ErrorDomain


@pytest.mark.parametrize(
    "err, expected",
    [
        (AuthenticationError("bad password"), (ErrorDomain.STORAGE, ErrorCode.STORAGE_UNAVAILABLE, False)),
        (RedisConnectionError("refused"), (ErrorDomain.STORAGE, ErrorCode.STORAGE_UNAVAILABLE, True)),
        (RedisTimeoutError("slow"), (ErrorDomain.STORAGE, ErrorCode.STORAGE_UNAVAILABLE, True)),
        (LockError("expired"), (ErrorDomain.STORAGE, ErrorCode.LOCK_NOT_ACQUIRED, True)),
        (ValueError("bad json"), (ErrorDomain.STORAGE, ErrorCode.CORRUPT_RECORD, False)),
        (OSError("socket closed"), (ErrorDomain.STORAGE, ErrorCode.STORAGE_UNAVAILABLE, True)),
        (RuntimeError("boom"), (ErrorDomain.UNKNOWN, ErrorCode.UNKNOWN_ERROR, False)),
    ],
)
def test_classify_exception_for_redis(err: Exception, expected: tuple) -> None:
    assert classify_exception(err, "redis") == expected


def test_classify_exception_unknown_kind() -> None:
    assert classify_exception(ValueError("x"), "kafka") == (
        ErrorDomain.UNKNOWN,
        ErrorCode.UNKNOWN_ERROR,
        False,
    )


@pytest.mark.parametrize(
    "err, kind, expected",
    [
        (ValueError("bad json"), "serde", (ErrorDomain.STORAGE, ErrorCode.CORRUPT_RECORD, False)),
        (OSError("socket closed"), "serde", (ErrorDomain.UNKNOWN, ErrorCode.UNKNOWN_ERROR, False)),
        (LockError("expired"), "serde", (ErrorDomain.UNKNOWN, ErrorCode.UNKNOWN_ERROR, False)),
        (LockError("expired"), "store", (ErrorDomain.STORAGE, ErrorCode.LOCK_NOT_ACQUIRED, True)),
    ],
)
def test_classify_exception_only_uses_rules_for_kind(
    err: Exception, kind: str, expected: tuple
) -> None:
    assert classify_exception(err, kind) == expected


def test_to_storage_error_keeps_original() -> None:
    original = RedisConnectionError("refused")
    error = to_storage_error(original, kind="redis", series="page_views")

    assert error.original_exception is original
    assert error.to_dict() == {
        "error": "ConnectionError: refused",
        "error_type": "StorageError",
        "error_domain": "storage",
        "error_code": "storage_unavailable",
        "retryable": True,
        "series": "page_views",
        "original_error": "refused",
        "original_error_type": "ConnectionError",
    }


class _Repository:
    @wrap_storage_errors("load", kind="redis")
    async def load(self, series: str, fail_with: Exception | None = None) -> int:
        if fail_with is not None:
            raise fail_with
        return 1


@pytest.mark.asyncio
async def test_wrap_storage_errors_passes_results_through() -> None:
    assert await _Repository().load("page_views") == 1


@pytest.mark.asyncio
async def test_wrap_storage_errors_converts_io_errors() -> None:
    with pytest.raises(StorageError) as exc_info:
        await _Repository().load("page_views", RedisTimeoutError("slow"))

    assert exc_info.value.series == "page_views"
    assert isinstance(exc_info.value.__cause__, RedisTimeoutError)


@pytest.mark.asyncio
async def test_wrap_storage_errors_leaves_other_errors_alone() -> None:
    with pytest.raises(RuntimeError):
        await _Repository().load("page_views", RuntimeError("bug"))


def test_invalid_argument_error_defaults() -> None:
    error = InvalidArgumentError("limit must be non-negative: -1")
    assert str(error) == "limit must be non-negative: -1"
    assert error.error_domain is ErrorDomain.VALIDATION
    assert error.error_code is ErrorCode.INVALID_ARGUMENT
    assert error.retryable is False


def test_sample_too_soon_error_message_and_dict() -> None:
    latest = datetime(2010, 7, 29, 16, 23, 0, tzinfo=timezone.utc)
    timestamp = datetime(2010, 7, 29, 16, 23, 50, tzinfo=timezone.utc)
    error = SampleTooSoonError.build(
        sample_interval=60.0,
        distance=50.0,
        latest_sample=latest,
        timestamp=timestamp,
        series="page_views",
    )

    assert str(error) == (
        "Data recorded at 2010-07-29T16:23:00+00:00 making "
        "2010-07-29T16:23:50+00:00 10.00s too soon on a 60s interval."
    )
    payload = error.to_dict()
    assert payload["error_code"] == "sample_too_soon"
    assert payload["error_domain"] == "sampling"
    assert payload["remaining"] == 10.0
    assert payload["series"] == "page_views"
