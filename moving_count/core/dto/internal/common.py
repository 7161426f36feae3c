from __future__ import annotations

from dataclasses import dataclass

from moving_count.core.types import ErrorCategory, ExceptionGroup


@dataclass(
    slots=True, frozen=True, eq=False, repr=False, match_args=False, kw_only=True
)
class RuleDomain:
    """예외 분류 규칙(도메인)

    kinds: 규칙이 적용될 경계 종류 ("redis", "serde", "store")
    exc:   매칭할 예외 타입(단일 타입 또는 타입 튜플)
    result: ErrorCategory
    """

    kinds: tuple[str, ...]
    exc: ExceptionGroup
    result: ErrorCategory
