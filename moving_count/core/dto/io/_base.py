"""I/O 경계 DTO 기반 클래스

Redis 등 외부 저장소와 주고받는 데이터는 이 베이스를 상속한 Pydantic v2 모델로
경계에서 1회 검증합니다.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field

# ========================================
# ConfigDict 최적화 (전역 설정)
# ========================================

OPTIMIZED_CONFIG = ConfigDict(
    # 런타임 검증
    use_enum_values=True,  # Enum → 값 직렬화
    extra="forbid",  # 알 수 없는 필드 금지
    validate_default=True,  # 기본값도 검증
    # 불변성
    frozen=True,
    # 타입 안전성
    strict=True,  # "3" → 3 같은 암묵 변환 금지
    arbitrary_types_allowed=False,
)


class BaseIOModelDTO(BaseModel):
    """I/O 경계용 공통 Pydantic v2 베이스 모델.

    특징:
    - 불변 객체 (frozen=True)
    - 알 수 없는 필드 금지 (extra="forbid")
    - id는 자동으로 UUID 생성 (동일 시각/카테고리 레코드의 멤버 충돌 방지)
    """

    id: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        description="고유 레코드 ID (UUID hex)",
    )
    model_config = OPTIMIZED_CONFIG
