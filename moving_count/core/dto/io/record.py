from __future__ import annotations

from pydantic import Field

from moving_count.core.dto.internal.series import SampleRecord
from moving_count.core.dto.io._base import BaseIOModelDTO


class SampleRecordDTO(BaseIOModelDTO):
    """Redis sorted set 멤버로 저장되는 레코드 DTO.

    score에는 sample_time이 중복 저장되며, 멤버 자체도 self-contained 합니다.
    """

    category: str = Field(..., description="카테고리 라벨")
    count: int = Field(..., ge=0, description="샘플 카운트")
    sample_time: float = Field(..., description="샘플 시각 (Unix epoch 초)")

    @classmethod
    def from_domain(cls, record: SampleRecord) -> SampleRecordDTO:
        return cls(
            category=record.category,
            count=record.count,
            sample_time=record.sample_time,
        )

    def to_domain(self) -> SampleRecord:
        return SampleRecord(
            category=self.category,
            count=self.count,
            sample_time=self.sample_time,
        )
