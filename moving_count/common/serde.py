"""Redis 멤버 직렬화 (orjson + pydantic DTO 경계 검증)."""

from typing import Any

import orjson

from moving_count.core.dto.internal.series import SampleRecord
from moving_count.core.dto.io.record import SampleRecordDTO


def to_bytes(value: Any) -> bytes:
    """객체를 UTF-8 JSON bytes(orjson)로 직렬화"""
    return orjson.dumps(value)


def encode_record(record: SampleRecord) -> bytes:
    """레코드 → Redis 멤버 bytes"""
    return to_bytes(SampleRecordDTO.from_domain(record).model_dump())


def decode_record(raw: str | bytes | bytearray) -> SampleRecord:
    """Redis 멤버 → 레코드. 손상된 멤버는 ValueError/ValidationError를 던집니다."""
    payload = orjson.loads(raw)
    return SampleRecordDTO.model_validate(payload).to_domain()
