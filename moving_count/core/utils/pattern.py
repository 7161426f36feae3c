"""SQL LIKE 스타일 카테고리 패턴 매칭.

- `%`: 0개 이상의 임의 문자
- `_`: 임의의 1문자
- `\\`: 다음 문자를 리터럴로 취급 (예: `100\\%`)
- 그 외 문자는 리터럴, 대소문자 구분, 전체 문자열 일치
"""

from __future__ import annotations

import re
from functools import lru_cache


@lru_cache(maxsize=256)
def compile_like(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    escaped = False
    for ch in pattern:
        if escaped:
            parts.append(re.escape(ch))
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))

    # 끝에 남은 단독 역슬래시는 리터럴
    if escaped:
        parts.append(re.escape("\\"))

    # MySQL 기본 collation의 LIKE와 달리 대소문자를 구분 (라벨은 정확히 일치로 비교)
    return re.compile("".join(parts), re.DOTALL)


def like_match(pattern: str | None, value: str) -> bool:
    """value가 LIKE 패턴과 일치하는지 여부. 패턴이 None이면 항상 True."""
    if pattern is None:
        return True
    return compile_like(pattern).fullmatch(value) is not None
