"""라벨별 빈도 카운터.

배치 단위 이벤트를 순회하며 라벨별로 집계하고, 완성된 카운터를
`MovingCountSeries.record()`에 넘겨 스냅샷으로 저장합니다.

    c = FrequencyCounter()
    c.increment("http://www.nytimes.com")
    c.saw("http://www.nytimes.com")  # alias
    c.set("another-key", 42)

    c["http://www.nytimes.com"]  # 2 (본 적 없는 라벨은 0)
    c.top(2)                     # [("another-key", 42), ("http://www.nytimes.com", 2)]

순위 동률은 라벨 내림차순(사전순 역순)으로 깨집니다.
단일 소유자용이며 동시 변경에 대해 스레드/태스크 안전하지 않습니다.
"""

from __future__ import annotations

from typing import Iterator

from moving_count.core.dto.internal.series import SampleBatch, validate_count
from moving_count.core.types import LabelCount


class FrequencyCounter:
    """라벨 → 카운트 매핑 (미관측 라벨은 0)."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[str, int] = {}

    def increment(self, label: str) -> bool:
        """label++ (없으면 1로 생성)."""
        self._data[label] = self._data.get(label, 0) + 1
        return True

    saw = increment

    def set(self, label: str, count: int) -> None:
        """label의 카운트를 덮어씁니다.

        Raises:
            InvalidArgumentError: count가 음수가 아닌 정수가 아닐 때
        """
        self._data[label] = validate_count(count)

    def get(self, label: str) -> int:
        return self._data.get(label, 0)

    def __getitem__(self, label: str) -> int:
        return self.get(label)

    def __contains__(self, label: object) -> bool:
        return label in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def ranked_all(self) -> list[LabelCount]:
        """전체 (label, count)를 카운트 내림차순, 동률은 라벨 내림차순으로 반환."""
        return sorted(self._data.items(), key=lambda kv: (kv[1], kv[0]), reverse=True)

    counts = ranked_all

    def top(self, n: int) -> list[LabelCount]:
        """ranked_all()의 앞 n개. n <= 0이면 빈 리스트."""
        if n <= 0:
            return []
        return self.ranked_all()[:n]

    def raw_entries(self) -> list[LabelCount]:
        """순서 보장 없는 (label, count) 목록."""
        return list(self._data.items())

    def snapshot(self) -> SampleBatch:
        """현재 카운트 스냅샷 반환 (불변)."""
        return SampleBatch(entries=tuple(self.raw_entries()))

    def reset(self) -> None:
        self._data.clear()

    def __repr__(self) -> str:
        return f"FrequencyCounter({dict(self._data)!r})"
