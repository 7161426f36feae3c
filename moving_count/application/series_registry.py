"""
시리즈 레지스트리 관리

메트릭 종류(page_views, clicks 등)마다 하나의 MovingCountSeries를 두고,
각 시리즈가 자신의 RetentionPolicy를 갖도록 관리합니다.
"""

from __future__ import annotations

from moving_count.application.series import MovingCountSeries
from moving_count.common.exceptions.base import InvalidArgumentError
from moving_count.common.logger import PipelineLogger
from moving_count.core.dto.internal.series import RetentionPolicy
from moving_count.core.types import ErrorCode
from moving_count.core.utils.timestamp import Clock, utc_now
from moving_count.infra.store.base import SampleStore

logger = PipelineLogger.get_logger("series_registry", "app")


class SeriesRegistry:
    """시리즈 레지스트리

    같은 저장소를 공유하는 시리즈들을 이름으로 추적합니다.
    이름이 같으면 같은 인스턴스를 돌려주며, 정책 충돌은 허용하지 않습니다.
    """

    def __init__(
        self,
        store: SampleStore,
        default_policy: RetentionPolicy | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.store = store
        self.default_policy = default_policy or RetentionPolicy()
        self._clock = clock
        self._series: dict[str, MovingCountSeries] = {}

    def register(
        self, name: str, policy: RetentionPolicy | None = None
    ) -> MovingCountSeries:
        """시리즈 등록 (이미 있으면 기존 인스턴스 반환)

        Args:
            name: 시리즈 이름
            policy: 보존 정책 (기본: default_policy)

        Raises:
            InvalidArgumentError: 같은 이름이 다른 정책으로 이미 등록된 경우
        """
        policy = policy or self.default_policy
        existing = self._series.get(name)
        if existing is not None:
            if existing.policy != policy:
                raise InvalidArgumentError(
                    message=(
                        f"Series {name!r} is already registered with {existing.policy}, "
                        f"got {policy}"
                    ),
                    error_code=ErrorCode.POLICY_CONFLICT,
                    series=name,
                )
            return existing

        series = MovingCountSeries(name, self.store, policy, clock=self._clock)
        self._series[name] = series
        logger.debug(
            f"Series registered: {name}",
            extra={
                "sample_interval": policy.sample_interval,
                "history_to_keep": policy.history_to_keep,
            },
        )
        return series

    def get(self, name: str) -> MovingCountSeries:
        """시리즈 조회

        Raises:
            KeyError: 등록되지 않은 이름
        """
        try:
            return self._series[name]
        except KeyError:
            raise KeyError(f"Unknown series: {name!r}") from None

    def names(self) -> list[str]:
        return sorted(self._series)

    def __contains__(self, name: object) -> bool:
        return name in self._series

    def __len__(self) -> int:
        return len(self._series)
