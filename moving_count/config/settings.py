"""통합 Settings 모듈 - 환경변수 기반

이 모듈의 역할:
    1. 코드에 합리적인 기본값 제공
    2. 환경변수로 오버라이드 (우선순위 높음)
    3. 타입 안전성 보장 (Pydantic 자동 검증)

설정 우선순위:
    1. 환경변수 (최우선) - export SERIES_SAMPLE_INTERVAL=30
    2. .env 파일 - moving_count/config/.env
    3. 코드 기본값 (settings.py 내부)

사용 예시:
    # 개발 환경 (기본값, 인메모리 저장소)
    from moving_count.config.settings import series_settings
    series_settings.default_policy()

    # 프로덕션 (환경변수 오버라이드)
    export SERIES_BACKEND=redis
    export REDIS_HOST=prod-redis
    export REDIS_KEY_PREFIX=pageviews
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from moving_count.core.dto.internal.series import RetentionPolicy
from moving_count.core.types import (
    DEFAULT_HISTORY_TO_KEEP_S,
    DEFAULT_SAMPLE_INTERVAL_S,
    StoreBackendName,
)

# 설정 파일 경로
config_dir = Path(__file__).parent


def yaml_settings(prefix: str) -> SettingsConfigDict:
    """환경변수 + .env 통합 설정

    Args:
        prefix: 환경변수 접두사 (예: REDIS_, SERIES_)

    Returns:
        Pydantic 설정 딕셔너리

    우선순위:
        1. 환경변수 (export REDIS_HOST=...)
        2. .env 파일 (moving_count/config/.env)
    """
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=config_dir / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class RedisSettings(BaseSettings):
    """Redis 설정 (환경변수 기반)

    환경변수 오버라이드:
        REDIS_HOST: Redis 호스트 (기본: localhost)
        REDIS_PORT: Redis 포트 (기본: 6379)
        REDIS_DB: Redis DB 번호 (기본: 0)
        REDIS_PASSWORD: Redis 비밀번호 (보안상 환경변수 권장)
        REDIS_SSL: SSL 사용 여부 (기본: false)
        REDIS_CONNECTION_TIMEOUT: 연결 타임아웃 (기본: 10초)
        REDIS_KEY_PREFIX: 시리즈 키 접두사 (기본: mc)
        REDIS_LOCK_TIMEOUT: 시리즈 쓰기 락 만료 시간 (기본: 10초)
        REDIS_LOCK_BLOCKING_TIMEOUT: 락 획득 대기 시간 (기본: 5초)
    """

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: str | None = None  # 선택사항 (환경변수로만)
    ssl: bool = False
    connection_timeout: int = 10
    key_prefix: str = "mc"
    lock_timeout: float = 10.0
    lock_blocking_timeout: float = 5.0

    model_config = yaml_settings("REDIS_")

    @property
    def url(self) -> str:
        """Redis URL 생성 (redis:// 또는 rediss://)"""
        protocol = "rediss" if self.ssl else "redis"
        auth = f":{self.password}@" if self.password else ""
        return f"{protocol}://{auth}{self.host}:{self.port}/{self.db}"


class SeriesSettings(BaseSettings):
    """시리즈 기본 보존 정책 설정 (초 단위)

    환경변수 오버라이드:
        SERIES_SAMPLE_INTERVAL: 샘플 간 최소 간격 (기본: 60초)
        SERIES_HISTORY_TO_KEEP: 보존 이력 깊이 (기본: 3600초)
        SERIES_BACKEND: 저장소 백엔드 (memory | redis) (기본: memory)
    """

    sample_interval: float = Field(default=DEFAULT_SAMPLE_INTERVAL_S, ge=0)
    history_to_keep: float = Field(default=DEFAULT_HISTORY_TO_KEEP_S, ge=0)
    backend: StoreBackendName = "memory"

    model_config = yaml_settings("SERIES_")

    def default_policy(self) -> RetentionPolicy:
        return RetentionPolicy(
            sample_interval=self.sample_interval,
            history_to_keep=self.history_to_keep,
        )


class LoggingSettings(BaseSettings):
    """로깅 설정

    환경변수 오버라이드:
        LOG_LEVEL: 로깅 레벨 (기본: INFO)
        LOG_TO_FILE: 파일 로깅 여부 (기본: false)
        LOG_DIR: 로그 디렉토리 (기본: logs)
    """

    level: str = "INFO"
    to_file: bool = False
    dir: str = "logs"

    model_config = yaml_settings("LOG_")


# ========================================
# 설정 인스턴스 (싱글톤)
# ========================================

redis_settings = RedisSettings()
series_settings = SeriesSettings()
logging_settings = LoggingSettings()
