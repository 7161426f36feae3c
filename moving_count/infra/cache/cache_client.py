"""Redis 저장소가 공유하는 프로세스 단위 연결.

`ApplicationContainer.init_resources()`가 initialize()/close()를 호출하며,
RedisSampleStore는 `client` 프로퍼티로 연결을 빌려 씁니다.
"""

from __future__ import annotations

from redis.asyncio import Redis

from moving_count.common.exceptions.exception_rule import RedisException, to_storage_error
from moving_count.common.logger import PipelineLogger
from moving_count.config.settings import RedisSettings, redis_settings

logger = PipelineLogger.get_logger("redis", "infra")


class RedisConnectionManager:
    """시리즈 저장소용 Redis 연결 보관자 (프로세스당 1개)."""

    _instance: RedisConnectionManager | None = None

    def __init__(self, settings: RedisSettings | None = None) -> None:
        self._settings = settings or redis_settings
        self._client: Redis | None = None

    @classmethod
    def get_instance(cls) -> RedisConnectionManager:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def client(self) -> Redis | None:
        return self._client

    async def initialize(self, redis_url: str | None = None) -> None:
        """연결을 만들고 PING으로 확인합니다. 이미 연결되어 있으면 아무것도 하지 않습니다.

        Raises:
            StorageError: 연결/인증 실패 (클라이언트는 정리됨)
        """
        if self._client is not None:
            return

        client = Redis.from_url(
            redis_url or self._settings.url,
            socket_timeout=self._settings.connection_timeout,
            socket_connect_timeout=self._settings.connection_timeout,
        )
        try:
            await client.ping()
        except (*RedisException, OSError) as e:
            await client.aclose()
            raise to_storage_error(e, kind="redis") from e

        self._client = client
        logger.info(
            "Redis connected",
            extra={
                "host": self._settings.host,
                "port": self._settings.port,
                "db": self._settings.db,
            },
        )

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        logger.info("Redis connection closed")
