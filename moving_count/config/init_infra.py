from contextlib import asynccontextmanager
from typing import AsyncIterator

from moving_count.infra.cache.cache_client import RedisConnectionManager


@asynccontextmanager
async def init_redis() -> AsyncIterator[RedisConnectionManager]:
    """Redis 초기화 및 정리를 위한 async context manager"""
    manager = RedisConnectionManager.get_instance()
    await manager.initialize()
    yield manager
    await manager.close()
