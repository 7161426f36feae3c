"""시리즈 레코드 저장소.

공개 API:
- SampleStore / SampleTransaction: 저장소 계약
- MemorySampleStore: 인프로세스 구현
- RedisSampleStore: Redis sorted set 구현
"""

from moving_count.infra.store.base import SampleStore, SampleTransaction
from moving_count.infra.store.memory_store import MemorySampleStore
from moving_count.infra.store.redis_store import RedisSampleStore

__all__ = [
    "SampleStore",
    "SampleTransaction",
    "MemorySampleStore",
    "RedisSampleStore",
]
