"""
Dependency Injection Containers

이 모듈은 저장소와 시리즈 레지스트리 의존성을 관리하는 DI 컨테이너를 정의합니다.

아키텍처:
- InfrastructureContainer: Redis 연결 관리자 + Settings 주입
- StoreContainer: 저장소 백엔드 (memory / redis) Selector
- ApplicationContainer: 최상위 컨테이너 (SeriesRegistry)

주요 패턴:
- Resource Provider: Redis async init/shutdown 자동 관리
- Object Provider: settings.py 싱글톤 주입 (DI)
- Selector: SERIES_BACKEND 값으로 저장소 구현 선택

사용 예시:
    container = ApplicationContainer()
    await container.init_resources()  # redis 백엔드일 때 연결

    registry = container.registry()
    page_views = registry.register("page_views")
"""

from dependency_injector import containers, providers

from moving_count.application.series_registry import SeriesRegistry
from moving_count.config.init_infra import init_redis
from moving_count.config.settings import redis_settings, series_settings
from moving_count.core.dto.internal.series import RetentionPolicy
from moving_count.infra.cache.cache_client import RedisConnectionManager
from moving_count.infra.store.memory_store import MemorySampleStore
from moving_count.infra.store.redis_store import RedisSampleStore


# ========================================
# 1. Infrastructure Container (인프라 레이어)
# ========================================
class InfrastructureContainer(containers.DeclarativeContainer):
    """인프라 컨테이너

    - Redis 연결 관리자 (싱글톤, Resource로 라이프사이클 관리)
    - Settings: settings.py 싱글톤 주입 (DI)
    """

    redis_config = providers.Object(redis_settings)
    series_config = providers.Object(series_settings)

    redis_manager = providers.Singleton(RedisConnectionManager.get_instance)
    redis_resource = providers.Resource(init_redis)


# ========================================
# 2. Store Container (저장소 레이어)
# ========================================
class StoreContainer(containers.DeclarativeContainer):
    """저장소 컨테이너

    backend 값("memory" | "redis")에 따라 SampleStore 구현을 선택합니다.
    """

    redis_manager = providers.Dependency(instance_of=RedisConnectionManager)
    redis_config = providers.Dependency()
    series_config = providers.Dependency()

    memory = providers.Singleton(MemorySampleStore)

    redis = providers.Singleton(
        RedisSampleStore,
        manager=redis_manager,
        key_prefix=redis_config.provided.key_prefix,
        lock_timeout=redis_config.provided.lock_timeout,
        lock_blocking_timeout=redis_config.provided.lock_blocking_timeout,
    )

    store = providers.Selector(
        series_config.provided.backend,
        memory=memory,
        redis=redis,
    )


# ========================================
# 3. Application Container (최상위)
# ========================================
class ApplicationContainer(containers.DeclarativeContainer):
    """최상위 컨테이너

    Usage:
        registry = container.registry()
        clicks = registry.register("clicks", RetentionPolicy(5, 120))
    """

    infra = providers.Container(InfrastructureContainer)

    stores = providers.Container(
        StoreContainer,
        redis_manager=infra.redis_manager,
        redis_config=infra.redis_config,
        series_config=infra.series_config,
    )

    default_policy = providers.Singleton(
        RetentionPolicy,
        sample_interval=infra.series_config.provided.sample_interval,
        history_to_keep=infra.series_config.provided.history_to_keep,
    )

    registry = providers.Singleton(
        SeriesRegistry,
        store=stores.store,
        default_policy=default_policy,
    )
