"""
Build an ACL engine from settings.
"""

from typing import Optional

import redis
from prometheus_client import CollectorRegistry
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from shared.config import AclSettings, get_settings
from shared.logging import get_logger
from shared.metrics import AclMetrics
from .acl import Acl
from .cache import RedisCacheProvider
from .persistence import SqlPermissionStore

logger = get_logger("acl.factory")


def create_acl(
    settings: Optional[AclSettings] = None,
    *,
    engine: Optional[Engine] = None,
    redis_client: Optional[redis.Redis] = None,
    metrics_registry: Optional[CollectorRegistry] = None
) -> Acl:
    """Wire store, cache provider and metrics according to ``settings``.

    ``engine`` and ``redis_client`` override the connections that would
    otherwise be built from ``database_url`` and ``redis_url``.
    """
    settings = settings or get_settings()

    metrics = None
    if settings.enable_metrics:
        metrics = AclMetrics(service_name="acl", registry=metrics_registry)

    store = SqlPermissionStore(
        engine if engine is not None else create_engine(settings.database_url),
        table_name=settings.permissions_table,
        metrics=metrics
    )
    if settings.create_schema:
        store.create_schema()

    cache_provider = None
    if redis_client is not None or settings.redis_url:
        cache_provider = RedisCacheProvider(
            redis_client,
            redis_url=settings.redis_url,
            ttl_seconds=settings.cache_ttl_seconds
        )

    acl = Acl(
        store,
        mask_builder=settings.action_codec,
        cache_provider=cache_provider,
        cache_key_prefix=settings.cache_key_prefix,
        local_cache_size=settings.local_cache_size,
        metrics=metrics
    )

    logger.info(
        "ACL engine created",
        env=settings.env,
        table=settings.permissions_table,
        action_codec=settings.action_codec,
        external_cache=cache_provider is not None
    )
    return acl
