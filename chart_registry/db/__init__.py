"""Storage package: shared Redis pool and per-organization chart stores."""

from chart_registry.db.redis import close_redis, get_redis, init_redis
from chart_registry.db.store import ChartStore, InMemoryChartStore, RedisChartStore

__all__ = [
    "ChartStore",
    "InMemoryChartStore",
    "RedisChartStore",
    "close_redis",
    "get_redis",
    "init_redis",
]
