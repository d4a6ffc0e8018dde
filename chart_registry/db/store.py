"""Durable storage for organization chart collections.

One serialized blob per organization, keyed by organization id. The store
deals in raw JSON strings; (de)serialization of OrganizationalChart lives
with the registry.

Implementations:
- RedisChartStore: production store (redis.asyncio), retried with tenacity
- InMemoryChartStore: process-local dict, for tests and Redis-less dev runs
"""

import json
from typing import Protocol

import structlog
from pydantic import TypeAdapter
from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from chart_registry.core.exceptions import PersistenceError
from chart_registry.schemas.charts import OrganizationalChart

logger = structlog.get_logger(__name__)

_charts_adapter = TypeAdapter(list[OrganizationalChart])


def serialize_charts(charts: list[OrganizationalChart]) -> str:
    return json.dumps([chart.model_dump(mode="json") for chart in charts])


def deserialize_charts(blob: str | None) -> list[OrganizationalChart]:
    if not blob:
        return []
    return _charts_adapter.validate_json(blob)


class ChartStore(Protocol):
    """Narrow persistence interface: one blob per organization."""

    async def load(self, organization_id: str) -> str | None: ...

    async def save(self, organization_id: str, blob: str) -> None: ...


class InMemoryChartStore:
    """Dict-backed store. Contents live only as long as the instance."""

    def __init__(self):
        self._blobs: dict[str, str] = {}

    async def load(self, organization_id: str) -> str | None:
        return self._blobs.get(organization_id)

    async def save(self, organization_id: str, blob: str) -> None:
        self._blobs[organization_id] = blob


class RedisChartStore:
    """Redis-backed store: one string key per organization."""

    def __init__(self, redis: Redis, key_prefix: str = "chart_registry:org_charts:", retry_attempts: int = 3):
        self.redis = redis
        self.key_prefix = key_prefix
        self.retry_attempts = retry_attempts

    def _key(self, organization_id: str) -> str:
        return f"{self.key_prefix}{organization_id}"

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception_type((RedisConnectionError, RedisTimeoutError)),
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            reraise=True,
            before_sleep=lambda rs: logger.warning(
                "store_retrying",
                attempt=rs.attempt_number,
                sleep_seconds=rs.next_action.sleep,
            ),
        )

    async def load(self, organization_id: str) -> str | None:
        try:
            async for attempt in self._retrying():
                with attempt:
                    return await self.redis.get(self._key(organization_id))
        except RedisError as e:
            logger.error("store_load_failed", organization_id=organization_id, error=str(e), error_type=type(e).__name__)
            raise PersistenceError(organization_id, "load", e) from e

    async def save(self, organization_id: str, blob: str) -> None:
        try:
            async for attempt in self._retrying():
                with attempt:
                    await self.redis.set(self._key(organization_id), blob)
        except RedisError as e:
            logger.error("store_save_failed", organization_id=organization_id, error=str(e), error_type=type(e).__name__)
            raise PersistenceError(organization_id, "save", e) from e
