"""Tests for chart stores and collection (de)serialization."""

from datetime import UTC, datetime, timedelta

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from chart_registry.core.exceptions import PersistenceError
from chart_registry.db.store import InMemoryChartStore, RedisChartStore, deserialize_charts, serialize_charts
from chart_registry.schemas.charts import ChartVersion, UsageEvent

pytestmark = pytest.mark.unit


class _DownRedis:
    """Redis stand-in whose every call fails with a connection error."""

    def __init__(self):
        self.calls = 0

    async def get(self, key):
        self.calls += 1
        raise RedisConnectionError("connection refused")

    async def set(self, key, value):
        self.calls += 1
        raise RedisConnectionError("connection refused")


class TestSerialization:
    def test_missing_blob_is_empty_collection(self):
        assert deserialize_charts(None) == []
        assert deserialize_charts("") == []

    def test_round_trip_preserves_chart(self, make_chart):
        chart = make_chart("a")

        assert deserialize_charts(serialize_charts([chart])) == [chart]

    def test_round_trip_with_long_histories(self, make_chart):
        chart = make_chart("a")
        start = datetime(2024, 1, 1, tzinfo=UTC)
        chart.usage.usage_history = [
            UsageEvent(user_id=f"u{i % 7}", action="install", timestamp=start + timedelta(minutes=i)) for i in range(500)
        ]
        chart.versions.extend(
            ChartVersion(
                version=f"1.{i}.0",
                created_at=start + timedelta(days=i),
                created_by="user-1",
                change_description=f"Edit {i}",
            )
            for i in range(1, 50)
        )

        restored = deserialize_charts(serialize_charts([chart]))[0]

        assert restored.usage.usage_history == chart.usage.usage_history
        assert [v.version for v in restored.versions] == [v.version for v in chart.versions]


class TestInMemoryStore:
    async def test_load_unknown_org_returns_none(self):
        assert await InMemoryChartStore().load("org-x") is None

    async def test_save_then_load(self):
        store = InMemoryChartStore()
        await store.save("org-1", "[]")

        assert await store.load("org-1") == "[]"
        assert await store.load("org-2") is None


class TestRedisStore:
    async def test_save_then_load(self, redis, make_chart):
        store = RedisChartStore(redis)
        blob = serialize_charts([make_chart("a"), make_chart("b")])

        await store.save("org-1", blob)

        assert await store.load("org-1") == blob
        assert await redis.get("chart_registry:org_charts:org-1") == blob

    async def test_organizations_are_isolated(self, redis):
        store = RedisChartStore(redis)
        await store.save("org-1", "[]")

        assert await store.load("org-2") is None

    async def test_custom_key_prefix(self, redis):
        store = RedisChartStore(redis, key_prefix="test:")
        await store.save("org-1", "[]")

        assert await redis.get("test:org-1") == "[]"

    async def test_load_failure_raises_persistence_error_after_retries(self):
        down = _DownRedis()
        store = RedisChartStore(down, retry_attempts=2)

        with pytest.raises(PersistenceError) as exc_info:
            await store.load("org-1")

        assert exc_info.value.organization_id == "org-1"
        assert exc_info.value.operation == "load"
        assert down.calls == 2

    async def test_save_failure_raises_persistence_error(self):
        store = RedisChartStore(_DownRedis(), retry_attempts=1)

        with pytest.raises(PersistenceError) as exc_info:
            await store.save("org-1", "[]")

        assert exc_info.value.operation == "save"
