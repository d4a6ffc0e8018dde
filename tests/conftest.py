"""Shared test fixtures for all test groups."""

import random
from datetime import UTC, datetime

import pytest
from fakeredis import FakeAsyncRedis

from chart_registry.catalog.registry import TemplateCatalog
from chart_registry.db.store import InMemoryChartStore
from chart_registry.domain.permissions import default_permissions
from chart_registry.domain.synthesizer import ChartSynthesizer
from chart_registry.schemas.charts import (
    ApprovalStatus,
    ChartCategory,
    ChartSource,
    ChartType,
    ChartVersion,
    DataRequirements,
    OrganizationalChart,
    SampleData,
    UsageRecord,
    Visibility,
)
from chart_registry.services.org_registry import OrganizationalChartRegistry

FIXED_NOW = datetime(2024, 11, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
async def redis():
    """Create a fake Redis instance for testing."""
    fake_redis = FakeAsyncRedis(decode_responses=True)
    yield fake_redis
    await fake_redis.flushall()
    await fake_redis.aclose()


@pytest.fixture
def memory_store():
    return InMemoryChartStore()


@pytest.fixture
def catalog():
    return TemplateCatalog()


@pytest.fixture
def synthesizer():
    """Synthesizer with a seeded RNG so sample values are reproducible."""
    return ChartSynthesizer(rng=random.Random(42))


@pytest.fixture
async def registry(memory_store, catalog):
    """Loaded, empty registry for organization org-1."""
    org_registry = OrganizationalChartRegistry("org-1", memory_store, catalog)
    await org_registry.load()
    return org_registry


def build_chart(
    chart_id: str = "chart-1",
    created_by: str = "user-1",
    visibility: Visibility = Visibility.TEAM,
    approval_status: ApprovalStatus = ApprovalStatus.PENDING,
    source: ChartSource = ChartSource.GENERATED,
    total_installs: int = 0,
    creator_name: str = "",
    organization_id: str = "org-1",
) -> OrganizationalChart:
    """Minimal OrganizationalChart for pure-function tests."""
    return OrganizationalChart(
        id=chart_id,
        name=f"Chart {chart_id}",
        description="Test chart",
        category=ChartCategory.SALES,
        chart_type=ChartType.BAR,
        created_at=FIXED_NOW,
        updated_at=FIXED_NOW,
        source=source,
        data_requirements=DataRequirements(required=["labels", "values"]),
        sample_data=SampleData(),
        organization_id=organization_id,
        tenant_id=organization_id,
        created_by=created_by,
        creator_name=creator_name,
        visibility=visibility,
        approval_status=approval_status,
        permissions=default_permissions(visibility, created_by),
        usage=UsageRecord(total_installs=total_installs),
        versions=[
            ChartVersion(
                version="1.0.0",
                created_at=FIXED_NOW,
                created_by=created_by,
                change_description="Initial AI generation",
            )
        ],
    )


@pytest.fixture
def make_chart():
    return build_chart
