"""RegistryProvider: one OrganizationalChartRegistry per organization.

Replaces a module-level singleton map. The provider is created by the app
lifespan and stored on app.state; registries are built and loaded on first
use. Each registry has its own lock; a per-organization construction lock
serializes the first load of that organization only.
"""

import asyncio
from collections.abc import Iterable

import structlog

from chart_registry.catalog.registry import TemplateCatalog
from chart_registry.db.store import ChartStore
from chart_registry.domain.permissions import ELEVATED_ROLES
from chart_registry.services.org_registry import DEFAULT_MODEL, OrganizationalChartRegistry

logger = structlog.get_logger(__name__)


class RegistryProvider:
    """Owns and lazily constructs per-organization registries."""

    def __init__(
        self,
        store: ChartStore,
        catalog: TemplateCatalog,
        elevated_roles: Iterable[str] = ELEVATED_ROLES,
        generation_model: str = DEFAULT_MODEL,
    ):
        self.store = store
        self.catalog = catalog
        self.elevated_roles = frozenset(elevated_roles)
        self.generation_model = generation_model
        self._registries: dict[str, OrganizationalChartRegistry] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    async def get(self, organization_id: str) -> OrganizationalChartRegistry:
        """Return the organization's registry, loading it on first use.

        Concurrent first uses of the same organization share one load;
        other organizations never wait on it. A failed load raises
        PersistenceError and nothing is cached, so the next call retries.
        """
        registry = self._registries.get(organization_id)
        if registry is not None:
            return registry

        lock = self._locks.setdefault(organization_id, asyncio.Lock())
        async with lock:
            registry = self._registries.get(organization_id)
            if registry is None:
                registry = OrganizationalChartRegistry(
                    organization_id,
                    self.store,
                    self.catalog,
                    elevated_roles=self.elevated_roles,
                    generation_model=self.generation_model,
                )
                await registry.load()
                self._registries[organization_id] = registry
                logger.info("org_registry_created", organization_id=organization_id)
            return registry

    @property
    def organization_ids(self) -> list[str]:
        return list(self._registries)

    def reset(self) -> None:
        """Drop every cached registry; the next get() reloads from the store."""
        self._registries.clear()
