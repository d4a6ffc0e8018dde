"""OrganizationalChartRegistry: one organization's chart collection.

Owns the collection for exactly one organization:
- loads it from the ChartStore once, persists it after every mutation
- wraps generated charts with ownership, visibility, moderation, usage and
  version metadata
- computes each viewer's visible subset and library view
- applies approval decisions through the approval state machine

Write discipline: every mutation runs under the instance lock, builds a new
collection (the changed chart is a deep copy), saves it, and only then
publishes it. A failed save raises PersistenceError and leaves the
published collection untouched. Published charts are never mutated in
place and reads hand out deep copies, so callers cannot alter them.
"""

import asyncio
from collections.abc import Callable, Iterable
from copy import deepcopy
from datetime import UTC, datetime

import structlog
from pydantic import ValidationError

from chart_registry.catalog.registry import TemplateCatalog
from chart_registry.core.exceptions import PersistenceError
from chart_registry.db.store import ChartStore, deserialize_charts, serialize_charts
from chart_registry.domain import approval
from chart_registry.domain.permissions import (
    ELEVATED_ROLES,
    can_approve,
    can_modify,
    default_permissions,
    is_visible,
)
from chart_registry.domain.stats import compute_stats
from chart_registry.schemas.charts import (
    ApprovalAction,
    ApprovalRequest,
    ApprovalStatus,
    ChartSource,
    ChartTemplate,
    ChartUpdateRequest,
    ChartVersion,
    Classification,
    CreatorInfo,
    GenerateChartRequest,
    GenerationMetadata,
    LibraryCategory,
    LibraryStats,
    OrganizationalChart,
    OrganizationalLibrary,
    QualityScore,
    UsageEvent,
    UsageRecord,
    Visibility,
)

logger = structlog.get_logger(__name__)

INITIAL_VERSION = "1.0.0"
INITIAL_CHANGE = "Initial AI generation"
DEFAULT_CONFIDENCE = 0.85
DEFAULT_MODEL = "heuristic-v1"
INITIAL_QUALITY = QualityScore(data_accuracy=85, visual_clarity=90, business_value=80, user_rating=0.0, review_count=0)
INSTALL_ACTION = "install"


def next_version(version: str) -> str:
    """Minor bump: "1.0.0" -> "1.1.0". Unparseable versions restart at 1.1.0."""
    try:
        major, minor, _patch = (int(part) for part in version.split("."))
    except ValueError:
        return "1.1.0"
    return f"{major}.{minor + 1}.0"


def _copies(charts: Iterable[OrganizationalChart]) -> list[OrganizationalChart]:
    return [chart.model_copy(deep=True) for chart in charts]


class OrganizationalChartRegistry:
    """Chart collection and moderation workflow for a single organization."""

    def __init__(
        self,
        organization_id: str,
        store: ChartStore,
        catalog: TemplateCatalog,
        elevated_roles: Iterable[str] = ELEVATED_ROLES,
        generation_model: str = DEFAULT_MODEL,
    ):
        self.organization_id = organization_id
        self.store = store
        self.catalog = catalog
        self.elevated_roles = frozenset(elevated_roles)
        self.generation_model = generation_model
        self._charts: list[OrganizationalChart] = []
        self._lock = asyncio.Lock()
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> None:
        """Read the organization's collection from the store.

        A missing blob is an empty collection. Store failures and corrupt
        blobs raise PersistenceError.
        """
        async with self._lock:
            blob = await self.store.load(self.organization_id)
            try:
                charts = deserialize_charts(blob)
            except ValidationError as e:
                logger.error("org_charts_corrupt", organization_id=self.organization_id, error=str(e))
                raise PersistenceError(self.organization_id, "load", e) from e
            self._charts = charts
            self._loaded = True
            logger.info("org_charts_loaded", organization_id=self.organization_id, count=len(charts))

    # ============= INTERNAL HELPERS =============

    async def _commit(self, charts: list[OrganizationalChart]) -> None:
        """Persist then publish. Caller must hold the lock."""
        await self.store.save(self.organization_id, serialize_charts(charts))
        self._charts = charts

    def _index_of(self, chart_id: str) -> int | None:
        for index, chart in enumerate(self._charts):
            if chart.id == chart_id:
                return index
        return None

    async def _mutate(
        self,
        chart_id: str,
        change: Callable[[OrganizationalChart], bool],
    ) -> OrganizationalChart | None:
        """Apply change to a copy of the chart and commit it.

        change returns False to abort without writing. Returns the committed
        copy, or None when the chart is absent or the change was refused.
        """
        async with self._lock:
            index = self._index_of(chart_id)
            if index is None:
                return None

            updated = self._charts[index].model_copy(deep=True)
            if not change(updated):
                return None

            charts = list(self._charts)
            charts[index] = updated
            await self._commit(charts)
            return updated.model_copy(deep=True)

    def _visible(self, viewer_id: str, viewer_role: str) -> list[OrganizationalChart]:
        return [c for c in self._charts if is_visible(c, viewer_id, viewer_role)]

    def _can_approve(self, chart: OrganizationalChart, viewer_id: str, viewer_role: str) -> bool:
        return can_approve(chart, viewer_id, viewer_role, self.elevated_roles)

    # ============= READS =============
    # Every read hands out deep copies; only _commit replaces published charts.

    @property
    def charts(self) -> list[OrganizationalChart]:
        """Snapshot of the whole collection, in creation order."""
        return _copies(self._charts)

    def get_chart(self, chart_id: str) -> OrganizationalChart | None:
        index = self._index_of(chart_id)
        if index is None:
            return None
        return self._charts[index].model_copy(deep=True)

    def visible_charts(self, viewer_id: str, viewer_role: str) -> list[OrganizationalChart]:
        return _copies(self._visible(viewer_id, viewer_role))

    def list_by_creator(self, viewer_id: str) -> list[OrganizationalChart]:
        return _copies(c for c in self._charts if c.created_by == viewer_id)

    def list_pending_for(self, viewer_id: str, viewer_role: str) -> list[OrganizationalChart]:
        """Pending charts this viewer may both see and approve."""
        return _copies(
            c
            for c in self._visible(viewer_id, viewer_role)
            if c.approval_status == ApprovalStatus.PENDING and self._can_approve(c, viewer_id, viewer_role)
        )

    async def stats_for(self, viewer_id: str, viewer_role: str) -> LibraryStats:
        async with self._lock:
            visible = _copies(self._visible(viewer_id, viewer_role))
        return compute_stats(visible)

    async def get_visible_library(self, viewer_id: str, viewer_role: str) -> OrganizationalLibrary:
        """Role-aware library for one viewer.

        The visibility filter runs once over a private copy of the
        collection; every subset below is a predicate over that filtered
        list, so no chart id appears twice within a subset.
        """
        async with self._lock:
            visible = _copies(self._visible(viewer_id, viewer_role))

        generated = [c for c in visible if c.source == ChartSource.GENERATED]
        pending = [
            c
            for c in visible
            if c.approval_status == ApprovalStatus.PENDING and self._can_approve(c, viewer_id, viewer_role)
        ]
        mine = [c for c in visible if c.created_by == viewer_id]
        team = [c for c in visible if c.visibility == Visibility.TEAM and c.created_by != viewer_id]
        approved = [c for c in visible if c.approval_status == ApprovalStatus.APPROVED]

        categories = [
            *self.catalog.get_categories(),
            LibraryCategory(
                id="generated",
                name="AI Generated",
                description="Charts generated for your organization",
                icon="🤖",
                color="#8b5cf6",
                templates=generated,
            ),
            LibraryCategory(
                id="organization",
                name="Organization",
                description="Custom charts shared within your organization",
                icon="🏢",
                color="#059669",
                templates=approved,
            ),
        ]

        return OrganizationalLibrary(
            categories=categories,
            featured=self.catalog.get_featured(),
            popular=self.catalog.get_popular(),
            recent=self.catalog.get_recent(),
            generated_charts=generated,
            pending_approval=pending,
            my_charts=mine,
            team_charts=team,
            stats=compute_stats(visible),
        )

    # ============= MUTATIONS =============

    async def save_generated_chart(
        self,
        request: GenerateChartRequest,
        template: ChartTemplate,
        creator_id: str,
        creator_info: CreatorInfo,
        classification: Classification | None = None,
        generation_time_ms: int = 0,
        now: datetime | None = None,
    ) -> OrganizationalChart:
        """Wrap a synthesized chart with organizational metadata and persist it.

        The only path that adds a chart to the collection. Returns after the
        store has accepted the new collection.
        """
        now = now or datetime.now(UTC)
        options = request.options

        chart = OrganizationalChart(
            **template.model_dump(exclude={"source"}),
            source=ChartSource.GENERATED,
            organization_id=self.organization_id,
            tenant_id=self.organization_id,
            created_by=creator_id,
            creator_name=creator_info.name,
            creator_email=creator_info.email,
            creator_role=creator_info.role,
            generation=GenerationMetadata(
                original_prompt=request.prompt,
                model=self.generation_model,
                confidence=classification.confidence if classification else DEFAULT_CONFIDENCE,
                generated_at=now,
                generation_time_ms=generation_time_ms,
                iterations=1,
            ),
            visibility=options.visibility,
            approval_status=approval.initial_status(options.request_approval),
            permissions=default_permissions(options.visibility, creator_id, self.elevated_roles),
            usage=UsageRecord(total_installs=0, unique_users=0, last_used=None, usage_history=[]),
            versions=[
                ChartVersion(
                    version=INITIAL_VERSION,
                    created_at=now,
                    created_by=creator_id,
                    change_description=INITIAL_CHANGE,
                    config_snapshot=deepcopy(template.config),
                    data_snapshot=template.sample_data.model_copy(deep=True),
                )
            ],
            quality=INITIAL_QUALITY.model_copy(),
        )

        async with self._lock:
            await self._commit([*self._charts, chart])

        logger.info(
            "chart_saved",
            organization_id=self.organization_id,
            chart_id=chart.id,
            created_by=creator_id,
            visibility=chart.visibility.value,
            approval_status=chart.approval_status.value,
        )
        return chart.model_copy(deep=True)

    async def process_approval(
        self,
        request: ApprovalRequest,
        approver_id: str,
        now: datetime | None = None,
    ) -> bool:
        """Apply a reviewer decision.

        Returns False when the chart is unknown or the action is not a legal
        transition from its current state. The caller is responsible for
        having checked that approver_id may approve.
        """
        now = now or datetime.now(UTC)
        target = approval.target_for(request.action)

        def apply(chart: OrganizationalChart) -> bool:
            if not approval.can_transition(chart.approval_status, target):
                logger.info(
                    "approval_transition_refused",
                    chart_id=chart.id,
                    current=chart.approval_status.value,
                    target=target.value,
                )
                return False
            chart.approval_status = target
            chart.approved_by = approver_id
            chart.approved_at = now
            if request.action == ApprovalAction.REJECT:
                chart.rejection_reason = request.reason
            elif request.action == ApprovalAction.APPROVE:
                chart.rejection_reason = None
            return True

        updated = await self._mutate(request.chart_id, apply)
        if updated is None:
            return False

        logger.info(
            "approval_processed",
            organization_id=self.organization_id,
            chart_id=request.chart_id,
            action=request.action.value,
            approver_id=approver_id,
            approval_status=updated.approval_status.value,
        )
        return True

    async def submit_for_approval(self, chart_id: str, viewer_id: str, viewer_role: str) -> bool:
        """Move a draft or rejected chart back into the pending queue."""

        def apply(chart: OrganizationalChart) -> bool:
            if not can_modify(chart, viewer_id, viewer_role):
                return False
            if not approval.can_transition(chart.approval_status, ApprovalStatus.PENDING):
                return False
            chart.approval_status = ApprovalStatus.PENDING
            chart.rejection_reason = None
            return True

        updated = await self._mutate(chart_id, apply)
        if updated is None:
            return False

        logger.info("chart_resubmitted", organization_id=self.organization_id, chart_id=chart_id, viewer_id=viewer_id)
        return True

    async def update_chart(
        self,
        chart_id: str,
        editor_id: str,
        editor_role: str,
        update: ChartUpdateRequest,
        now: datetime | None = None,
    ) -> OrganizationalChart | None:
        """Append a new version and make it current.

        Earlier version entries are never touched. Returns None when the
        chart is unknown or the editor lacks a modify grant.
        """
        now = now or datetime.now(UTC)

        def apply(chart: OrganizationalChart) -> bool:
            if not can_modify(chart, editor_id, editor_role):
                return False

            version = next_version(chart.version)
            config = deepcopy(update.config if update.config is not None else chart.config)
            source_data = update.sample_data if update.sample_data is not None else chart.sample_data
            sample_data = source_data.model_copy(deep=True)

            chart.versions.append(
                ChartVersion(
                    version=version,
                    created_at=now,
                    created_by=editor_id,
                    change_description=update.change_description,
                    config_snapshot=deepcopy(config),
                    data_snapshot=sample_data.model_copy(deep=True),
                )
            )
            chart.version = version
            chart.config = config
            chart.sample_data = sample_data
            if update.name is not None:
                chart.name = update.name
            if update.description is not None:
                chart.description = update.description
            chart.updated_at = now
            return True

        updated = await self._mutate(chart_id, apply)
        if updated is not None:
            logger.info(
                "chart_updated",
                organization_id=self.organization_id,
                chart_id=chart_id,
                version=updated.version,
                editor_id=editor_id,
            )
        return updated

    async def record_usage(
        self,
        chart_id: str,
        user_id: str,
        action: str = INSTALL_ACTION,
        now: datetime | None = None,
    ) -> OrganizationalChart | None:
        """Append a usage event and refresh the usage counters."""
        now = now or datetime.now(UTC)

        def apply(chart: OrganizationalChart) -> bool:
            usage = chart.usage
            usage.usage_history.append(UsageEvent(user_id=user_id, action=action, timestamp=now))
            if action == INSTALL_ACTION:
                usage.total_installs += 1
            usage.unique_users = len({event.user_id for event in usage.usage_history})
            usage.last_used = now
            return True

        return await self._mutate(chart_id, apply)
