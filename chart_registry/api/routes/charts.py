"""Organizational chart API routes.

Thin adapter over the registry and generation service: resolves the viewer,
picks the organization's registry and maps results onto HTTP status codes.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from chart_registry.core.auth import ViewerContext, is_elevated_viewer, require_elevated_role, require_viewer
from chart_registry.core.exceptions import PersistenceError
from chart_registry.domain.permissions import can_use, is_visible
from chart_registry.domain.synthesizer import ChartSynthesizer
from chart_registry.schemas.charts import (
    ApprovalDecision,
    ApprovalRequest,
    ChartUpdateRequest,
    GenerateChartRequest,
    GenerationResult,
    OrganizationalChart,
    OrganizationalLibrary,
    UsageRequest,
)
from chart_registry.services.generation_service import ChartGenerationService
from chart_registry.services.org_registry import OrganizationalChartRegistry
from chart_registry.services.registry_provider import RegistryProvider

router = APIRouter()


def get_registry_provider(request: Request) -> RegistryProvider:
    """Dependency that provides the app-wide RegistryProvider.

    Override this dependency in tests via app.dependency_overrides.
    """
    return request.app.state.registry_provider


def get_synthesizer() -> ChartSynthesizer:
    """Dependency that provides the ChartSynthesizer (seedable in tests)."""
    return ChartSynthesizer()


async def _registry_for(provider: RegistryProvider, viewer: ViewerContext) -> OrganizationalChartRegistry:
    try:
        return await provider.get(viewer.organization_id)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail="Chart store unavailable") from e


@router.get("/library", response_model=OrganizationalLibrary)
async def get_library(
    viewer: ViewerContext = Depends(require_viewer),
    provider: RegistryProvider = Depends(get_registry_provider),
):
    """Return the viewer's role-aware chart library."""
    registry = await _registry_for(provider, viewer)
    return await registry.get_visible_library(viewer.viewer_id, viewer.viewer_role)


@router.get("/mine", response_model=list[OrganizationalChart])
async def list_my_charts(
    viewer: ViewerContext = Depends(require_viewer),
    provider: RegistryProvider = Depends(get_registry_provider),
):
    registry = await _registry_for(provider, viewer)
    return registry.list_by_creator(viewer.viewer_id)


@router.get("/pending", response_model=list[OrganizationalChart])
async def list_pending(
    viewer: ViewerContext = Depends(require_viewer),
    provider: RegistryProvider = Depends(get_registry_provider),
):
    registry = await _registry_for(provider, viewer)
    return registry.list_pending_for(viewer.viewer_id, viewer.viewer_role)


@router.post("/generate", response_model=GenerationResult)
async def generate_chart(
    request: GenerateChartRequest,
    viewer: ViewerContext = Depends(require_viewer),
    provider: RegistryProvider = Depends(get_registry_provider),
    synthesizer: ChartSynthesizer = Depends(get_synthesizer),
):
    """Generate a chart from a prompt, optionally saving it to the organization.

    Generation failures come back as success=false with a reason (200);
    store failures are 503.
    """
    service = ChartGenerationService(provider, synthesizer)
    try:
        return await service.generate_chart(request, viewer)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail="Chart could not be saved, please retry") from e


@router.post("/{chart_id}/approval")
async def process_approval(
    chart_id: str,
    decision: ApprovalDecision,
    viewer: ViewerContext = Depends(require_elevated_role),
    provider: RegistryProvider = Depends(get_registry_provider),
):
    """Approve, reject or request changes on a chart.

    Raises:
        HTTPException(403): Viewer role is not elevated
        HTTPException(404): Chart not found in the viewer's organization
        HTTPException(409): Action not allowed from the chart's current state
        HTTPException(503): Store unavailable
    """
    registry = await _registry_for(provider, viewer)
    if registry.get_chart(chart_id) is None:
        raise HTTPException(status_code=404, detail="Chart not found")

    request = ApprovalRequest(
        chart_id=chart_id,
        action=decision.action,
        reason=decision.reason,
        reviewer_notes=decision.reviewer_notes,
    )
    try:
        applied = await registry.process_approval(request, viewer.viewer_id)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail="Chart store unavailable") from e

    if not applied:
        raise HTTPException(status_code=409, detail="Approval action not allowed in the current state")

    chart = registry.get_chart(chart_id)
    return {"success": True, "chart_id": chart_id, "approval_status": chart.approval_status.value}


@router.post("/{chart_id}/submit")
async def submit_for_approval(
    chart_id: str,
    viewer: ViewerContext = Depends(require_viewer),
    provider: RegistryProvider = Depends(get_registry_provider),
):
    """Re-submit a draft or rejected chart for approval."""
    registry = await _registry_for(provider, viewer)
    if registry.get_chart(chart_id) is None:
        raise HTTPException(status_code=404, detail="Chart not found")

    try:
        submitted = await registry.submit_for_approval(chart_id, viewer.viewer_id, viewer.viewer_role)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail="Chart store unavailable") from e

    if not submitted:
        raise HTTPException(status_code=409, detail="Chart cannot be submitted for approval")
    return {"success": True, "chart_id": chart_id, "approval_status": "pending"}


@router.post("/{chart_id}/usage", response_model=OrganizationalChart)
async def record_usage(
    chart_id: str,
    usage: UsageRequest,
    viewer: ViewerContext = Depends(require_viewer),
    provider: RegistryProvider = Depends(get_registry_provider),
):
    """Record an install or other usage event.

    Raises:
        HTTPException(404): Chart unknown or not visible to the viewer
        HTTPException(403): Chart visible but the viewer has no use grant
        HTTPException(503): Store unavailable
    """
    registry = await _registry_for(provider, viewer)
    chart = registry.get_chart(chart_id)
    if chart is None or not is_visible(chart, viewer.viewer_id, viewer.viewer_role):
        raise HTTPException(status_code=404, detail="Chart not found")
    if not can_use(chart, viewer.viewer_id, viewer.viewer_role, registry.elevated_roles):
        raise HTTPException(status_code=403, detail="Chart use not permitted")

    try:
        return await registry.record_usage(chart_id, viewer.viewer_id, usage.action)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail="Chart store unavailable") from e


@router.put("/{chart_id}")
async def update_chart(
    chart_id: str,
    update: ChartUpdateRequest,
    viewer: ViewerContext = Depends(require_viewer),
):
    """Authorization stub; updates are not exposed over HTTP yet."""
    if not is_elevated_viewer(viewer):
        raise HTTPException(status_code=403, detail="Elevated role required")
    raise HTTPException(status_code=501, detail="Chart updates are not available")


@router.delete("/{chart_id}")
async def delete_chart(
    chart_id: str,
    viewer: ViewerContext = Depends(require_viewer),
):
    """Authorization stub; charts cannot be deleted."""
    if not is_elevated_viewer(viewer):
        raise HTTPException(status_code=403, detail="Elevated role required")
    raise HTTPException(status_code=501, detail="Chart deletion is not available")
