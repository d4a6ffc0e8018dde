"""Viewer context resolution for FastAPI.

Authentication happens upstream; the gateway forwards the resolved viewer
in trusted headers. These dependencies only read and shape that context.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException

from chart_registry.core.config import get_settings
from chart_registry.core.logging import bind_viewer_context
from chart_registry.domain.permissions import is_elevated


@dataclass(frozen=True)
class ViewerContext:
    """The already-authenticated caller of a registry operation."""

    viewer_id: str
    organization_id: str
    viewer_role: str
    viewer_name: str = ""
    viewer_email: str = ""


async def require_viewer(
    x_viewer_id: str | None = Header(None),
    x_organization_id: str | None = Header(None),
    x_viewer_role: str = Header("team_member"),
    x_viewer_name: str = Header(""),
    x_viewer_email: str = Header(""),
) -> ViewerContext:
    """FastAPI dependency that builds the ViewerContext from request headers.

    Usage::

        @router.get("/library")
        async def library(viewer: ViewerContext = Depends(require_viewer)):
            ...
    """
    if not x_viewer_id or not x_organization_id:
        raise HTTPException(status_code=401, detail="Missing viewer context")

    viewer = ViewerContext(
        viewer_id=x_viewer_id,
        organization_id=x_organization_id,
        viewer_role=x_viewer_role,
        viewer_name=x_viewer_name,
        viewer_email=x_viewer_email,
    )
    bind_viewer_context(viewer.organization_id, viewer.viewer_id, viewer.viewer_role)
    return viewer


def is_elevated_viewer(viewer: ViewerContext) -> bool:
    return is_elevated(viewer.viewer_role, get_settings().elevated_roles)


async def require_elevated_role(viewer: ViewerContext = Depends(require_viewer)) -> ViewerContext:
    """FastAPI dependency that requires an organization-wide elevated role.

    Raises 403 for every other role; this is the approval pre-check.
    """
    if not is_elevated_viewer(viewer):
        raise HTTPException(status_code=403, detail="Elevated role required")
    return viewer
