"""Visibility and approval-permission rules.

Pure domain functions, no storage access. Grant lists hold either viewer
ids or role names, so every check tests both.
"""

from collections.abc import Iterable

from chart_registry.schemas.charts import ApprovalStatus, ChartPermissions, OrganizationalChart, Visibility

# Organization-wide default; overridable through Settings.elevated_roles.
ELEVATED_ROLES: frozenset[str] = frozenset({"admin", "manager", "team_lead"})

TEAM_ROLES = ["team_member", "team_lead", "manager", "admin"]
ALL_USERS = "all_users"
PUBLIC = "public"


def default_view_grants(visibility: Visibility) -> list[str]:
    if visibility == Visibility.TEAM:
        return list(TEAM_ROLES)
    if visibility == Visibility.ORGANIZATION:
        return [ALL_USERS]
    if visibility == Visibility.PUBLIC:
        return [PUBLIC]
    return []


def default_permissions(
    visibility: Visibility,
    creator_id: str,
    elevated_roles: Iterable[str] = ELEVATED_ROLES,
) -> ChartPermissions:
    """Initial grants for a new chart.

    Private charts get empty view/use sets; the creator is always allowed
    through the ownership check in is_visible.
    """
    view = default_view_grants(visibility)
    return ChartPermissions(
        can_view=view,
        can_use=list(view),
        can_modify=[creator_id],
        can_approve=sorted(elevated_roles),
    )


def _granted(grants: list[str], viewer_id: str, viewer_role: str) -> bool:
    return viewer_id in grants or viewer_role in grants


def is_visible(chart: OrganizationalChart, viewer_id: str, viewer_role: str) -> bool:
    """Whether viewer may see chart.

    - creator: always
    - private: never for anyone else
    - team: only with an explicit id/role grant in can_view
    - organization: with a can_view grant, or once approved
    - public: always
    """
    if chart.created_by == viewer_id:
        return True

    match chart.visibility:
        case Visibility.PRIVATE:
            return False
        case Visibility.TEAM:
            return _granted(chart.permissions.can_view, viewer_id, viewer_role)
        case Visibility.ORGANIZATION:
            if chart.approval_status == ApprovalStatus.APPROVED:
                return True
            return _granted(chart.permissions.can_view, viewer_id, viewer_role)
        case Visibility.PUBLIC:
            return True
    return False


def can_approve(
    chart: OrganizationalChart,
    viewer_id: str,
    viewer_role: str,
    elevated_roles: Iterable[str] = ELEVATED_ROLES,
) -> bool:
    """Per-chart approve grant, or an organization-wide elevated role."""
    if _granted(chart.permissions.can_approve, viewer_id, viewer_role):
        return True
    return viewer_role in set(elevated_roles)


def can_use(
    chart: OrganizationalChart,
    viewer_id: str,
    viewer_role: str,
    elevated_roles: Iterable[str] = ELEVATED_ROLES,
) -> bool:
    """Whether viewer may install/use chart.

    Requires visibility, then ownership, an elevated role, a can_use grant,
    or a chart shared openly (public, or approved organization-wide).
    """
    if not is_visible(chart, viewer_id, viewer_role):
        return False
    if chart.created_by == viewer_id or viewer_role in set(elevated_roles):
        return True
    if _granted(chart.permissions.can_use, viewer_id, viewer_role):
        return True
    if chart.visibility == Visibility.PUBLIC:
        return True
    return chart.visibility == Visibility.ORGANIZATION and chart.approval_status == ApprovalStatus.APPROVED


def can_modify(chart: OrganizationalChart, viewer_id: str, viewer_role: str) -> bool:
    return chart.created_by == viewer_id or _granted(chart.permissions.can_modify, viewer_id, viewer_role)


def is_elevated(viewer_role: str, elevated_roles: Iterable[str] = ELEVATED_ROLES) -> bool:
    return viewer_role in set(elevated_roles)
