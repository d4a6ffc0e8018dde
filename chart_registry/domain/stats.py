"""Library statistics.

Pure aggregation over a chart collection. The input is never mutated or
re-ordered; identical input always yields identical output.
"""

from chart_registry.schemas.charts import (
    ApprovalStatus,
    ChartSource,
    LibraryStats,
    OrganizationalChart,
    TopCreator,
)

TOP_N = 5


def most_used(charts: list[OrganizationalChart], limit: int = TOP_N) -> list[OrganizationalChart]:
    """Charts by total installs, descending; equal counts keep input order."""
    return sorted(charts, key=lambda c: c.usage.total_installs, reverse=True)[:limit]


def top_creators(charts: list[OrganizationalChart], limit: int = TOP_N) -> list[TopCreator]:
    """Creators by chart count, descending.

    Ties keep the order in which each creator first appears in the input
    (dicts preserve insertion order and sorted() is stable).
    """
    creators: dict[str, TopCreator] = {}
    for chart in charts:
        creator = creators.get(chart.created_by)
        if creator is None:
            creator = TopCreator(user_id=chart.created_by, user_name=chart.creator_name, chart_count=0, total_usage=0)
            creators[chart.created_by] = creator
        creator.chart_count += 1
        creator.total_usage += chart.usage.total_installs

    return sorted(creators.values(), key=lambda c: c.chart_count, reverse=True)[:limit]


def compute_stats(charts: list[OrganizationalChart]) -> LibraryStats:
    return LibraryStats(
        total_count=len(charts),
        generated_count=sum(1 for c in charts if c.source == ChartSource.GENERATED),
        approved_count=sum(1 for c in charts if c.approval_status == ApprovalStatus.APPROVED),
        pending_count=sum(1 for c in charts if c.approval_status == ApprovalStatus.PENDING),
        rejected_count=sum(1 for c in charts if c.approval_status == ApprovalStatus.REJECTED),
        most_used=most_used(charts),
        top_creators=top_creators(charts),
    )
