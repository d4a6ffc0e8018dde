"""TemplateCatalog: read-only lookup, search and ranking over built-in templates.

Built once from the static category modules; never mutated afterwards, so a
single instance is shared across every organization and request.
"""

from dataclasses import dataclass, field
from functools import lru_cache

from chart_registry.catalog.marketing import MARKETING_TEMPLATES
from chart_registry.catalog.sales import SALES_TEMPLATES
from chart_registry.core.config import get_settings
from chart_registry.schemas.charts import ChartCategory, ChartTemplate, ChartType, LibraryCategory

# Display metadata per category: (name, description, icon, color)
CATEGORY_INFO: dict[ChartCategory, tuple[str, str, str, str]] = {
    ChartCategory.SALES: ("Sales", "Revenue, pipeline and team performance charts", "💰", "#3b82f6"),
    ChartCategory.MARKETING: ("Marketing", "Campaign, channel and lead generation charts", "📣", "#10b981"),
    ChartCategory.ANALYTICS: ("Analytics", "User behavior and engagement charts", "🔍", "#f59e0b"),
    ChartCategory.FINANCE: ("Finance", "Budget, expense and cash flow charts", "🏦", "#ef4444"),
    ChartCategory.OPERATIONS: ("Operations", "Productivity and efficiency charts", "⚙️", "#6366f1"),
}

CATEGORY_TEMPLATES: dict[ChartCategory, list[ChartTemplate]] = {
    ChartCategory.SALES: SALES_TEMPLATES,
    ChartCategory.MARKETING: MARKETING_TEMPLATES,
}

FEATURED_MIN_RATING = 4.7
FEATURED_MIN_DOWNLOADS = 1000


@dataclass
class SearchFilters:
    """Conjunctive catalog filters; None/empty means "don't filter"."""

    query: str | None = None
    category: ChartCategory | None = None
    chart_type: ChartType | None = None
    tags: list[str] = field(default_factory=list)
    min_rating: float | None = None


def is_featured(template: ChartTemplate) -> bool:
    """Flagged explicitly, or both highly rated and widely downloaded."""
    if template.featured:
        return True
    return template.rating >= FEATURED_MIN_RATING and template.downloads >= FEATURED_MIN_DOWNLOADS


class TemplateCatalog:
    """Immutable catalog of pre-built chart templates."""

    def __init__(
        self,
        templates_by_category: dict[ChartCategory, list[ChartTemplate]] | None = None,
        featured_limit: int = 6,
        popular_limit: int = 10,
        recent_limit: int = 10,
    ):
        source = templates_by_category if templates_by_category is not None else CATEGORY_TEMPLATES
        self._by_category: dict[ChartCategory, tuple[ChartTemplate, ...]] = {
            category: tuple(source.get(category, [])) for category in ChartCategory
        }
        self._all: tuple[ChartTemplate, ...] = tuple(t for templates in self._by_category.values() for t in templates)
        self._by_id: dict[str, ChartTemplate] = {t.id: t for t in self._all}
        self.featured_limit = featured_limit
        self.popular_limit = popular_limit
        self.recent_limit = recent_limit

    @property
    def templates(self) -> list[ChartTemplate]:
        return list(self._all)

    def get_categories(self) -> list[LibraryCategory]:
        categories = []
        for category, templates in self._by_category.items():
            name, description, icon, color = CATEGORY_INFO[category]
            categories.append(
                LibraryCategory(
                    id=category.value,
                    name=name,
                    description=description,
                    icon=icon,
                    color=color,
                    templates=list(templates),
                )
            )
        return categories

    def get_template_by_id(self, template_id: str) -> ChartTemplate | None:
        """Return the template, or None when the id is unknown."""
        return self._by_id.get(template_id)

    def search(self, filters: SearchFilters) -> list[ChartTemplate]:
        """Apply all given filters conjunctively, preserving catalog order.

        - query: case-insensitive substring of name, description or any tag
        - category: restricts to that category's templates
        - chart_type: exact match
        - tags: at least one overlapping tag
        - min_rating: inclusive lower bound
        """
        candidates = self._by_category[filters.category] if filters.category else self._all
        query = filters.query.lower().strip() if filters.query else ""
        wanted_tags = {t.lower() for t in filters.tags}

        results = []
        for template in candidates:
            if query:
                haystack = [template.name.lower(), template.description.lower(), *(t.lower() for t in template.tags)]
                if not any(query in text for text in haystack):
                    continue
            if filters.chart_type and template.chart_type != filters.chart_type:
                continue
            if wanted_tags and not wanted_tags.intersection(t.lower() for t in template.tags):
                continue
            if filters.min_rating is not None and template.rating < filters.min_rating:
                continue
            results.append(template)
        return results

    def get_featured(self) -> list[ChartTemplate]:
        featured = [t for t in self._all if is_featured(t)]
        return sorted(featured, key=lambda t: t.rating, reverse=True)[: self.featured_limit]

    def get_popular(self) -> list[ChartTemplate]:
        return sorted(self._all, key=lambda t: t.downloads, reverse=True)[: self.popular_limit]

    def get_recent(self) -> list[ChartTemplate]:
        return sorted(self._all, key=lambda t: t.updated_at, reverse=True)[: self.recent_limit]


@lru_cache
def get_catalog() -> TemplateCatalog:
    """Shared catalog built with the configured ranking caps."""
    settings = get_settings()
    return TemplateCatalog(
        featured_limit=settings.featured_limit,
        popular_limit=settings.popular_limit,
        recent_limit=settings.recent_limit,
    )
