"""Tests for the built-in template catalog."""

import pytest

from chart_registry.catalog.registry import SearchFilters, TemplateCatalog, is_featured
from chart_registry.schemas.charts import ChartCategory, ChartType

pytestmark = pytest.mark.unit


def _ids(templates):
    return [t.id for t in templates]


def test_catalog_holds_sales_and_marketing_templates(catalog):
    assert len(catalog.templates) == 6
    assert _ids(catalog.templates)[:3] == ["sales-revenue-trend", "sales-pipeline-funnel", "sales-rep-performance"]


def test_categories_cover_every_category(catalog):
    categories = catalog.get_categories()

    assert [c.id for c in categories] == ["sales", "marketing", "analytics", "finance", "operations"]
    by_id = {c.id: c for c in categories}
    assert len(by_id["sales"].templates) == 3
    assert len(by_id["marketing"].templates) == 3
    assert by_id["finance"].templates == []


def test_get_template_by_id(catalog):
    template = catalog.get_template_by_id("marketing-campaign-roi")

    assert template is not None
    assert template.chart_type == ChartType.BAR


def test_unknown_template_id_returns_none(catalog):
    assert catalog.get_template_by_id("does-not-exist") is None


class TestSearch:
    def test_no_filters_returns_everything_in_order(self, catalog):
        assert _ids(catalog.search(SearchFilters())) == _ids(catalog.templates)

    def test_query_matches_name_case_insensitively(self, catalog):
        assert _ids(catalog.search(SearchFilters(query="FUNNEL"))) == ["sales-pipeline-funnel"]

    def test_query_matches_tags(self, catalog):
        assert _ids(catalog.search(SearchFilters(query="attribution"))) == ["marketing-lead-sources"]

    def test_chart_type_filter(self, catalog):
        results = catalog.search(SearchFilters(chart_type=ChartType.LINE))

        assert _ids(results) == ["sales-revenue-trend", "marketing-campaign-timeline"]

    def test_filters_are_conjunctive(self, catalog):
        results = catalog.search(SearchFilters(category=ChartCategory.MARKETING, chart_type=ChartType.BAR))

        assert _ids(results) == ["marketing-campaign-roi"]

    def test_tags_need_one_overlap(self, catalog):
        results = catalog.search(SearchFilters(tags=["KPI", "nonexistent"]))

        assert _ids(results) == ["sales-rep-performance"]

    def test_min_rating_is_inclusive(self, catalog):
        results = catalog.search(SearchFilters(min_rating=4.8))

        assert _ids(results) == ["sales-revenue-trend", "marketing-campaign-roi"]

    def test_empty_category(self, catalog):
        assert catalog.search(SearchFilters(category=ChartCategory.FINANCE)) == []


class TestRankings:
    def test_featured_sorted_by_rating(self, catalog):
        assert _ids(catalog.get_featured()) == [
            "marketing-campaign-roi",
            "sales-revenue-trend",
            "sales-pipeline-funnel",
            "marketing-lead-sources",
        ]

    def test_featured_respects_limit(self):
        assert len(TemplateCatalog(featured_limit=2).get_featured()) == 2

    def test_popular_sorted_by_downloads(self, catalog):
        assert _ids(catalog.get_popular())[:3] == [
            "marketing-campaign-roi",
            "sales-revenue-trend",
            "marketing-lead-sources",
        ]

    def test_recent_puts_oldest_update_last(self, catalog):
        assert _ids(catalog.get_recent())[-1] == "marketing-campaign-timeline"

    def test_rankings_do_not_reorder_catalog(self, catalog):
        before = _ids(catalog.templates)
        catalog.get_popular()
        catalog.get_recent()

        assert _ids(catalog.templates) == before

    def test_highly_rated_and_downloaded_counts_as_featured(self, catalog):
        template = catalog.get_template_by_id("sales-rep-performance").model_copy(
            update={"rating": 4.7, "downloads": 1000}
        )

        assert is_featured(template)
