"""Tests for the heuristic prompt classifier."""

import pytest

from chart_registry.domain.classifier import classify, compute_confidence, extract_data_hints
from chart_registry.schemas.charts import ChartCategory, ChartType

pytestmark = pytest.mark.unit


def test_monthly_sales_trend_classifies_as_sales_line():
    result = classify("Show monthly sales trends for the last year")

    assert result.chart_type == ChartType.LINE
    assert result.category == ChartCategory.SALES
    assert result.confidence == pytest.approx(0.4)
    assert result.data_hints == ["monthly_data", "yearly_data", "revenue_metrics"]


def test_keywords_keep_words_of_four_or_more_characters():
    result = classify("Show monthly sales trends for the last year")

    assert result.keywords == ["show", "monthly", "sales", "trends", "last", "year"]


def test_classification_is_deterministic():
    prompt = "Compare campaign conversion across channels"

    assert classify(prompt) == classify(prompt)


def test_empty_prompt_falls_back_to_defaults():
    result = classify("")

    assert result.chart_type == ChartType.BAR
    assert result.category == ChartCategory.ANALYTICS
    assert result.confidence == 0.0
    assert result.keywords == []
    assert result.data_hints == []


def test_unmatched_prompt_falls_back_to_defaults():
    result = classify("zzz qqq")

    assert result.chart_type == ChartType.BAR
    assert result.category == ChartCategory.ANALYTICS
    assert result.confidence == 0.0


def test_tie_goes_to_first_listed_chart_type():
    """'breakdown' scores one point for both pie and doughnut; pie is listed first."""
    result = classify("breakdown")

    assert result.chart_type == ChartType.PIE


def test_highest_score_wins_over_table_order():
    result = classify("composition of parts and segments")

    assert result.chart_type == ChartType.DOUGHNUT


def test_matching_is_case_insensitive():
    result = classify("REVENUE TREND")

    assert result.chart_type == ChartType.LINE
    assert result.category == ChartCategory.SALES


def test_marketing_campaign_prompt():
    result = classify("Campaign ROI and leads distribution")

    assert result.category == ChartCategory.MARKETING
    assert result.chart_type == ChartType.PIE


class TestConfidence:
    def test_confidence_is_point_two_per_match(self):
        assert compute_confidence(1, 1) == pytest.approx(0.4)
        assert compute_confidence(2, 1) == pytest.approx(0.6)

    def test_confidence_is_capped(self):
        assert compute_confidence(4, 3) == 0.95

    def test_confidence_stays_within_bounds_for_keyword_heavy_prompt(self):
        prompt = "trend over time timeline progress growth change sales revenue deals pipeline quota"
        result = classify(prompt)

        assert 0.0 <= result.confidence <= 0.95
        assert result.confidence == 0.95


class TestDataHints:
    def test_each_hint_emitted_once(self):
        hints = extract_data_hints("monthly month month revenue sales")

        assert hints == ["monthly_data", "revenue_metrics"]

    def test_hints_follow_table_order(self):
        hints = extract_data_hints("conversion rate per customer each week")

        assert hints == ["weekly_data", "user_metrics", "conversion_metrics"]

    def test_no_hints(self):
        assert extract_data_hints("pie") == []
