"""Heuristic prompt classification.

Maps free text to a chart type, a category, a bounded confidence score and a
set of data hints. Pure and deterministic: the same prompt always produces
the same Classification.

Scoring: each candidate gets one point per keyword found as a substring of
the lower-cased prompt. Highest score wins; on equal scores the candidate
listed first in the table wins; with no matches the defaults apply.
"""

from chart_registry.schemas.charts import ChartCategory, ChartType, Classification

DEFAULT_CHART_TYPE = ChartType.BAR
DEFAULT_CATEGORY = ChartCategory.ANALYTICS

CONFIDENCE_PER_MATCH = 0.2
MAX_CONFIDENCE = 0.95

# Table order is the tie-break priority.
CHART_TYPE_KEYWORDS: dict[ChartType, tuple[str, ...]] = {
    ChartType.BAR: ("bar", "compare", "comparison", "categories", "versus", "vs"),
    ChartType.LINE: ("trend", "over time", "timeline", "progress", "growth", "change"),
    ChartType.PIE: ("distribution", "percentage", "proportion", "share", "breakdown"),
    ChartType.DOUGHNUT: ("composition", "parts", "segments", "breakdown"),
    ChartType.SCATTER: ("correlation", "relationship", "scatter", "xy", "plot"),
    ChartType.RADAR: ("performance", "multiple metrics", "comparison", "spider", "radar"),
    ChartType.AREA: ("volume", "cumulative", "stacked", "total"),
}

CATEGORY_KEYWORDS: dict[ChartCategory, tuple[str, ...]] = {
    ChartCategory.SALES: ("sales", "revenue", "deals", "pipeline", "quota", "commission"),
    ChartCategory.MARKETING: ("campaign", "leads", "conversion", "roi", "marketing", "funnel"),
    ChartCategory.ANALYTICS: ("users", "behavior", "engagement", "traffic", "analytics"),
    ChartCategory.FINANCE: ("budget", "expenses", "profit", "cash flow", "financial"),
    ChartCategory.OPERATIONS: ("productivity", "efficiency", "tasks", "performance", "operations"),
}

# (cues, hint): a hint is emitted once if any of its cues appears.
DATA_HINT_CUES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("month", "monthly"), "monthly_data"),
    (("quarter", "quarterly"), "quarterly_data"),
    (("year", "yearly"), "yearly_data"),
    (("week", "weekly"), "weekly_data"),
    (("revenue", "sales"), "revenue_metrics"),
    (("user", "customer"), "user_metrics"),
    (("conversion", "rate"), "conversion_metrics"),
)

MIN_KEYWORD_LENGTH = 4


def _score(text: str, keywords: tuple[str, ...]) -> int:
    return sum(1 for keyword in keywords if keyword in text)


def _best_match(text: str, table: dict, default):
    best, best_score = default, 0
    for candidate, keywords in table.items():
        score = _score(text, keywords)
        if score > best_score:
            best, best_score = candidate, score
    return best, best_score


def extract_data_hints(text: str) -> list[str]:
    """Return the hint tokens whose cues occur in text, in table order."""
    lowered = text.lower()
    return [hint for cues, hint in DATA_HINT_CUES if any(cue in lowered for cue in cues)]


def compute_confidence(type_score: int, category_score: int) -> float:
    return min((type_score + category_score) * CONFIDENCE_PER_MATCH, MAX_CONFIDENCE)


def classify(prompt: str) -> Classification:
    """Classify a free-text chart request.

    Never raises for string input; an empty prompt classifies to the
    defaults with zero confidence.
    """
    text = prompt.lower()

    chart_type, type_score = _best_match(text, CHART_TYPE_KEYWORDS, DEFAULT_CHART_TYPE)
    category, category_score = _best_match(text, CATEGORY_KEYWORDS, DEFAULT_CATEGORY)

    return Classification(
        chart_type=chart_type,
        category=category,
        confidence=compute_confidence(type_score, category_score),
        keywords=[word for word in text.split() if len(word) >= MIN_KEYWORD_LENGTH],
        data_hints=extract_data_hints(text),
    )
