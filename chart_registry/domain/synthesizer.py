"""Chart synthesis from a Classification.

Builds a concrete ChartTemplate (sample data, rendering config, data
requirements) for the classified chart type, plus up to two alternative
chart types from a fixed adjacency table.

The only non-deterministic input is the sample values, drawn from an
injectable random.Random; pass a seeded instance for reproducible output.
"""

import random
import uuid
from datetime import UTC, datetime

from chart_registry.schemas.charts import (
    ChartCategory,
    ChartSource,
    ChartTemplate,
    ChartType,
    Classification,
    DataRequirements,
    Dataset,
    DataType,
    SampleData,
)

PALETTE = ["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6"]

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
QUARTER_LABELS = ["Q1", "Q2", "Q3", "Q4"]
CATEGORY_LABELS: dict[ChartCategory, list[str]] = {
    ChartCategory.SALES: ["Leads", "Qualified", "Proposals", "Closed"],
    ChartCategory.MARKETING: ["Email", "Social", "PPC", "Organic", "Direct"],
}
FALLBACK_LABELS = ["Category A", "Category B", "Category C", "Category D", "Category E"]

SAMPLE_VALUE_MIN = 100
SAMPLE_VALUE_MAX = 1099

RADIAL_TYPES = frozenset({ChartType.PIE, ChartType.DOUGHNUT})

ALTERNATIVES: dict[ChartType, tuple[ChartType, ...]] = {
    ChartType.BAR: (ChartType.LINE, ChartType.AREA),
    ChartType.LINE: (ChartType.BAR, ChartType.AREA),
    ChartType.PIE: (ChartType.DOUGHNUT, ChartType.BAR),
    ChartType.SCATTER: (ChartType.LINE, ChartType.BUBBLE),
}
DEFAULT_ALTERNATIVES = (ChartType.BAR, ChartType.LINE)
MAX_ALTERNATIVES = 2

THUMBNAILS: dict[ChartType, str] = {
    ChartType.BAR: "📊",
    ChartType.LINE: "📈",
    ChartType.PIE: "🥧",
    ChartType.DOUGHNUT: "🍩",
    ChartType.SCATTER: "📍",
    ChartType.RADAR: "🕸️",
    ChartType.AREA: "📊",
    ChartType.BUBBLE: "🫧",
    ChartType.POLAR_AREA: "🎯",
    ChartType.FUNNEL: "🛒",
}

NAME_WORDS = 4
TAG_KEYWORDS = 3
GENERATED_AUTHOR = "AI Assistant"
GENERATED_TAG = "ai-generated"


def _title(value: str) -> str:
    return value[:1].upper() + value[1:]


def alternative_types(chart_type: ChartType) -> list[ChartType]:
    return list(ALTERNATIVES.get(chart_type, DEFAULT_ALTERNATIVES))[:MAX_ALTERNATIVES]


def generate_labels(classification: Classification) -> list[str]:
    """Time hints win over category label sets; generic labels otherwise."""
    if "monthly_data" in classification.data_hints:
        return list(MONTH_LABELS)
    if "quarterly_data" in classification.data_hints:
        return list(QUARTER_LABELS)
    if classification.category in CATEGORY_LABELS:
        return list(CATEGORY_LABELS[classification.category])
    return list(FALLBACK_LABELS)


def chart_name(prompt: str, chart_type: ChartType) -> str:
    words = " ".join(prompt.split()[:NAME_WORDS])
    return f"{_title(words)} {_title(chart_type.value)} Chart".strip()


def chart_description(prompt: str, chart_type: ChartType, confidence: float) -> str:
    return (
        f'AI-generated {chart_type.value} chart based on: "{prompt}". '
        f"Confidence: {round(confidence * 100)}%"
    )


def required_fields(chart_type: ChartType) -> list[str]:
    if chart_type == ChartType.SCATTER:
        return ["x", "y"]
    return ["labels", "values"]


def build_config(chart_type: ChartType, category: ChartCategory) -> dict:
    options: dict = {
        "responsive": True,
        "plugins": {
            "title": {"display": True, "text": f"{_title(category.value)} {_title(chart_type.value)}"},
            "legend": {"position": "top"},
        },
    }
    if chart_type not in RADIAL_TYPES:
        options["scales"] = {"y": {"beginAtZero": True}}
    return {"type": chart_type.value, "options": options}


class ChartSynthesizer:
    """Turns classifications into ChartTemplates."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def generate_sample_data(self, classification: Classification) -> SampleData:
        labels = generate_labels(classification)
        values = [self.rng.randint(SAMPLE_VALUE_MIN, SAMPLE_VALUE_MAX) for _ in labels]
        radial = classification.chart_type in RADIAL_TYPES

        dataset = Dataset(
            label=_title(classification.category.value),
            data=values,
            background_color=PALETTE[: len(labels)] if radial else PALETTE[0],
            border_color=PALETTE[0],
            border_width=1,
            fill=classification.chart_type == ChartType.AREA,
        )
        return SampleData(labels=labels, datasets=[dataset])

    def synthesize(
        self,
        classification: Classification | None,
        prompt: str,
        now: datetime | None = None,
    ) -> ChartTemplate | None:
        """Build the primary chart for a classification.

        Returns None when there is no classification to work from; callers
        report that as a generation failure.
        """
        if classification is None:
            return None

        now = now or datetime.now(UTC)
        chart_type = classification.chart_type

        return ChartTemplate(
            id=f"gen-{uuid.uuid4().hex}",
            name=chart_name(prompt, chart_type),
            description=chart_description(prompt, chart_type, classification.confidence),
            category=classification.category,
            chart_type=chart_type,
            tags=[GENERATED_TAG, classification.category.value, chart_type.value, *classification.keywords[:TAG_KEYWORDS]],
            author=GENERATED_AUTHOR,
            created_at=now,
            updated_at=now,
            source=ChartSource.GENERATED,
            thumbnail=THUMBNAILS.get(chart_type, "📊"),
            config=build_config(chart_type, classification.category),
            data_requirements=DataRequirements(
                required=required_fields(chart_type),
                optional=["category", "timestamp", "metadata"],
                min_data_points=2,
                max_data_points=1000,
                data_types={
                    "labels": DataType.STRING,
                    "values": DataType.NUMBER,
                    "timestamp": DataType.DATE,
                    "category": DataType.STRING,
                },
            ),
            sample_data=self.generate_sample_data(classification),
            use_cases=[f"{classification.category.value} analysis", "data visualization", "reporting"],
        )

    def synthesize_alternatives(
        self,
        classification: Classification | None,
        prompt: str,
        now: datetime | None = None,
    ) -> list[ChartTemplate]:
        """Build up to two alternative charts with the chart type substituted."""
        if classification is None:
            return []

        alternatives = []
        for chart_type in alternative_types(classification.chart_type):
            variant = classification.model_copy(update={"chart_type": chart_type})
            chart = self.synthesize(variant, prompt, now=now)
            if chart is not None:
                alternatives.append(chart)
        return alternatives
