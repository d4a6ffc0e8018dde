"""Built-in marketing chart templates."""

from datetime import UTC, datetime

from chart_registry.schemas.charts import (
    ChartCategory,
    ChartSource,
    ChartTemplate,
    ChartType,
    DataRequirements,
    Dataset,
    DataType,
    SampleData,
)

MARKETING_TEMPLATES: list[ChartTemplate] = [
    ChartTemplate(
        id="marketing-campaign-roi",
        name="Campaign ROI Analysis",
        description="Track return on investment for marketing campaigns across different channels",
        category=ChartCategory.MARKETING,
        chart_type=ChartType.BAR,
        tags=["roi", "campaigns", "channels", "performance"],
        author="Chart Registry Team",
        rating=4.9,
        downloads=1456,
        featured=True,
        created_at=datetime(2024, 1, 20, 10, 0, tzinfo=UTC),
        updated_at=datetime(2024, 10, 15, 14, 30, tzinfo=UTC),
        source=ChartSource.CATALOG,
        thumbnail="📊",
        config={
            "type": "bar",
            "options": {
                "responsive": True,
                "scales": {"y": {"beginAtZero": True, "title": {"display": True, "text": "ROI (%)"}}},
                "plugins": {
                    "title": {"display": True, "text": "Campaign ROI by Channel"},
                    "legend": {"position": "top"},
                },
            },
        },
        data_requirements=DataRequirements(
            required=["channel", "spent", "revenue"],
            optional=["leads", "conversions", "cost_per_lead"],
            min_data_points=2,
            max_data_points=20,
            data_types={
                "channel": DataType.STRING,
                "spent": DataType.NUMBER,
                "revenue": DataType.NUMBER,
                "leads": DataType.NUMBER,
                "conversions": DataType.NUMBER,
                "cost_per_lead": DataType.NUMBER,
            },
        ),
        sample_data=SampleData(
            labels=["Google Ads", "Facebook", "LinkedIn", "Email", "Content Marketing"],
            datasets=[
                Dataset(label="ROI (%)", data=[245, 180, 320, 150, 420], background_color="#10b981"),
            ],
        ),
        use_cases=[
            "Campaign performance evaluation",
            "Budget allocation optimization",
            "Channel effectiveness comparison",
            "Marketing investment planning",
        ],
    ),
    ChartTemplate(
        id="marketing-lead-sources",
        name="Lead Source Distribution",
        description="Visualize lead generation sources and their contribution percentages",
        category=ChartCategory.MARKETING,
        chart_type=ChartType.DOUGHNUT,
        tags=["leads", "sources", "attribution", "distribution"],
        author="Chart Registry Team",
        rating=4.7,
        downloads=1123,
        featured=True,
        created_at=datetime(2024, 2, 15, 10, 0, tzinfo=UTC),
        updated_at=datetime(2024, 10, 15, 14, 30, tzinfo=UTC),
        source=ChartSource.CATALOG,
        thumbnail="🍩",
        config={
            "type": "doughnut",
            "options": {
                "responsive": True,
                "plugins": {
                    "title": {"display": True, "text": "Lead Source Distribution"},
                    "legend": {"position": "right"},
                },
            },
        },
        data_requirements=DataRequirements(
            required=["source", "leads"],
            optional=["conversion_rate", "cost_per_lead"],
            min_data_points=3,
            max_data_points=15,
            data_types={
                "source": DataType.STRING,
                "leads": DataType.NUMBER,
                "conversion_rate": DataType.NUMBER,
                "cost_per_lead": DataType.NUMBER,
            },
        ),
        sample_data=SampleData(
            labels=["Organic Search", "Paid Search", "Social Media", "Email Marketing", "Referrals", "Direct"],
            datasets=[
                Dataset(
                    label="Lead Count",
                    data=[345, 267, 189, 156, 98, 67],
                    background_color=["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6", "#06b6d4"],
                ),
            ],
        ),
        use_cases=[
            "Lead attribution analysis",
            "Marketing channel effectiveness",
            "Budget allocation decisions",
            "Source performance tracking",
        ],
    ),
    ChartTemplate(
        id="marketing-campaign-timeline",
        name="Campaign Performance Timeline",
        description="Track campaign metrics over time to identify trends and patterns",
        category=ChartCategory.MARKETING,
        chart_type=ChartType.LINE,
        tags=["timeline", "trends", "performance", "tracking"],
        author="Chart Registry Team",
        rating=4.5,
        downloads=834,
        featured=False,
        created_at=datetime(2024, 3, 10, 10, 0, tzinfo=UTC),
        updated_at=datetime(2024, 10, 14, 9, 0, tzinfo=UTC),
        source=ChartSource.CATALOG,
        thumbnail="📈",
        config={
            "type": "line",
            "options": {
                "responsive": True,
                "scales": {"y": {"beginAtZero": True}},
                "plugins": {
                    "title": {"display": True, "text": "Campaign Performance Timeline"},
                    "legend": {"position": "top"},
                },
            },
        },
        data_requirements=DataRequirements(
            required=["date", "metric_value"],
            optional=["campaign_name", "metric_type"],
            min_data_points=5,
            max_data_points=365,
            data_types={
                "date": DataType.DATE,
                "metric_value": DataType.NUMBER,
                "campaign_name": DataType.STRING,
                "metric_type": DataType.STRING,
            },
        ),
        sample_data=SampleData(
            labels=["Week 1", "Week 2", "Week 3", "Week 4", "Week 5", "Week 6"],
            datasets=[
                Dataset(label="Impressions", data=[12000, 15000, 18000, 22000, 19000, 25000], border_color="#3b82f6"),
                Dataset(label="Clicks", data=[480, 600, 720, 880, 760, 1000], border_color="#10b981"),
            ],
        ),
        use_cases=[
            "Campaign performance monitoring",
            "Trend identification",
            "Seasonal pattern analysis",
            "A/B test tracking",
        ],
    ),
]
