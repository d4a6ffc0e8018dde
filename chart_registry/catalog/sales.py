"""Built-in sales chart templates."""

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

SALES_TEMPLATES: list[ChartTemplate] = [
    ChartTemplate(
        id="sales-revenue-trend",
        name="Revenue Trend Analysis",
        description="Track revenue growth over time with trend indicators and forecasting",
        category=ChartCategory.SALES,
        chart_type=ChartType.LINE,
        tags=["revenue", "growth", "trend", "forecasting"],
        author="Chart Registry Team",
        rating=4.8,
        downloads=1247,
        featured=True,
        created_at=datetime(2024, 1, 15, 10, 0, tzinfo=UTC),
        updated_at=datetime(2024, 10, 15, 14, 30, tzinfo=UTC),
        source=ChartSource.CATALOG,
        thumbnail="📈",
        config={
            "type": "line",
            "options": {
                "responsive": True,
                "interaction": {"mode": "index", "intersect": False},
                "scales": {
                    "x": {"display": True, "title": {"display": True, "text": "Time Period"}},
                    "y": {"display": True, "beginAtZero": True, "title": {"display": True, "text": "Revenue ($)"}},
                },
                "plugins": {
                    "title": {"display": True, "text": "Revenue Trend Analysis"},
                    "legend": {"display": True, "position": "top"},
                },
            },
        },
        data_requirements=DataRequirements(
            required=["date", "revenue"],
            optional=["forecast", "target"],
            min_data_points=3,
            max_data_points=365,
            data_types={
                "date": DataType.DATE,
                "revenue": DataType.NUMBER,
                "forecast": DataType.NUMBER,
                "target": DataType.NUMBER,
            },
        ),
        sample_data=SampleData(
            labels=["Jan", "Feb", "Mar", "Apr", "May", "Jun"],
            datasets=[
                Dataset(
                    label="Actual Revenue",
                    data=[65000, 78000, 82000, 95000, 88000, 105000],
                    border_color="#3b82f6",
                    background_color="rgba(59, 130, 246, 0.1)",
                    fill=True,
                ),
                Dataset(
                    label="Target Revenue",
                    data=[70000, 75000, 80000, 90000, 95000, 100000],
                    border_color="#10b981",
                    background_color="transparent",
                ),
            ],
        ),
        use_cases=[
            "Monthly/Quarterly revenue tracking",
            "Sales performance analysis",
            "Revenue forecasting",
            "Target vs actual comparison",
        ],
    ),
    ChartTemplate(
        id="sales-pipeline-funnel",
        name="Sales Pipeline Funnel",
        description="Visualize lead progression through sales stages with conversion rates",
        category=ChartCategory.SALES,
        chart_type=ChartType.FUNNEL,
        tags=["pipeline", "conversion", "funnel", "stages"],
        author="Chart Registry Team",
        rating=4.7,
        downloads=892,
        featured=True,
        created_at=datetime(2024, 2, 10, 10, 0, tzinfo=UTC),
        updated_at=datetime(2024, 10, 15, 14, 30, tzinfo=UTC),
        source=ChartSource.CATALOG,
        thumbnail="🛒",
        config={
            "type": "bar",
            "options": {
                "indexAxis": "y",
                "responsive": True,
                "plugins": {
                    "title": {"display": True, "text": "Sales Pipeline Funnel"},
                    "legend": {"display": False},
                },
            },
        },
        data_requirements=DataRequirements(
            required=["stage", "count"],
            optional=["conversion_rate"],
            min_data_points=3,
            max_data_points=10,
            data_types={
                "stage": DataType.STRING,
                "count": DataType.NUMBER,
                "conversion_rate": DataType.NUMBER,
            },
        ),
        sample_data=SampleData(
            labels=["Leads", "Qualified", "Proposal", "Negotiation", "Closed Won"],
            datasets=[
                Dataset(
                    label="Lead Count",
                    data=[1000, 450, 200, 120, 85],
                    background_color=["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6"],
                ),
            ],
        ),
        use_cases=[
            "Sales pipeline analysis",
            "Conversion rate tracking",
            "Bottleneck identification",
            "Team performance evaluation",
        ],
    ),
    ChartTemplate(
        id="sales-rep-performance",
        name="Sales Rep Performance",
        description="Compare individual sales representative performance metrics",
        category=ChartCategory.SALES,
        chart_type=ChartType.BAR,
        tags=["performance", "team", "comparison", "kpi"],
        author="Chart Registry Team",
        rating=4.6,
        downloads=723,
        featured=False,
        created_at=datetime(2024, 3, 5, 10, 0, tzinfo=UTC),
        updated_at=datetime(2024, 10, 15, 14, 30, tzinfo=UTC),
        source=ChartSource.CATALOG,
        thumbnail="📊",
        config={
            "type": "bar",
            "options": {
                "responsive": True,
                "scales": {"y": {"beginAtZero": True}},
                "plugins": {
                    "title": {"display": True, "text": "Sales Rep Performance"},
                    "legend": {"position": "top"},
                },
            },
        },
        data_requirements=DataRequirements(
            required=["rep_name", "revenue", "deals_closed"],
            optional=["calls_made", "emails_sent", "meetings_booked"],
            min_data_points=2,
            max_data_points=50,
            data_types={
                "rep_name": DataType.STRING,
                "revenue": DataType.NUMBER,
                "deals_closed": DataType.NUMBER,
                "calls_made": DataType.NUMBER,
                "emails_sent": DataType.NUMBER,
                "meetings_booked": DataType.NUMBER,
            },
        ),
        sample_data=SampleData(
            labels=["Alice Johnson", "Bob Smith", "Carol Davis", "David Lee", "Eva Wilson"],
            datasets=[
                Dataset(label="Revenue ($)", data=[125000, 98000, 156000, 87000, 143000], background_color="#3b82f6"),
                Dataset(label="Deals Closed", data=[12, 8, 15, 7, 14], background_color="#10b981"),
            ],
        ),
        use_cases=[
            "Individual performance tracking",
            "Team comparison and ranking",
            "Goal achievement monitoring",
            "Compensation planning",
        ],
    ),
]
