"""Pydantic schemas for chart templates and their organizational wrapper.

Closed vocabularies (chart type, category, source, visibility, approval
status) are StrEnums so the stored JSON stays human-readable while the
Python side never handles open strings.

Two layers:
- ChartTemplate: an immutable chart definition (catalog entry or generated)
- OrganizationalChart: ChartTemplate + ownership, visibility, moderation,
  usage and version history for one organization
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChartType(StrEnum):
    """Chart shapes understood by the rendering layer."""

    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    DOUGHNUT = "doughnut"
    SCATTER = "scatter"
    RADAR = "radar"
    AREA = "area"
    BUBBLE = "bubble"
    POLAR_AREA = "polarArea"
    FUNNEL = "funnel"


class ChartCategory(StrEnum):
    """Business categories charts are filed under."""

    SALES = "sales"
    MARKETING = "marketing"
    ANALYTICS = "analytics"
    FINANCE = "finance"
    OPERATIONS = "operations"


class ChartSource(StrEnum):
    """Where a chart came from."""

    CATALOG = "catalog"
    GENERATED = "generated"
    CUSTOM = "custom"
    ORGANIZATION = "organization"


class Visibility(StrEnum):
    """Coarse sharing tier; seeds the default permission grants."""

    PRIVATE = "private"
    TEAM = "team"
    ORGANIZATION = "organization"
    PUBLIC = "public"


class ApprovalStatus(StrEnum):
    """Moderation lifecycle stage."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalAction(StrEnum):
    """Reviewer decisions accepted by process_approval."""

    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_CHANGES = "request_changes"


class DataType(StrEnum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"


# ==================== CHART DEFINITION ====================


class Dataset(BaseModel):
    """One data series inside SampleData."""

    label: str
    data: list[float]
    background_color: str | list[str] | None = None
    border_color: str | None = None
    border_width: int | None = None
    fill: bool = False


class SampleData(BaseModel):
    labels: list[str] = Field(default_factory=list)
    datasets: list[Dataset] = Field(default_factory=list)


class DataRequirements(BaseModel):
    """Fields a chart needs from the caller's data, with cardinality bounds."""

    required: list[str]
    optional: list[str] = Field(default_factory=list)
    min_data_points: int = 2
    max_data_points: int = 1000
    data_types: dict[str, DataType] = Field(default_factory=dict)


class ChartTemplate(BaseModel):
    """Immutable chart definition.

    A new version of a chart is a new snapshot (see ChartVersion), never an
    in-place mutation of this object.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    category: ChartCategory
    chart_type: ChartType
    tags: list[str] = Field(default_factory=list)
    author: str = "Chart Registry"
    version: str = "1.0.0"
    rating: float = 0.0
    downloads: int = 0
    featured: bool = False
    created_at: datetime
    updated_at: datetime
    source: ChartSource = ChartSource.CATALOG
    thumbnail: str = ""
    config: dict[str, Any] = Field(default_factory=dict)
    data_requirements: DataRequirements
    sample_data: SampleData
    use_cases: list[str] = Field(default_factory=list)


# ==================== ORGANIZATIONAL METADATA ====================


class GenerationMetadata(BaseModel):
    """Provenance of a generated chart (present only when source = generated)."""

    original_prompt: str
    model: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    generated_at: datetime
    generation_time_ms: int = 0
    iterations: int = 1


class ChartPermissions(BaseModel):
    """Grant sets; entries are viewer ids or role names."""

    can_view: list[str] = Field(default_factory=list)
    can_use: list[str] = Field(default_factory=list)
    can_modify: list[str] = Field(default_factory=list)
    can_approve: list[str] = Field(default_factory=list)


class UsageEvent(BaseModel):
    user_id: str
    action: str
    timestamp: datetime


class UsageRecord(BaseModel):
    total_installs: int = 0
    unique_users: int = 0
    last_used: datetime | None = None
    usage_history: list[UsageEvent] = Field(default_factory=list)


class ChartVersion(BaseModel):
    """Append-only history entry; the last entry is the current definition."""

    model_config = ConfigDict(frozen=True)

    version: str
    created_at: datetime
    created_by: str
    change_description: str
    config_snapshot: dict[str, Any] = Field(default_factory=dict)
    data_snapshot: SampleData = Field(default_factory=SampleData)


class QualityScore(BaseModel):
    data_accuracy: int = Field(0, ge=0, le=100)
    visual_clarity: int = Field(0, ge=0, le=100)
    business_value: int = Field(0, ge=0, le=100)
    user_rating: float = 0.0
    review_count: int = 0


class OrganizationalChart(BaseModel):
    """A chart owned by one organization, with moderation and history.

    Field-for-field superset of ChartTemplate so the rendering layer can
    consume either.
    """

    # Chart definition (current version)
    id: str
    name: str
    description: str
    category: ChartCategory
    chart_type: ChartType
    tags: list[str] = Field(default_factory=list)
    author: str = "Chart Registry"
    version: str = "1.0.0"
    rating: float = 0.0
    downloads: int = 0
    featured: bool = False
    created_at: datetime
    updated_at: datetime
    source: ChartSource
    thumbnail: str = ""
    config: dict[str, Any] = Field(default_factory=dict)
    data_requirements: DataRequirements
    sample_data: SampleData
    use_cases: list[str] = Field(default_factory=list)

    # Organizational context
    organization_id: str
    tenant_id: str

    # Creator
    created_by: str
    creator_name: str = ""
    creator_email: str = ""
    creator_role: str = ""

    generation: GenerationMetadata | None = None

    # Sharing and moderation
    visibility: Visibility
    approval_status: ApprovalStatus
    rejection_reason: str | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None

    permissions: ChartPermissions = Field(default_factory=ChartPermissions)
    usage: UsageRecord = Field(default_factory=UsageRecord)
    versions: list[ChartVersion] = Field(default_factory=list)
    quality: QualityScore = Field(default_factory=QualityScore)

    @property
    def current_version(self) -> ChartVersion | None:
        return self.versions[-1] if self.versions else None


# ==================== REQUESTS ====================


class GenerationOptions(BaseModel):
    save_to_organization: bool = False
    visibility: Visibility = Visibility.TEAM
    request_approval: bool = True


class GenerateChartRequest(BaseModel):
    """Free-text chart request from a viewer."""

    prompt: str = Field(..., description="What the viewer wants to see")
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class CreatorInfo(BaseModel):
    name: str = ""
    email: str = ""
    role: str = ""


class ApprovalRequest(BaseModel):
    chart_id: str
    action: ApprovalAction
    reason: str | None = Field(None, description="Stored as rejection reason on reject")
    reviewer_notes: str | None = None


class ApprovalDecision(BaseModel):
    """Body of the approval endpoint; chart_id comes from the path."""

    action: ApprovalAction
    reason: str | None = None
    reviewer_notes: str | None = None


class ChartUpdateRequest(BaseModel):
    change_description: str
    name: str | None = None
    description: str | None = None
    config: dict[str, Any] | None = None
    sample_data: SampleData | None = None


class UsageRequest(BaseModel):
    action: str = "install"


# ==================== RESULTS ====================


class Classification(BaseModel):
    """Output of the heuristic prompt classifier."""

    model_config = ConfigDict(frozen=True)

    chart_type: ChartType
    category: ChartCategory
    confidence: float
    keywords: list[str] = Field(default_factory=list)
    data_hints: list[str] = Field(default_factory=list)


class GenerationResult(BaseModel):
    """Outcome of a generation request. Check `success` before using `chart`."""

    success: bool
    chart: OrganizationalChart | ChartTemplate | None = None
    suggestions: list[ChartTemplate] = Field(default_factory=list)
    error: str | None = None


class TopCreator(BaseModel):
    user_id: str
    user_name: str
    chart_count: int
    total_usage: int


class LibraryStats(BaseModel):
    total_count: int = 0
    generated_count: int = 0
    approved_count: int = 0
    pending_count: int = 0
    rejected_count: int = 0
    most_used: list[OrganizationalChart] = Field(default_factory=list)
    top_creators: list[TopCreator] = Field(default_factory=list)


class LibraryCategory(BaseModel):
    id: str
    name: str
    description: str
    icon: str = ""
    color: str = ""
    templates: list[OrganizationalChart | ChartTemplate] = Field(default_factory=list)


class OrganizationalLibrary(BaseModel):
    """Role-aware view of an organization's charts for one viewer."""

    categories: list[LibraryCategory]
    featured: list[ChartTemplate] = Field(default_factory=list)
    popular: list[ChartTemplate] = Field(default_factory=list)
    recent: list[ChartTemplate] = Field(default_factory=list)
    generated_charts: list[OrganizationalChart] = Field(default_factory=list)
    pending_approval: list[OrganizationalChart] = Field(default_factory=list)
    my_charts: list[OrganizationalChart] = Field(default_factory=list)
    team_charts: list[OrganizationalChart] = Field(default_factory=list)
    stats: LibraryStats = Field(default_factory=LibraryStats)

    def unique_charts(self) -> list[OrganizationalChart]:
        """Union of the four viewer subsets, each chart id at most once."""
        seen: set[str] = set()
        merged = []
        for chart in [*self.generated_charts, *self.pending_approval, *self.my_charts, *self.team_charts]:
            if chart.id not in seen:
                seen.add(chart.id)
                merged.append(chart)
        return merged
