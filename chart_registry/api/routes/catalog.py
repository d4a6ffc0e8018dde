"""Read-only template catalog routes.

The catalog is the same for every organization, so these routes only need a
caller, not an organization registry.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from chart_registry.catalog.registry import SearchFilters, TemplateCatalog, get_catalog
from chart_registry.core.auth import ViewerContext, require_viewer
from chart_registry.schemas.charts import ChartCategory, ChartTemplate, ChartType, LibraryCategory

router = APIRouter()


@router.get("/categories", response_model=list[LibraryCategory])
async def list_categories(
    viewer: ViewerContext = Depends(require_viewer),
    catalog: TemplateCatalog = Depends(get_catalog),
):
    return catalog.get_categories()


@router.get("/search", response_model=list[ChartTemplate])
async def search_templates(
    q: str | None = Query(None, description="Case-insensitive match on name, description and tags"),
    category: ChartCategory | None = None,
    chart_type: ChartType | None = None,
    tags: list[str] | None = Query(None),
    min_rating: float | None = Query(None, ge=0.0, le=5.0),
    viewer: ViewerContext = Depends(require_viewer),
    catalog: TemplateCatalog = Depends(get_catalog),
):
    filters = SearchFilters(query=q, category=category, chart_type=chart_type, tags=tags or [], min_rating=min_rating)
    return catalog.search(filters)


@router.get("/featured", response_model=list[ChartTemplate])
async def featured_templates(
    viewer: ViewerContext = Depends(require_viewer),
    catalog: TemplateCatalog = Depends(get_catalog),
):
    return catalog.get_featured()


@router.get("/popular", response_model=list[ChartTemplate])
async def popular_templates(
    viewer: ViewerContext = Depends(require_viewer),
    catalog: TemplateCatalog = Depends(get_catalog),
):
    return catalog.get_popular()


@router.get("/recent", response_model=list[ChartTemplate])
async def recent_templates(
    viewer: ViewerContext = Depends(require_viewer),
    catalog: TemplateCatalog = Depends(get_catalog),
):
    return catalog.get_recent()


@router.get("/{template_id}", response_model=ChartTemplate)
async def get_template(
    template_id: str,
    viewer: ViewerContext = Depends(require_viewer),
    catalog: TemplateCatalog = Depends(get_catalog),
):
    template = catalog.get_template_by_id(template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return template
