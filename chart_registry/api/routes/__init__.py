from fastapi import APIRouter

from chart_registry.api.routes import catalog, charts, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(catalog.router, prefix="/charts/catalog", tags=["catalog"])
api_router.include_router(charts.router, prefix="/charts", tags=["charts"])
