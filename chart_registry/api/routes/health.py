import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from chart_registry.db.redis import get_redis

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Liveness check for the load balancer.

    Returns 503 during graceful shutdown so traffic drains away.
    """
    if getattr(request.app.state, "shutting_down", False):
        return JSONResponse(
            status_code=503,
            content={"status": "shutting_down", "service": "chart-registry"},
        )
    return {"status": "healthy", "service": "chart-registry"}


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness check: verifies the chart store is reachable."""
    store_kind = getattr(request.app.state, "store_kind", "memory")
    checks = {"store": store_kind == "memory"}

    if store_kind == "redis":
        try:
            await get_redis().ping()
            checks["store"] = True
        except (RedisError, RuntimeError) as e:
            logger.error("store_health_check_failed", error=str(e))

    all_healthy = all(checks.values())
    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={"status": "ready" if all_healthy else "degraded", "store": store_kind, "checks": checks},
    )
