"""Chart Registry: FastAPI application entry point."""

import signal
import uuid
from contextlib import asynccontextmanager

# configure_structlog must run before the other package imports: structlog
# caches the processor chain on first use.
from chart_registry.core.logging import configure_structlog
from chart_registry.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from chart_registry.api.routes import api_router
from chart_registry.catalog.registry import get_catalog
from chart_registry.core.config import get_settings
from chart_registry.db import InMemoryChartStore, RedisChartStore, close_redis, init_redis
from chart_registry.middleware.correlation import get_correlation_id, setup_correlation_middleware
from chart_registry.services.registry_provider import RegistryProvider

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    app.state.shutting_down = False

    def handle_sigterm(signum, frame):
        app.state.shutting_down = True
        logger.info("sigterm_received", action="health_check_503_draining_connections")

    signal.signal(signal.SIGTERM, handle_sigterm)

    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    redis = await init_redis()
    if redis is not None:
        store = RedisChartStore(
            redis,
            key_prefix=settings.store_key_prefix,
            retry_attempts=settings.store_retry_attempts,
        )
        app.state.store_kind = "redis"
    else:
        store = InMemoryChartStore()
        app.state.store_kind = "memory"
        logger.warning("store_in_memory", reason="no_redis_url")
    logger.info("store_initialized", store=app.state.store_kind)

    app.state.registry_provider = RegistryProvider(
        store,
        get_catalog(),
        elevated_roles=settings.elevated_roles,
        generation_model=settings.generation_model,
    )

    yield

    logger.info("shutdown_begin", organizations=len(app.state.registry_provider.organization_ids))
    await close_redis()
    logger.info("shutdown_complete")


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Global exception handler for HTTPException with debug_id tracking.

    Logs server-side with full context, returns a sanitized response.
    """
    debug_id = str(uuid.uuid4())

    logger.error(
        "http_exception",
        status_code=exc.status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        detail=exc.detail,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "debug_id": debug_id},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled errors; generic 500 to the client."""
    debug_id = str(uuid.uuid4())

    logger.error(
        "unhandled_exception",
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "debug_id": debug_id},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Organizational chart content registry",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_correlation_middleware(app)

    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chart_registry.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
