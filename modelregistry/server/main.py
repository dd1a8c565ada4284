import logging
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from modelregistry.server.api.registry import router as registry_router
from modelregistry.server.core.cache import CatalogCache
from modelregistry.server.core.config import Settings, get_settings
from modelregistry.server.core.logging_setup import setup_logging
from modelregistry.server.core.scheduler import create_scheduler, start_scheduler, stop_scheduler
from modelregistry.server.discovery import OpenRouterCatalogSource, UpstreamFetchError

logger = logging.getLogger(__name__)


def build_cache(settings: Settings) -> CatalogCache:
    source = OpenRouterCatalogSource(
        url=settings.catalog_url,
        timeout=settings.fetch_timeout_seconds,
    )
    return CatalogCache(
        source,
        ttl_seconds=settings.cache_ttl_seconds,
        serve_stale_on_error=settings.serve_stale_on_error,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.catalog_cache = build_cache(settings)
    scheduler = create_scheduler(app.state.catalog_cache, settings.warm_refresh_minutes)
    start_scheduler(scheduler)
    yield
    stop_scheduler(scheduler)


app = FastAPI(title="AI Model Registry", version=get_settings().agent_version, lifespan=lifespan)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(registry_router)


@app.exception_handler(UpstreamFetchError)
async def upstream_fetch_error_handler(request: Request, exc: UpstreamFetchError) -> JSONResponse:
    logger.error("Request %s failed, model catalog unavailable: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": f"Model catalog unavailable: {exc.message}"},
    )


@app.get("/")
async def root() -> dict[str, str]:
    settings = get_settings()
    return {
        "name": settings.agent_name,
        "version": settings.agent_version,
        "description": settings.agent_description,
    }


@app.get("/health")
async def health(request: Request) -> dict[str, Any]:
    cache: CatalogCache | None = getattr(request.app.state, "catalog_cache", None)
    if cache is None:
        return {"status": "starting"}
    return {
        "status": "healthy",
        "cachedModels": cache.size,
        "stale": cache.is_stale,
        "fetchedAt": cache.fetched_at.isoformat() if cache.fetched_at else None,
    }


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("AI Model Registry agent running on port %d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
