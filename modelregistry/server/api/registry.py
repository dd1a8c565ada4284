"""Model registry API endpoints.

Each operation reads the (possibly refreshed) catalog from the cache, runs the
matching query, and reports its fixed per-call price in a response header.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from modelregistry.schemas.registry import (
    CompareRequest,
    CompareResponse,
    EntrypointInfo,
    EntrypointListResponse,
    LookupRequest,
    LookupResponse,
    OverviewResponse,
    ReportRequest,
    ReportResponse,
    SearchRequest,
    SearchResponse,
    TopRequest,
    TopResponse,
)
from modelregistry.server.core import query
from modelregistry.server.core.cache import CatalogCache
from modelregistry.server.core.entrypoints import ENTRYPOINTS, PRICE_HEADER, get_entrypoint

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/registry", tags=["registry"])


def get_catalog_cache(request: Request) -> CatalogCache:
    """Return the cache created in the app lifespan."""
    return request.app.state.catalog_cache


def _charge(response: Response, key: str) -> None:
    price = get_entrypoint(key).price
    response.headers[PRICE_HEADER] = str(price)
    logger.debug("Entrypoint %s served (price %d)", key, price)


@router.get("/entrypoints", response_model=EntrypointListResponse)
async def list_entrypoints() -> EntrypointListResponse:
    """List every operation with its description and per-call price."""
    items = [
        EntrypointInfo(key=spec.key, description=spec.description, price=spec.price, free=spec.free)
        for spec in ENTRYPOINTS.values()
    ]
    return EntrypointListResponse(items=items, total=len(items))


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(
    response: Response,
    cache: CatalogCache = Depends(get_catalog_cache),
) -> OverviewResponse:
    """Free overview of the registry: totals, providers and modalities."""
    models = await cache.get_catalog()
    _charge(response, "overview")
    return query.overview(models, cache.fetched_at)


@router.post("/lookup", response_model=LookupResponse)
async def lookup_model(
    body: LookupRequest,
    response: Response,
    cache: CatalogCache = Depends(get_catalog_cache),
) -> LookupResponse:
    """Look up a model by exact id, falling back to a partial id or name match."""
    models = await cache.get_catalog()
    _charge(response, "lookup")
    return query.lookup(models, body.model_id)


@router.post("/search", response_model=SearchResponse)
async def search_models(
    body: SearchRequest,
    response: Response,
    cache: CatalogCache = Depends(get_catalog_cache),
) -> SearchResponse:
    """Search models by text, modality, context length and price."""
    models = await cache.get_catalog()
    _charge(response, "search")
    return query.search(
        models,
        query=body.query,
        modality=body.modality,
        min_context=body.min_context,
        max_price=body.max_price,
        free_only=body.free_only,
        limit=body.limit,
    )


@router.post("/top", response_model=TopResponse)
async def top_models(
    body: TopRequest,
    response: Response,
    cache: CatalogCache = Depends(get_catalog_cache),
) -> TopResponse:
    """Rank models by cheapest, longest context, newest, or free."""
    models = await cache.get_catalog()
    _charge(response, "top")
    return query.top(models, metric=body.metric, modality=body.modality, limit=body.limit)


@router.post("/compare", response_model=CompareResponse)
async def compare_models(
    body: CompareRequest,
    response: Response,
    cache: CatalogCache = Depends(get_catalog_cache),
) -> CompareResponse:
    """Compare two to five models side by side."""
    models = await cache.get_catalog()
    _charge(response, "compare")
    return query.compare(models, body.model_ids)


@router.post("/report", response_model=ReportResponse)
async def model_report(
    body: ReportRequest,
    response: Response,
    cache: CatalogCache = Depends(get_catalog_cache),
) -> ReportResponse:
    """Full report: pricing analysis and cross-provider alternatives."""
    models = await cache.get_catalog()
    _charge(response, "report")
    return query.report(models, body.model_id)
