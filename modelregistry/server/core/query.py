"""Query engine over the cached model catalog.

Every operation is a pure function of (catalog, parameters). None of them
mutate the catalog list or its records; sorting always works on a copy.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Sequence

from modelregistry.schemas.registry import (
    Alternative,
    CompareInsights,
    CompareResponse,
    ComparedModel,
    EndpointGroups,
    LookupResponse,
    ModalityBucket,
    ModelDetail,
    OverviewResponse,
    PricingAnalysis,
    RankedModel,
    ReportResponse,
    SearchFilters,
    SearchResponse,
    SearchResult,
    TopMetric,
    TopResponse,
)
from modelregistry.server.core.entrypoints import free_entrypoints, paid_entrypoints
from modelregistry.server.core.pricing import (
    completion_price,
    estimate_cost,
    per_million,
    price_of,
    pricing_tier,
    prompt_price,
)
from modelregistry.server.discovery.base import ModelRecord

DATA_SOURCE = "OpenRouter API (live)"
LOOKUP_SUGGESTION = "Try /search endpoint for broader search"
LOOKUP_DESCRIPTION_LIMIT = 500
MAX_ALTERNATIVES = 5


def _iso(moment: datetime | None) -> str | None:
    if moment is None:
        return None
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _iso_from_epoch(seconds: int | None) -> str | None:
    if not seconds:
        return None
    try:
        return _iso(datetime.fromtimestamp(seconds, tz=timezone.utc))
    except (OverflowError, OSError, ValueError):
        return None


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def _dump(block: Any) -> dict[str, Any] | None:
    """Dump an architecture/pricing block as upstream sent it."""
    if block is None:
        return None
    sent = block.model_fields_set | set(block.model_extra or {})
    return {key: value for key, value in block.model_dump().items() if key in sent}


def _raw_modality(model: ModelRecord) -> str | None:
    return model.architecture.modality if model.architecture else None


def matches_bucket(model: ModelRecord, bucket: ModalityBucket) -> bool:
    """Return True if the model's modality string falls in the bucket."""
    if bucket is ModalityBucket.ALL:
        return True
    modality = _raw_modality(model) or ""
    if bucket is ModalityBucket.MULTIMODAL:
        return "+" in modality
    if bucket is ModalityBucket.TEXT:
        return "+" not in modality
    return "image" in modality


def find_model(catalog: Sequence[ModelRecord], query: str) -> ModelRecord | None:
    """Resolve a model id or partial name.

    Case-insensitive exact id match wins; otherwise the first record in
    catalog order whose id or name contains the query.
    """
    q = query.lower()
    for model in catalog:
        if model.id.lower() == q:
            return model
    for model in catalog:
        if q in model.id.lower() or (model.name is not None and q in model.name.lower()):
            return model
    return None


def _detail(model: ModelRecord, description_limit: int | None = None) -> ModelDetail:
    description = model.description
    if description is not None and description_limit is not None:
        description = description[:description_limit]
    return ModelDetail(
        id=model.id,
        name=model.name,
        description=description,
        provider=model.provider,
        context_length=model.context_length,
        architecture=_dump(model.architecture),
        pricing=_dump(model.pricing),
        supported_parameters=list(model.supported_parameters),
        created=_iso_from_epoch(model.created),
    )


def overview(catalog: Sequence[ModelRecord], fetched_at: datetime | None = None) -> OverviewResponse:
    """Aggregate counts over the full catalog."""
    providers: set[str] = set()
    modalities: dict[str, int] = {}
    free_models = 0
    total_context = 0

    for model in catalog:
        providers.add(model.provider)
        modalities[model.modality] = modalities.get(model.modality, 0) + 1
        if price_of(model) == 0:
            free_models += 1
        total_context += model.context_tokens

    total = len(catalog)
    average = _round_half_up(total_context / total) if total else 0

    return OverviewResponse(
        total_models=total,
        providers=sorted(providers),
        provider_count=len(providers),
        free_models=free_models,
        paid_models=total - free_models,
        average_context_length=average,
        modalities=modalities,
        data_source=DATA_SOURCE,
        fetched_at=_iso(fetched_at),
        endpoints=EndpointGroups(free=free_entrypoints(), paid=paid_entrypoints()),
    )


def lookup(catalog: Sequence[ModelRecord], model_id: str) -> LookupResponse:
    """Look up one model. Not found is a normal ``found=False`` result."""
    model = find_model(catalog, model_id)
    if model is None:
        return LookupResponse(found=False, query=model_id.lower(), suggestion=LOOKUP_SUGGESTION)
    return LookupResponse(found=True, model=_detail(model, LOOKUP_DESCRIPTION_LIMIT))


def search(
    catalog: Sequence[ModelRecord],
    query: str | None = None,
    modality: ModalityBucket = ModalityBucket.ALL,
    min_context: int | None = None,
    max_price: float | None = None,
    free_only: bool = False,
    limit: int = 20,
) -> SearchResponse:
    """Filter the catalog and return matches, longest context first.

    Args:
        catalog: Cached catalog.
        query: Case-insensitive substring matched against id, name and description.
        modality: Modality bucket.
        min_context: Minimum context length in tokens.
        max_price: Maximum derived price per 1M tokens.
        free_only: Keep only models with a derived price of 0.
        limit: Maximum number of models returned.

    Returns:
        Matches sorted by context length descending. Ties keep catalog order.
    """
    q = query.lower() if query else None

    def keep(model: ModelRecord) -> bool:
        if q is not None:
            haystacks = (model.id, model.name or "", model.description or "")
            if not any(q in text.lower() for text in haystacks):
                return False
        if not matches_bucket(model, modality):
            return False
        if min_context and model.context_tokens < min_context:
            return False
        price = price_of(model)
        if free_only and price > 0:
            return False
        if max_price is not None and per_million(price) > max_price:
            return False
        return True

    matches = sorted(
        (model for model in catalog if keep(model)),
        key=lambda model: model.context_tokens,
        reverse=True,
    )
    page = matches[:limit]

    return SearchResponse(
        total_matches=len(matches),
        returned=len(page),
        filters=SearchFilters(
            query=query,
            modality=modality,
            min_context=min_context,
            max_price=max_price,
            free_only=free_only,
        ),
        models=[
            SearchResult(
                id=model.id,
                name=model.name,
                context_length=model.context_length,
                pricing=_dump(model.pricing),
                modality=_raw_modality(model),
            )
            for model in page
        ],
    )


def top(
    catalog: Sequence[ModelRecord],
    metric: TopMetric,
    modality: ModalityBucket = ModalityBucket.ALL,
    limit: int = 10,
) -> TopResponse:
    """Rank models by a metric.

    - cheapest: paid models only, lowest derived price first
    - longest-context: largest context window first
    - newest: most recent ``created`` first, undated models last
    - free: free models only, in catalog order
    """
    candidates = [model for model in catalog if matches_bucket(model, modality)]

    if metric is TopMetric.CHEAPEST:
        ranked = sorted((m for m in candidates if price_of(m) > 0), key=price_of)
    elif metric is TopMetric.LONGEST_CONTEXT:
        ranked = sorted(candidates, key=lambda m: m.context_tokens, reverse=True)
    elif metric is TopMetric.NEWEST:
        ranked = sorted(candidates, key=lambda m: m.created or 0, reverse=True)
    else:
        ranked = [m for m in candidates if price_of(m) == 0]

    page = ranked[:limit]
    return TopResponse(
        metric=metric,
        modality=modality,
        count=len(page),
        models=[
            RankedModel(
                rank=rank,
                id=model.id,
                name=model.name,
                context_length=model.context_length,
                pricing=_dump(model.pricing),
                created=_iso_from_epoch(model.created),
            )
            for rank, model in enumerate(page, start=1)
        ],
    )


def compare(catalog: Sequence[ModelRecord], model_ids: Sequence[str]) -> CompareResponse:
    """Compare models side by side.

    Each id is resolved on its own, so duplicates count twice. On an exact
    tie for cheapest or longest context the earlier model wins.
    """
    found: list[ModelRecord] = []
    not_found: list[str] = []
    for model_id in model_ids:
        model = find_model(catalog, model_id)
        if model is None:
            not_found.append(model_id)
        else:
            found.append(model)

    insights = CompareInsights()
    if found:
        # min/max return the first extreme element
        cheapest = min(found, key=price_of)
        longest = max(found, key=lambda m: m.context_tokens)
        insights = CompareInsights(
            cheapest=cheapest.id,
            longest_context=longest.id,
            longest_context_tokens=longest.context_length,
        )

    return CompareResponse(
        compared=len(found),
        not_found=not_found,
        models=[
            ComparedModel(
                id=model.id,
                name=model.name,
                provider=model.provider,
                context_length=model.context_length,
                pricing=_dump(model.pricing),
                modality=_raw_modality(model),
                input_modalities=model.architecture.input_modalities if model.architecture else None,
                supported_parameters=len(model.supported_parameters),
            )
            for model in found
        ],
        insights=insights,
    )


def report(
    catalog: Sequence[ModelRecord],
    model_id: str,
    now: datetime | None = None,
) -> ReportResponse:
    """Build a pricing report with cross-provider alternatives."""
    model = find_model(catalog, model_id)
    if model is None:
        return ReportResponse(found=False, query=model_id.lower())

    price = price_of(model)
    alternatives = sorted(
        (
            (candidate, price_of(candidate) - price)
            for candidate in catalog
            if candidate.id != model.id
            and candidate.provider != model.provider
            and candidate.modality == model.modality
        ),
        key=lambda pair: abs(pair[1]),
    )[:MAX_ALTERNATIVES]

    return ReportResponse(
        found=True,
        model=_detail(model),
        pricing_analysis=PricingAnalysis(
            prompt_per_million=per_million(prompt_price(model)),
            completion_per_million=per_million(completion_price(model)),
            estimated_cost_per_1k_requests=f"{estimate_cost(model):.4f}",
            tier=pricing_tier(price).value,
        ),
        alternatives=[
            Alternative(
                id=candidate.id,
                name=candidate.name,
                context_length=candidate.context_length,
                pricing=_dump(candidate.pricing),
                cheaper=diff < 0,
            )
            for candidate, diff in alternatives
        ],
        generated_at=_iso(now or datetime.now(timezone.utc)),
    )
