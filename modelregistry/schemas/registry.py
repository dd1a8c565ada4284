"""Pydantic schemas for the model registry API.

Field names are snake_case in Python and camelCase on the wire.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )


class ModalityBucket(str, Enum):
    """Modality filter buckets, matched against ``architecture.modality``.

    - ``multimodal``: modality string contains "+" (e.g. "text+image->text")
    - ``text``: modality string does not contain "+"
    - ``image``: modality string contains "image" (search only)
    - ``all``: no filter
    """

    TEXT = "text"
    IMAGE = "image"
    MULTIMODAL = "multimodal"
    ALL = "all"


class TopMetric(str, Enum):
    CHEAPEST = "cheapest"
    LONGEST_CONTEXT = "longest-context"
    NEWEST = "newest"
    FREE = "free"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class LookupRequest(_CamelModel):
    """Schema for looking up a single model."""

    model_id: str = Field(
        ...,
        min_length=1,
        description='Model ID like "openai/gpt-4o" or partial name like "gpt-4o"',
        examples=["openai/gpt-4o"],
    )


class SearchRequest(_CamelModel):
    """Schema for searching the catalog."""

    query: str | None = Field(
        None,
        description="Search term for model id, name or description",
        examples=["llama"],
    )
    modality: ModalityBucket = Field(ModalityBucket.ALL, description="Modality bucket filter")
    min_context: int | None = Field(
        None,
        ge=0,
        description="Minimum context length in tokens",
        examples=[128000],
    )
    max_price: float | None = Field(
        None,
        ge=0,
        description="Maximum price per 1M tokens (prompt + completion)",
        examples=[5.0],
    )
    free_only: bool = Field(False, description="Only return models with zero price")
    limit: int = Field(20, ge=1, le=1000, description="Maximum number of models to return")


class TopRequest(_CamelModel):
    """Schema for ranking models by a metric."""

    metric: TopMetric = Field(..., description="Ranking metric")
    modality: ModalityBucket = Field(
        ModalityBucket.ALL,
        description="Modality bucket filter (text, multimodal or all)",
    )
    limit: int = Field(10, ge=1, le=1000, description="Maximum number of models to return")

    @field_validator("modality")
    @classmethod
    def validate_modality(cls, v: ModalityBucket) -> ModalityBucket:
        """The image bucket is only available on search."""
        if v is ModalityBucket.IMAGE:
            raise ValueError("modality must be one of 'text', 'multimodal', 'all'")
        return v


class CompareRequest(_CamelModel):
    """Schema for comparing models side by side."""

    model_ids: list[str] = Field(
        ...,
        min_length=2,
        max_length=5,
        description="Array of model IDs to compare",
        examples=[["openai/gpt-4o", "anthropic/claude-3.5-sonnet"]],
    )


class ReportRequest(_CamelModel):
    """Schema for a full model report."""

    model_id: str = Field(..., min_length=1, description="Model ID to analyze")


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class EndpointGroups(_CamelModel):
    free: list[str] = Field(default_factory=list)
    paid: list[str] = Field(default_factory=list)


class OverviewResponse(_CamelModel):
    """Aggregate statistics over the whole catalog."""

    total_models: int = Field(..., description="Number of models in the catalog")
    providers: list[str] = Field(..., description="Sorted unique provider names")
    provider_count: int = Field(..., description="Number of unique providers")
    free_models: int = Field(..., description="Models with a derived price of 0")
    paid_models: int = Field(..., description="Models with a derived price above 0")
    average_context_length: int = Field(..., description="Mean context length, 0 when empty")
    modalities: dict[str, int] = Field(..., description="Model count per modality string")
    data_source: str = Field(..., description="Where the catalog comes from")
    fetched_at: str | None = Field(None, description="When the catalog snapshot was fetched")
    endpoints: EndpointGroups = Field(..., description="Free and paid operation names")


class ModelDetail(_CamelModel):
    """Full view of a single catalog record."""

    id: str
    name: str | None = None
    description: str | None = None
    provider: str
    context_length: int | None = None
    architecture: dict[str, Any] | None = None
    pricing: dict[str, Any] | None = None
    supported_parameters: list[str] = Field(default_factory=list)
    created: str | None = Field(None, description="Creation time, ISO-8601")


class LookupResponse(_CamelModel):
    found: bool
    model: ModelDetail | None = None
    query: str | None = None
    suggestion: str | None = None


class SearchFilters(_CamelModel):
    query: str | None = None
    modality: ModalityBucket = ModalityBucket.ALL
    min_context: int | None = None
    max_price: float | None = None
    free_only: bool = False


class SearchResult(_CamelModel):
    id: str
    name: str | None = None
    context_length: int | None = None
    pricing: dict[str, Any] | None = None
    modality: str | None = None


class SearchResponse(_CamelModel):
    total_matches: int = Field(..., description="Matches before the limit is applied")
    returned: int = Field(..., description="Number of models in this response")
    filters: SearchFilters
    models: list[SearchResult]


class RankedModel(_CamelModel):
    rank: int = Field(..., ge=1)
    id: str
    name: str | None = None
    context_length: int | None = None
    pricing: dict[str, Any] | None = None
    created: str | None = None


class TopResponse(_CamelModel):
    metric: TopMetric
    modality: ModalityBucket
    count: int
    models: list[RankedModel]


class ComparedModel(_CamelModel):
    id: str
    name: str | None = None
    provider: str
    context_length: int | None = None
    pricing: dict[str, Any] | None = None
    modality: str | None = None
    input_modalities: list[str] | None = None
    supported_parameters: int = Field(0, description="Number of supported parameters")


class CompareInsights(_CamelModel):
    cheapest: str | None = None
    longest_context: str | None = None
    longest_context_tokens: int | None = None


class CompareResponse(_CamelModel):
    compared: int = Field(..., description="Number of ids that resolved to a model")
    not_found: list[str] = Field(default_factory=list)
    models: list[ComparedModel]
    insights: CompareInsights


class PricingAnalysis(_CamelModel):
    prompt_per_million: float
    completion_per_million: float
    estimated_cost_per_1k_requests: str = Field(
        ...,
        alias="estimatedCostPer1kRequests",
        description="USD for 1,000 requests of 500 prompt + 500 completion tokens",
    )
    tier: str = Field(..., description="free, budget, standard or premium")


class Alternative(_CamelModel):
    id: str
    name: str | None = None
    context_length: int | None = None
    pricing: dict[str, Any] | None = None
    cheaper: bool


class ReportResponse(_CamelModel):
    found: bool
    query: str | None = None
    model: ModelDetail | None = None
    pricing_analysis: PricingAnalysis | None = None
    alternatives: list[Alternative] = Field(default_factory=list)
    generated_at: str | None = None


class EntrypointInfo(_CamelModel):
    key: str
    description: str
    price: int = Field(..., ge=0, description="Fixed per-call charge in minor currency units")
    free: bool


class EntrypointListResponse(_CamelModel):
    items: list[EntrypointInfo]
    total: int
