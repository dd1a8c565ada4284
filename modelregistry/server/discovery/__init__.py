"""Upstream model catalog access.

This module provides the validated record type for catalog entries and the
adapter that fetches the catalog from OpenRouter.
"""

from modelregistry.server.discovery.base import (
    DEFAULT_MODALITY,
    Architecture,
    CatalogSource,
    ModelRecord,
    Pricing,
    UpstreamFetchError,
    parse_catalog,
)
from modelregistry.server.discovery.openrouter import (
    OPENROUTER_MODELS_URL,
    OpenRouterCatalogSource,
)

__all__ = [
    "DEFAULT_MODALITY",
    "OPENROUTER_MODELS_URL",
    "Architecture",
    "CatalogSource",
    "ModelRecord",
    "OpenRouterCatalogSource",
    "Pricing",
    "UpstreamFetchError",
    "parse_catalog",
]
