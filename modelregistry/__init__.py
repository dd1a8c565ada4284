"""AI Model Registry - query, rank and compare AI models from the OpenRouter catalog."""

from modelregistry.client import AsyncModelRegistryClient, ModelRegistryClient
from modelregistry.exceptions import (
    APIConnectionError,
    APIError,
    APIStatusError,
    APITimeoutError,
    BadRequestError,
    InternalServerError,
    ModelRegistryError,
    NotFoundError,
    RateLimitError,
    UnprocessableEntityError,
    UpstreamUnavailableError,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "ModelRegistryClient",
    "AsyncModelRegistryClient",
    "ModelRegistryError",
    "APIError",
    "APIStatusError",
    "APIConnectionError",
    "APITimeoutError",
    "BadRequestError",
    "InternalServerError",
    "NotFoundError",
    "RateLimitError",
    "UnprocessableEntityError",
    "UpstreamUnavailableError",
]
