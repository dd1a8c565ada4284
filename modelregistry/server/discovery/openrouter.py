"""OpenRouter catalog source adapter.

Reads the public model list from OpenRouter's /api/v1/models endpoint.
Ref: https://openrouter.ai/docs/api-reference/list-available-models
"""

import logging

import httpx

from modelregistry.server.discovery.base import ModelRecord, UpstreamFetchError, parse_catalog

logger = logging.getLogger(__name__)

OPENROUTER_MODELS_URL = "https://openrouter.ai/api/v1/models"


class OpenRouterCatalogSource:
    """Catalog source backed by the OpenRouter models endpoint.

    No authentication is needed for the model list. Unlike the provider
    discovery adapters, failures are raised rather than turned into an empty
    list so the cache can tell "no models" from "upstream down".
    """

    def __init__(self, url: str = OPENROUTER_MODELS_URL, timeout: float = 30.0) -> None:
        """Initialize OpenRouter catalog source.

        Args:
            url: Full URL of the models endpoint.
            timeout: HTTP request timeout in seconds.
        """
        self.url = url
        self.timeout = timeout

    async def fetch_models(self) -> list[ModelRecord]:
        """Fetch and validate the full catalog.

        Returns:
            Validated model records in upstream order.

        Raises:
            UpstreamFetchError: On HTTP error status, transport failure or an
                unparseable body.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "HTTP error fetching model catalog from %s: %s %s",
                self.url,
                e.response.status_code,
                e.response.text[:200] if e.response.text else "",
            )
            raise UpstreamFetchError(
                f"OpenRouter API error: {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.error("Request error fetching model catalog from %s: %s", self.url, str(e))
            raise UpstreamFetchError(f"OpenRouter API unreachable: {e}") from e
        except ValueError as e:
            logger.error("Invalid JSON in model catalog from %s: %s", self.url, str(e))
            raise UpstreamFetchError("OpenRouter API returned invalid JSON") from e

        models = parse_catalog(data)
        logger.info("Fetched %d models from %s", len(models), self.url)
        return models
