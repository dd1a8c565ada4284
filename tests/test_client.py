"""Tests for the model registry SDK client."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from modelregistry import (
    APIConnectionError,
    AsyncModelRegistryClient,
    ModelRegistryClient,
    UnprocessableEntityError,
    UpstreamUnavailableError,
)
from modelregistry.schemas.registry import ModalityBucket, TopMetric
from modelregistry.server.api.registry import get_catalog_cache
from modelregistry.server.core.cache import CatalogCache
from modelregistry.server.discovery.base import ModelRecord, parse_catalog
from modelregistry.server.main import app

CATALOG_PAYLOAD = [
    {
        "id": "openai/gpt-4o",
        "name": "OpenAI: GPT-4o",
        "context_length": 128000,
        "architecture": {"modality": "text+image->text"},
        "pricing": {"prompt": "0.000005", "completion": "0.000015"},
        "created": 1715558400,
    },
    {
        "id": "mistralai/mistral-7b-instruct",
        "name": "Mistral: Mistral 7B Instruct",
        "context_length": 32768,
        "architecture": {"modality": "text->text"},
        "pricing": {"prompt": "0.00000003", "completion": "0.00000005"},
        "created": 1716000000,
    },
]


class StaticSource:
    async def fetch_models(self) -> list[ModelRecord]:
        return parse_catalog(CATALOG_PAYLOAD)


@pytest.fixture
def registry_client():
    """SDK client talking to the in-process app."""
    cache = CatalogCache(StaticSource())
    app.dependency_overrides[get_catalog_cache] = lambda: cache
    with ModelRegistryClient(http_client=TestClient(app)) as client:
        yield client
    app.dependency_overrides.clear()


def _counting_transport(status_code: int, body: dict):
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler), calls


class TestModelRegistryClient:
    def test_overview(self, registry_client):
        result = registry_client.overview()

        assert result.total_models == 2
        assert result.providers == ["mistralai", "openai"]

    def test_lookup(self, registry_client):
        result = registry_client.lookup("gpt-4o")

        assert result.found is True
        assert result.model.provider == "openai"

    def test_search(self, registry_client):
        result = registry_client.search(modality=ModalityBucket.TEXT)

        assert result.total_matches == 1
        assert result.models[0].id == "mistralai/mistral-7b-instruct"

    def test_top(self, registry_client):
        result = registry_client.top("newest")

        assert result.metric is TopMetric.NEWEST
        assert [m.id for m in result.models] == ["mistralai/mistral-7b-instruct", "openai/gpt-4o"]

    def test_compare(self, registry_client):
        result = registry_client.compare(["gpt-4o", "mistral"])

        assert result.compared == 2
        assert result.insights.cheapest == "mistralai/mistral-7b-instruct"

    def test_report(self, registry_client):
        result = registry_client.report("openai/gpt-4o")

        assert result.pricing_analysis.tier == "premium"
        assert [a.id for a in result.alternatives] == []

    def test_list_entrypoints(self, registry_client):
        result = registry_client.list_entrypoints()
        assert [item.key for item in result.items if item.free] == ["overview"]

    def test_compare_validates_locally(self, registry_client):
        with pytest.raises(ValidationError):
            registry_client.compare(["only-one"])


class TestClientErrors:
    def test_upstream_unavailable_retried_then_raised(self):
        transport, calls = _counting_transport(502, {"detail": "Model catalog unavailable"})
        http_client = httpx.Client(transport=transport, base_url="http://registry.test")

        with ModelRegistryClient(http_client=http_client, max_retries=2) as client:
            with pytest.raises(UpstreamUnavailableError) as exc_info:
                client.overview()

        assert calls["count"] == 3
        assert exc_info.value.status_code == 502
        assert "Model catalog unavailable" in exc_info.value.message

    def test_validation_error_not_retried(self):
        transport, calls = _counting_transport(422, {"detail": [{"msg": "field required"}]})
        http_client = httpx.Client(transport=transport, base_url="http://registry.test")

        with ModelRegistryClient(http_client=http_client) as client:
            with pytest.raises(UnprocessableEntityError):
                client.lookup("gpt-4o")

        assert calls["count"] == 1

    def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        http_client = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://registry.test")

        with ModelRegistryClient(http_client=http_client, max_retries=1) as client:
            with pytest.raises(APIConnectionError, match="Connection refused"):
                client.overview()

    def test_base_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("MODELREGISTRY_BASE_URL", "http://registry.internal:9000/")

        client = ModelRegistryClient()
        try:
            assert client._base_url == "http://registry.internal:9000"
        finally:
            client.close()


class TestAsyncModelRegistryClient:
    async def test_report(self):
        body = {
            "found": True,
            "model": {"id": "openai/gpt-4o", "provider": "openai"},
            "pricingAnalysis": {
                "promptPerMillion": 5.0,
                "completionPerMillion": 15.0,
                "estimatedCostPer1kRequests": "10.0000",
                "tier": "premium",
            },
            "alternatives": [],
            "generatedAt": "2025-01-01T00:00:00.000Z",
        }
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=body)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://registry.test")

        async with AsyncModelRegistryClient(http_client=http_client) as client:
            result = await client.report("gpt-4o")
        await http_client.aclose()

        assert result.pricing_analysis.estimated_cost_per_1k_requests == "10.0000"
        assert seen[0].url.path == "/api/v1/registry/report"
        assert json.loads(seen[0].content) == {"modelId": "gpt-4o"}

    async def test_search_omits_unset_filters(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"totalMatches": 0, "returned": 0, "filters": {}, "models": []},
            )

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://registry.test")

        async with AsyncModelRegistryClient(http_client=http_client) as client:
            result = await client.search("llama", free_only=True, limit=5)
        await http_client.aclose()

        assert result.total_matches == 0
        assert json.loads(seen[0].content) == {"query": "llama", "modality": "all", "freeOnly": True, "limit": 5}
