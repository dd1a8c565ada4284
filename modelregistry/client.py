"""Model registry Python SDK client."""

from __future__ import annotations

import os
from types import TracebackType
from typing import Any

import httpx

from modelregistry.exceptions import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
)
from modelregistry.schemas.registry import (
    CompareRequest,
    CompareResponse,
    EntrypointListResponse,
    LookupRequest,
    LookupResponse,
    ModalityBucket,
    OverviewResponse,
    ReportRequest,
    ReportResponse,
    SearchRequest,
    SearchResponse,
    TopMetric,
    TopRequest,
    TopResponse,
)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = httpx.Timeout(timeout=30.0, connect=5.0)
DEFAULT_MAX_RETRIES = 2

API_PREFIX = "/api/v1/registry"

_RETRY_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


def _body(request: Any) -> dict[str, Any]:
    return request.model_dump(mode="json", by_alias=True, exclude_none=True)


def _search_body(
    query: str | None,
    modality: ModalityBucket | str,
    min_context: int | None,
    max_price: float | None,
    free_only: bool,
    limit: int,
) -> dict[str, Any]:
    return _body(
        SearchRequest(
            query=query,
            modality=modality,
            min_context=min_context,
            max_price=max_price,
            free_only=free_only,
            limit=limit,
        )
    )


class ModelRegistryClient:
    """Synchronous client for the model registry REST API.

    Usage::

        client = ModelRegistryClient(base_url="http://localhost:3000")
        result = client.lookup("gpt-4o")
        client.close()

    Or as a context manager::

        with ModelRegistryClient() as client:
            cheapest = client.top("cheapest", limit=5)
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | httpx.Timeout | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        http_client: httpx.Client | None = None,
    ) -> None:
        if base_url is None:
            base_url = os.environ.get("MODELREGISTRY_BASE_URL", DEFAULT_BASE_URL)

        self._base_url = base_url.rstrip("/")
        self._max_retries = max_retries

        if http_client is not None:
            self._client = http_client
            self._owns_client = False
        else:
            self._client = httpx.Client(
                base_url=self._base_url,
                timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
            )
            self._owns_client = True

    def close(self) -> None:
        if self._owns_client and hasattr(self, "_client"):
            self._client.close()

    def __enter__(self) -> ModelRegistryClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal request handling
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        request = self._client.build_request(method, path, json=json)

        last_exc: Exception | None = None
        for attempt in range(1 + self._max_retries):
            try:
                response = self._client.send(request)
            except httpx.TimeoutException:
                last_exc = APITimeoutError(request)
                continue
            except httpx.ConnectError as exc:
                last_exc = APIConnectionError(message=str(exc), request=request)
                continue

            if response.status_code >= 400:
                if response.status_code in _RETRY_STATUS_CODES and attempt < self._max_retries:
                    continue
                raise APIStatusError.from_response(response)

            return response

        raise last_exc  # type: ignore[misc]

    def _get(self, path: str) -> httpx.Response:
        return self._request("GET", f"{API_PREFIX}{path}")

    def _post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        return self._request("POST", f"{API_PREFIX}{path}", json=body)

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def list_entrypoints(self) -> EntrypointListResponse:
        resp = self._get("/entrypoints")
        return EntrypointListResponse.model_validate(resp.json())

    def overview(self) -> OverviewResponse:
        resp = self._get("/overview")
        return OverviewResponse.model_validate(resp.json())

    def lookup(self, model_id: str) -> LookupResponse:
        resp = self._post("/lookup", _body(LookupRequest(model_id=model_id)))
        return LookupResponse.model_validate(resp.json())

    def search(
        self,
        query: str | None = None,
        *,
        modality: ModalityBucket | str = ModalityBucket.ALL,
        min_context: int | None = None,
        max_price: float | None = None,
        free_only: bool = False,
        limit: int = 20,
    ) -> SearchResponse:
        body = _search_body(query, modality, min_context, max_price, free_only, limit)
        resp = self._post("/search", body)
        return SearchResponse.model_validate(resp.json())

    def top(
        self,
        metric: TopMetric | str,
        *,
        modality: ModalityBucket | str = ModalityBucket.ALL,
        limit: int = 10,
    ) -> TopResponse:
        body = _body(TopRequest(metric=metric, modality=modality, limit=limit))
        resp = self._post("/top", body)
        return TopResponse.model_validate(resp.json())

    def compare(self, model_ids: list[str]) -> CompareResponse:
        resp = self._post("/compare", _body(CompareRequest(model_ids=model_ids)))
        return CompareResponse.model_validate(resp.json())

    def report(self, model_id: str) -> ReportResponse:
        resp = self._post("/report", _body(ReportRequest(model_id=model_id)))
        return ReportResponse.model_validate(resp.json())


class AsyncModelRegistryClient:
    """Asynchronous client for the model registry REST API.

    Usage::

        async with AsyncModelRegistryClient() as client:
            report = await client.report("openai/gpt-4o")
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | httpx.Timeout | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if base_url is None:
            base_url = os.environ.get("MODELREGISTRY_BASE_URL", DEFAULT_BASE_URL)

        self._base_url = base_url.rstrip("/")
        self._max_retries = max_retries

        if http_client is not None:
            self._client = http_client
            self._owns_client = False
        else:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
            )
            self._owns_client = True

    async def close(self) -> None:
        if self._owns_client and hasattr(self, "_client"):
            await self._client.aclose()

    async def __aenter__(self) -> AsyncModelRegistryClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internal request handling
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        request = self._client.build_request(method, path, json=json)

        last_exc: Exception | None = None
        for attempt in range(1 + self._max_retries):
            try:
                response = await self._client.send(request)
            except httpx.TimeoutException:
                last_exc = APITimeoutError(request)
                continue
            except httpx.ConnectError as exc:
                last_exc = APIConnectionError(message=str(exc), request=request)
                continue

            if response.status_code >= 400:
                if response.status_code in _RETRY_STATUS_CODES and attempt < self._max_retries:
                    continue
                raise APIStatusError.from_response(response)

            return response

        raise last_exc  # type: ignore[misc]

    async def _get(self, path: str) -> httpx.Response:
        return await self._request("GET", f"{API_PREFIX}{path}")

    async def _post(self, path: str, body: dict[str, Any]) -> httpx.Response:
        return await self._request("POST", f"{API_PREFIX}{path}", json=body)

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    async def list_entrypoints(self) -> EntrypointListResponse:
        resp = await self._get("/entrypoints")
        return EntrypointListResponse.model_validate(resp.json())

    async def overview(self) -> OverviewResponse:
        resp = await self._get("/overview")
        return OverviewResponse.model_validate(resp.json())

    async def lookup(self, model_id: str) -> LookupResponse:
        resp = await self._post("/lookup", _body(LookupRequest(model_id=model_id)))
        return LookupResponse.model_validate(resp.json())

    async def search(
        self,
        query: str | None = None,
        *,
        modality: ModalityBucket | str = ModalityBucket.ALL,
        min_context: int | None = None,
        max_price: float | None = None,
        free_only: bool = False,
        limit: int = 20,
    ) -> SearchResponse:
        body = _search_body(query, modality, min_context, max_price, free_only, limit)
        resp = await self._post("/search", body)
        return SearchResponse.model_validate(resp.json())

    async def top(
        self,
        metric: TopMetric | str,
        *,
        modality: ModalityBucket | str = ModalityBucket.ALL,
        limit: int = 10,
    ) -> TopResponse:
        body = _body(TopRequest(metric=metric, modality=modality, limit=limit))
        resp = await self._post("/top", body)
        return TopResponse.model_validate(resp.json())

    async def compare(self, model_ids: list[str]) -> CompareResponse:
        resp = await self._post("/compare", _body(CompareRequest(model_ids=model_ids)))
        return CompareResponse.model_validate(resp.json())

    async def report(self, model_id: str) -> ReportResponse:
        resp = await self._post("/report", _body(ReportRequest(model_id=model_id)))
        return ReportResponse.model_validate(resp.json())
