"""Time-based cache for the upstream model catalog.

The cache holds the last successfully fetched catalog and refreshes it once
the snapshot is older than the TTL. Refreshes are single-flight: callers that
find the cache stale while a fetch is already running await that same fetch
and share its result (or its error).
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Callable

from modelregistry.server.discovery.base import CatalogSource, ModelRecord, UpstreamFetchError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


class CatalogCache:
    """Process-lifetime cache of the model catalog.

    Usage:
        cache = CatalogCache(OpenRouterCatalogSource())
        models = await cache.get_catalog()
    """

    def __init__(
        self,
        source: CatalogSource,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        serve_stale_on_error: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            source: Upstream catalog source.
            ttl_seconds: Age after which the snapshot is refreshed.
            serve_stale_on_error: Serve the previous snapshot when a refresh
                fails. When False the fetch error propagates.
            clock: Monotonic time source, injectable for tests.
        """
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must not be negative")
        self.source = source
        self.ttl_seconds = ttl_seconds
        self.serve_stale_on_error = serve_stale_on_error
        self._clock = clock
        self._snapshot: list[ModelRecord] = []
        self._last_fetch: float | None = None
        self._fetched_at: datetime | None = None
        self._inflight: asyncio.Future[list[ModelRecord]] | None = None

    @property
    def size(self) -> int:
        return len(self._snapshot)

    @property
    def fetched_at(self) -> datetime | None:
        """Wall-clock time of the last successful fetch."""
        return self._fetched_at

    @property
    def is_stale(self) -> bool:
        if not self._snapshot or self._last_fetch is None:
            return True
        return self._clock() - self._last_fetch >= self.ttl_seconds

    async def get_catalog(self) -> list[ModelRecord]:
        """Return the catalog, refreshing it first if stale.

        Returns:
            The current snapshot. The list is shared; callers must not mutate it.

        Raises:
            UpstreamFetchError: If a refresh fails and no snapshot can be served.
        """
        if not self.is_stale:
            return self._snapshot

        try:
            return await self.refresh()
        except UpstreamFetchError as e:
            if self._snapshot and self.serve_stale_on_error:
                logger.warning(
                    "Catalog refresh failed, serving stale snapshot of %d models: %s",
                    len(self._snapshot),
                    e.message,
                )
                return self._snapshot
            raise

    async def refresh(self) -> list[ModelRecord]:
        """Fetch the catalog now, joining a fetch already in flight.

        Returns:
            The freshly fetched snapshot.

        Raises:
            UpstreamFetchError: If the fetch fails.
        """
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._fetch())
        # shield: one waiter being cancelled must not cancel the shared fetch
        return await asyncio.shield(self._inflight)

    async def _fetch(self) -> list[ModelRecord]:
        try:
            models = await self.source.fetch_models()
        finally:
            self._inflight = None

        self._snapshot = models
        self._last_fetch = self._clock()
        self._fetched_at = datetime.now(timezone.utc)
        logger.info("Catalog cache refreshed with %d models", len(models))
        return models
