"""Tests for the warm refresh scheduler."""

import logging
from datetime import timedelta

from apscheduler.triggers.interval import IntervalTrigger

from modelregistry.server.core.cache import CatalogCache
from modelregistry.server.core.scheduler import (
    WARM_REFRESH_JOB_ID,
    create_scheduler,
    start_scheduler,
    stop_scheduler,
    warm_refresh,
)
from modelregistry.server.discovery.base import ModelRecord, UpstreamFetchError


class CountingSource:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls = 0

    async def fetch_models(self) -> list[ModelRecord]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return [ModelRecord(id="openai/gpt-4o")]


class TestCreateScheduler:
    def test_disabled_when_interval_is_zero(self):
        assert create_scheduler(CatalogCache(CountingSource()), 0) is None

    def test_adds_warm_refresh_job(self):
        scheduler = create_scheduler(CatalogCache(CountingSource()), 5)

        job = scheduler.get_job(WARM_REFRESH_JOB_ID)
        assert job is not None
        assert isinstance(job.trigger, IntervalTrigger)
        assert job.trigger.interval == timedelta(minutes=5)

    async def test_start_and_stop(self):
        scheduler = create_scheduler(CatalogCache(CountingSource()), 1)

        start_scheduler(scheduler)
        assert scheduler.running is True

        stop_scheduler(scheduler)
        assert scheduler.running is False

    def test_stop_none_is_noop(self):
        stop_scheduler(None)
        start_scheduler(None)


class TestWarmRefresh:
    async def test_refreshes_cache(self):
        source = CountingSource()
        cache = CatalogCache(source)

        await warm_refresh(cache)

        assert source.calls == 1
        assert cache.size == 1

    async def test_failure_is_logged_not_raised(self, caplog):
        source = CountingSource(UpstreamFetchError("OpenRouter API unreachable"))
        cache = CatalogCache(source)

        with caplog.at_level(logging.WARNING):
            await warm_refresh(cache)

        assert cache.size == 0
        assert "warm refresh failed: OpenRouter API unreachable" in caplog.text
