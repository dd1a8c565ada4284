"""Background scheduler that keeps the catalog cache warm.

Uses APScheduler's AsyncIOScheduler to refresh the cache at a fixed interval,
so request handlers rarely have to wait on the upstream fetch.
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from modelregistry.server.core.cache import CatalogCache
from modelregistry.server.discovery.base import UpstreamFetchError

logger = logging.getLogger(__name__)

# Job ID for the warm refresh task
WARM_REFRESH_JOB_ID = "catalog_warm_refresh"


async def warm_refresh(cache: CatalogCache) -> None:
    """Refresh the cache, logging instead of raising on upstream failure."""
    try:
        await cache.refresh()
    except UpstreamFetchError as e:
        logger.warning("Scheduler: warm refresh failed: %s", e.message)


def create_scheduler(cache: CatalogCache, interval_minutes: int) -> AsyncIOScheduler | None:
    """Build a scheduler with the warm refresh job.

    Args:
        cache: Cache to refresh.
        interval_minutes: Minutes between refreshes. 0 disables the job.

    Returns:
        Configured (not yet started) scheduler, or None when disabled.
    """
    if interval_minutes <= 0:
        logger.info("Scheduler: Warm refresh disabled")
        return None

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        warm_refresh,
        trigger=IntervalTrigger(minutes=interval_minutes),
        args=[cache],
        id=WARM_REFRESH_JOB_ID,
        name="Catalog Warm Refresh",
        replace_existing=True,
    )
    logger.info("Scheduler: Added warm refresh job with %d minute interval", interval_minutes)
    return scheduler


def start_scheduler(scheduler: AsyncIOScheduler | None) -> None:
    if scheduler is None:
        return
    scheduler.start()
    logger.info("Scheduler: Started")


def stop_scheduler(scheduler: AsyncIOScheduler | None) -> None:
    """Gracefully shutdown scheduler."""
    if scheduler is None or not scheduler.running:
        return
    scheduler.shutdown(wait=False)
    logger.info("Scheduler: Stopped")
