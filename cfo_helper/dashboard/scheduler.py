"""
History ticker.

Nudges every live session's mock history on a fixed interval so charts
look live. Uses APScheduler's AsyncIOScheduler on the app's event loop.
"""
import logging

from cfo_helper.config import settings
from cfo_helper.dashboard.registry import SessionRegistry, session_registry

logger = logging.getLogger(__name__)


HISTORY_JOB_ID = "history_tick"


async def tick_histories(registry: SessionRegistry = session_registry) -> int:
    """Perturb every live session's history. Runs on the event loop, not in an executor."""
    count = registry.tick_all()
    logger.debug(f"History tick updated {count} dashboard sessions")
    return count


def setup_apscheduler(scheduler, registry: SessionRegistry = session_registry):
    """
    Configure APScheduler with the history tick job.

    Usage:
        from apscheduler.schedulers.asyncio import AsyncIOScheduler
        scheduler = AsyncIOScheduler()
        setup_apscheduler(scheduler)
        scheduler.start()
    """
    scheduler.add_job(
        tick_histories,
        'interval',
        seconds=settings.HISTORY_TICK_SECONDS,
        args=[registry],
        id=HISTORY_JOB_ID,
        name='Mock History Tick',
        replace_existing=True,
    )
    logger.info("History tick job configured")
