from datetime import timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from app.core.clock import utc_now
from app.core.config import ABSENCE_INTERVAL_HOURS, BACKFILL_MODE
from app.core.db import AsyncSessionLocal
from app.services.ledger.absence_backfill_service import backfill_idle_accounts
from app.utils.logger import get_logger

logger = get_logger(__name__)

scheduler = AsyncIOScheduler(timezone="UTC")


async def idle_account_backfill_job(clock=utc_now):
    interval = timedelta(hours=ABSENCE_INTERVAL_HOURS)
    try:
        async with AsyncSessionLocal() as db:
            await backfill_idle_accounts(db, clock(), interval)
    except Exception:
        logger.exception("Idle account backfill job failed")


def configure_scheduler(mode: str = BACKFILL_MODE) -> AsyncIOScheduler:
    """Login mode backfills inline, so only scheduled mode registers the job."""
    if mode == "scheduled" and not scheduler.get_job("idle_account_backfill"):
        scheduler.add_job(
            idle_account_backfill_job,
            "interval",
            hours=ABSENCE_INTERVAL_HOURS,
            id="idle_account_backfill",
            coalesce=True,
            max_instances=1,
        )
        logger.info(
            "Idle account backfill scheduled",
            extra={"every_hours": ABSENCE_INTERVAL_HOURS},
        )
    return scheduler
