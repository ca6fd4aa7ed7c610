from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.ledger.activity_record_models import ActivityRecord
from app.models.users.account_models import Account
from app.services.ledger.absence_backfill_core import _append_sentinel_stmt
from app.utils.logger import get_logger

logger = get_logger("ledger.backfill")


async def backfill_absences(
    db: AsyncSession,
    account_id: int,
    intervals: int,
    now: datetime,
) -> int:
    """
    Append `intervals` sentinel events to every record owned by the account.

    Not idempotent: call once per login, before last_login moves.
    Returns the number of entries written.
    """
    if intervals < 1:
        return 0

    written = 0
    for _ in range(intervals):
        result = await db.execute(
            _append_sentinel_stmt(
                recorded_at=now,
                extra_where=[ActivityRecord.owner_id == account_id],
            )
        )
        written += result.rowcount

    await db.commit()

    logger.info(
        "Absence backfill applied",
        extra={"account_id": account_id, "intervals": intervals, "entries": written},
    )
    return written


async def backfill_idle_accounts(
    db: AsyncSession,
    now: datetime,
    interval: timedelta,
) -> int:
    """
    Scheduled variant: one sentinel per record for every account idle for at
    least `interval`. Accounts that never logged in are left alone.
    """
    idle_accounts = select(Account.id).where(
        Account.last_login.isnot(None),
        Account.last_login <= now - interval,
    )

    result = await db.execute(
        _append_sentinel_stmt(
            recorded_at=now,
            extra_where=[ActivityRecord.owner_id.in_(idle_accounts)],
        )
    )
    written = result.rowcount

    if not written:
        return 0

    await db.commit()

    logger.info("Idle account backfill applied", extra={"entries": written})
    return written
