from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import as_utc
from app.core.config import ABSENCE_INTERVAL_HOURS, BACKFILL_MODE
from app.core.db import AsyncSessionLocal
from app.core.exceptions import NotFound, InvalidCredential
from app.core.security import verify_password, create_access_token
from app.services.auth.account_service import get_account_by_username
from app.services.ledger.absence_backfill_core import missed_intervals
from app.services.ledger.absence_backfill_service import backfill_absences
from app.utils.logger import get_logger

logger = get_logger("auth.service")

ABSENCE_INTERVAL = timedelta(hours=ABSENCE_INTERVAL_HOURS)


# =====================================================
# LOGIN
# =====================================================
async def login_user(db: AsyncSession, username: str, password: str, now: datetime):
    logger.info("Authenticating account", extra={"username": username})

    account = await get_account_by_username(db, username)
    if not account:
        logger.warning("Unknown username", extra={"username": username})
        raise NotFound()

    if not verify_password(password, account.password_hash):
        logger.warning("Invalid password", extra={"account_id": account.id})
        raise InvalidCredential()

    if BACKFILL_MODE == "login":
        intervals = missed_intervals(account.last_login, now, ABSENCE_INTERVAL)
        if intervals >= 1:
            await _run_login_backfill(account.id, intervals, now)

    # advance even if the backfill failed, otherwise every retry backfills again;
    # never move it backwards under clock skew
    if account.last_login is None or as_utc(account.last_login) < as_utc(now):
        account.last_login = now
    await db.commit()

    token = create_access_token(
        account_id=account.id,
        username=account.username,
        now=now,
    )

    logger.info("Login successful", extra={"account_id": account.id})

    return {
        "id": account.id,
        "username": account.username,
        "token": token,
        "message": "Login successful",
    }


async def _run_login_backfill(account_id: int, intervals: int, now: datetime) -> None:
    """Best effort: own transaction, errors logged and dropped."""
    try:
        async with AsyncSessionLocal() as backfill_db:
            await backfill_absences(backfill_db, account_id, intervals, now)
    except Exception:
        logger.exception(
            "Absence backfill failed",
            extra={"account_id": account_id, "intervals": intervals},
        )
