from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFound
from app.models.ledger.activity_record_models import ActivityEntry, ActivityRecord
from app.schemas.ledger.form_data_schemas import ActivityRecordOut, FormDataCreate
from app.services.auth.account_service import get_account_by_id
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def _find_record(db: AsyncSession, owner_id: int, account_name: str) -> ActivityRecord | None:
    return await db.scalar(
        select(ActivityRecord).where(
            ActivityRecord.owner_id == owner_id,
            ActivityRecord.account_name == account_name,
        )
    )


# =========================
# UPSERT OR APPEND
# =========================
async def save_form_data(db: AsyncSession, payload: FormDataCreate, now: datetime) -> ActivityRecord:
    if not await get_account_by_id(db, payload.owner_id):
        raise NotFound("Account not found")

    record = await _find_record(db, payload.owner_id, payload.account_name)

    is_new = record is None
    if is_new:
        record = ActivityRecord(
            owner_id=payload.owner_id,
            account_name=payload.account_name,
        )
        db.add(record)
        try:
            await db.flush()
        except IntegrityError:
            # lost the race against a concurrent first submission
            await db.rollback()
            record = await _find_record(db, payload.owner_id, payload.account_name)
            if record is None:
                raise
            is_new = False
            logger.info(
                "Record created concurrently, appending",
                extra={"record_id": record.id, "owner_id": record.owner_id},
            )

    db.add(
        ActivityEntry(
            record_id=record.id,
            sent_invitation=payload.sent_invitation,
            connections=payload.connections,
            bot_file_names=payload.bot_file_names,
            recorded_at=now,
        )
    )

    await db.commit()

    logger.info(
        "Form data saved",
        extra={"record_id": record.id, "owner_id": record.owner_id, "is_new": is_new},
    )
    return record


# =========================
# LIST BY OWNER
# =========================
async def list_form_data(db: AsyncSession, owner_id: int) -> list[ActivityRecordOut]:
    result = await db.execute(
        select(ActivityRecord)
        .where(ActivityRecord.owner_id == owner_id)
        .order_by(ActivityRecord.id)
        .execution_options(populate_existing=True)
    )
    records = result.scalars().all()

    return [ActivityRecordOut.model_validate(r) for r in records]
