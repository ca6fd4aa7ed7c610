import math
from datetime import datetime, timedelta

from sqlalchemy import DateTime, Integer, insert, literal, select

from app.core.clock import as_utc
from app.models.ledger.activity_record_models import ActivityEntry, ActivityRecord, SENTINEL


def missed_intervals(last_login: datetime | None, now: datetime, interval: timedelta) -> int:
    """
    Whole intervals elapsed since `last_login`.

    0 for a first-ever login and for a `last_login` in the future.
    """
    if last_login is None:
        return 0

    elapsed = as_utc(now) - as_utc(last_login)
    if elapsed <= timedelta(0):
        return 0

    return math.floor(elapsed / interval)


def _append_sentinel_stmt(*, recorded_at: datetime, extra_where=None):
    """
    INSERT ... SELECT appending one sentinel event to every matching record.
    """
    where_clause = []

    if extra_where is not None:
        where_clause.extend(extra_where)

    source = select(
        ActivityRecord.id,
        literal(SENTINEL, Integer),
        literal(SENTINEL, Integer),
        literal(SENTINEL, Integer),
        literal(recorded_at, DateTime(timezone=True)),
    ).where(*where_clause)

    return insert(ActivityEntry).from_select(
        [
            ActivityEntry.record_id,
            ActivityEntry.sent_invitation,
            ActivityEntry.connections,
            ActivityEntry.bot_file_names,
            ActivityEntry.recorded_at,
        ],
        source,
    )
