"""Absence backfill: interval counting and sentinel appends."""

from datetime import timedelta

import pytest
from sqlalchemy import select

from app.core.db import AsyncSessionLocal
from app.models.ledger.activity_record_models import ActivityRecord, SENTINEL
from app.services.ledger.absence_backfill_core import missed_intervals
from app.services.ledger.absence_backfill_service import (
    backfill_absences,
    backfill_idle_accounts,
)
from conftest import T0, run

U = timedelta(hours=12)


def _records(owner_id):
    async def go():
        async with AsyncSessionLocal() as db:
            result = await db.execute(
                select(ActivityRecord)
                .where(ActivityRecord.owner_id == owner_id)
                .order_by(ActivityRecord.id)
            )
            return result.scalars().all()
    return run(go())


def _backfill(owner_id, intervals, now=T0):
    async def go():
        async with AsyncSessionLocal() as db:
            return await backfill_absences(db, owner_id, intervals, now)
    return run(go())


def _assert_parallel(record):
    lengths = {
        len(record.sent_invitation),
        len(record.connections),
        len(record.bot_file_names),
        len(record.dates),
    }
    assert len(lengths) == 1


# ---------------------------------------------------------------------------
# Interval counting
# ---------------------------------------------------------------------------

class TestMissedIntervals:
    def test_thirty_hours_is_two_intervals(self):
        assert missed_intervals(T0 - timedelta(hours=30), T0, U) == 2

    def test_five_hours_is_zero(self):
        assert missed_intervals(T0 - timedelta(hours=5), T0, U) == 0

    def test_exact_boundary_counts(self):
        assert missed_intervals(T0 - timedelta(hours=12), T0, U) == 1

    def test_first_login_never_backfills(self):
        """No previous login -> no elapsed time to measure."""
        assert missed_intervals(None, T0, U) == 0

    def test_future_last_login_is_ignored(self):
        """Clock skew must not produce negative counts."""
        assert missed_intervals(T0 + timedelta(hours=30), T0, U) == 0

    def test_naive_last_login_treated_as_utc(self):
        naive = (T0 - timedelta(hours=25)).replace(tzinfo=None)
        assert missed_intervals(naive, T0, U) == 2


# ---------------------------------------------------------------------------
# Sentinel appends
# ---------------------------------------------------------------------------

class TestBackfillAbsences:
    def test_appends_sentinels_to_every_owned_record(self, make_account, submit_form_data):
        owner = make_account("alice")
        submit_form_data(owner, "linkedin-1", sent=4, connections=5, files=6)
        submit_form_data(owner, "linkedin-2", sent=7, connections=8, files=9)

        written = _backfill(owner, 2, now=T0 + timedelta(hours=30))

        assert written == 4
        first, second = _records(owner)
        assert first.sent_invitation == [4, SENTINEL, SENTINEL]
        assert first.connections == [5, SENTINEL, SENTINEL]
        assert first.bot_file_names == [6, SENTINEL, SENTINEL]
        assert second.sent_invitation == [7, SENTINEL, SENTINEL]
        for record in (first, second):
            _assert_parallel(record)

    def test_other_accounts_untouched(self, make_account, submit_form_data):
        alice = make_account("alice")
        bob = make_account("bob")
        submit_form_data(alice, "acct")
        submit_form_data(bob, "acct")

        _backfill(alice, 3)

        (bob_record,) = _records(bob)
        assert bob_record.sent_invitation == [1]

    def test_sentinel_dates_use_backfill_time(self, make_account, submit_form_data):
        owner = make_account("alice")
        submit_form_data(owner, "acct", now=T0)

        later = T0 + timedelta(hours=13)
        _backfill(owner, 1, now=later)

        (record,) = _records(owner)
        assert [d.replace(tzinfo=None) for d in record.dates] == [
            T0.replace(tzinfo=None),
            later.replace(tzinfo=None),
        ]

    def test_not_idempotent(self, make_account, submit_form_data):
        """Running twice for the same window doubles the sentinels."""
        owner = make_account("alice")
        submit_form_data(owner, "acct")

        _backfill(owner, 1)
        _backfill(owner, 1)

        (record,) = _records(owner)
        assert record.sent_invitation == [1, SENTINEL, SENTINEL]

    @pytest.mark.parametrize("intervals", [0, -1])
    def test_non_positive_intervals_write_nothing(self, make_account, submit_form_data, intervals):
        owner = make_account("alice")
        submit_form_data(owner, "acct")

        assert _backfill(owner, intervals) == 0
        (record,) = _records(owner)
        assert record.sent_invitation == [1]

    def test_account_without_records(self, make_account):
        owner = make_account("alice")
        assert _backfill(owner, 2) == 0


class TestBackfillIdleAccounts:
    def _run(self, now):
        async def go():
            async with AsyncSessionLocal() as db:
                return await backfill_idle_accounts(db, now, U)
        return run(go())

    def test_only_idle_accounts_get_a_sentinel(self, make_account, submit_form_data):
        idle = make_account("idle", last_login=T0 - timedelta(hours=13))
        recent = make_account("recent", last_login=T0 - timedelta(hours=1))
        never = make_account("never")
        for owner in (idle, recent, never):
            submit_form_data(owner, "acct")

        assert self._run(T0) == 1

        assert _records(idle)[0].sent_invitation == [1, SENTINEL]
        assert _records(recent)[0].sent_invitation == [1]
        assert _records(never)[0].sent_invitation == [1]

    def test_one_sentinel_per_run(self, make_account, submit_form_data):
        """The scheduled job adds a single interval each time it fires."""
        idle = make_account("idle", last_login=T0 - timedelta(hours=50))
        submit_form_data(idle, "acct")

        self._run(T0)

        assert _records(idle)[0].sent_invitation == [1, SENTINEL]

    def test_nothing_idle(self, make_account):
        make_account("recent", last_login=T0)
        assert self._run(T0) == 0
