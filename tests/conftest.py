"""Shared fixtures: isolated SQLite database, pinned clock, API client."""

import asyncio
import os
import tempfile
from datetime import datetime, timedelta, timezone

# config is read at import time, so the environment has to be in place first
_DB_DIR = tempfile.mkdtemp(prefix="ledger-tests-")
os.environ["APP_ENV"] = "development"
os.environ["DB_TYPE"] = "sqlite"
os.environ["SQLITE_PATH"] = os.path.join(_DB_DIR, "ledger.db")
os.environ["JWT_ACCESS_SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "60"
os.environ["ABSENCE_INTERVAL_HOURS"] = "12"
os.environ["BACKFILL_MODE"] = "login"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select, update

from app.core.clock import get_clock
from app.core.db import AsyncSessionLocal, Base, engine
from app.models.ledger.activity_record_models import ActivityEntry
from app.models.users.account_models import Account
from app.schemas.ledger.form_data_schemas import FormDataCreate
from app.services.auth.account_service import create_account, get_account_by_username
from app.services.ledger.form_data_service import save_form_data


T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def run(coro):
    return asyncio.run(coro)


@pytest.fixture(autouse=True)
def fresh_schema():
    """Drop and recreate every table around each test."""
    async def reset():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)

    run(reset())
    yield


@pytest.fixture
def clock():
    return FrozenClock(T0)


@pytest.fixture
def client(clock):
    from main import app

    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def make_account():
    """Create an account, optionally with a last_login already set."""
    def _make(username="alice", password="s3cret", last_login=None):
        async def go():
            async with AsyncSessionLocal() as db:
                account = await create_account(db, username, password)
                if last_login is not None:
                    await db.execute(
                        update(Account)
                        .where(Account.id == account.id)
                        .values(last_login=last_login)
                    )
                    await db.commit()
                return account.id
        return run(go())
    return _make


@pytest.fixture
def load_account():
    def _load(username):
        async def go():
            async with AsyncSessionLocal() as db:
                return await get_account_by_username(db, username)
        return run(go())
    return _load


@pytest.fixture
def submit_form_data():
    def _submit(owner_id, account_name, sent=1, connections=2, files=3, now=T0):
        payload = FormDataCreate(
            accountName=account_name,
            sentInvitation=sent,
            connections=connections,
            noOfBotFileNames=files,
            id=owner_id,
        )

        async def go():
            async with AsyncSessionLocal() as db:
                record = await save_form_data(db, payload, now)
                return record.id
        return run(go())
    return _submit


@pytest.fixture
def count_entries():
    def _count():
        async def go():
            async with AsyncSessionLocal() as db:
                return await db.scalar(select(func.count(ActivityEntry.id)))
        return run(go())
    return _count
