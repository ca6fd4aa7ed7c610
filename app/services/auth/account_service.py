from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.users.account_models import Account
from app.core.security import hash_password
from app.core.exceptions import ValidationConflict
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def get_account_by_username(db: AsyncSession, username: str) -> Account | None:
    result = await db.execute(
        select(Account).where(Account.username == username)
    )
    return result.scalars().first()


async def get_account_by_id(db: AsyncSession, account_id: int) -> Account | None:
    return await db.get(Account, account_id)


async def create_account(db: AsyncSession, username: str, password: str) -> Account:
    """Hash the password and persist a new account. Never touches an existing one."""
    if await get_account_by_username(db, username):
        logger.warning("Signup for existing username", extra={"username": username})
        raise ValidationConflict()

    account = Account(
        username=username,
        password_hash=hash_password(password),
    )

    db.add(account)
    try:
        await db.commit()
    except IntegrityError:
        # concurrent signup won the unique index
        await db.rollback()
        logger.warning("Signup raced an existing username", extra={"username": username})
        raise ValidationConflict()

    await db.refresh(account)

    logger.info("Account created", extra={"account_id": account.id})
    return account
