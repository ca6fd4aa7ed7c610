import argparse
import asyncio
import getpass

from app.core.db import AsyncSessionLocal
from app.core.exceptions import ValidationConflict
from app.services.auth.account_service import create_account


async def _create(username: str, password: str) -> int:
    async with AsyncSessionLocal() as session:
        try:
            account = await create_account(session, username, password)
        except ValidationConflict:
            print(f"Username {username!r} already exists")
            return 1
        print(f"Account {account.username} created (id={account.id})")
        return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Register an account")
    parser.add_argument("username")
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    return asyncio.run(_create(args.username, password))


if __name__ == "__main__":
    raise SystemExit(main())
