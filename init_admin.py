"""
Seed the first super administrator.

Run once against a fresh database; an existing admin account makes this a no-op.
"""
import argparse
import asyncio

from sqlalchemy import select

from ledger_server.db.models import Account
from ledger_server.infrastructure.database import get_session, init_db
from ledger_server.modules.accounts import AccountCreateInput, AccountService


async def create_default_admin(username: str, password: str, email: str | None) -> None:
    """Create the super admin unless an administrator already exists."""
    await init_db()

    async for db in get_session():
        stmt = select(Account).where(Account.role.in_(["admin", "super_admin"])).limit(1)
        result = await db.execute(stmt)
        if result.scalar_one_or_none() is not None:
            print("An administrator already exists, nothing to do")
            return

        service = AccountService.with_session(db)
        await service.create_account(
            AccountCreateInput(
                username=username,
                password=password,
                role="super_admin",
                email=email,
                is_active=True,
            )
        )
        await db.commit()

        print("=" * 50)
        print("Super administrator created")
        print("=" * 50)
        print(f"Username: {username}")
        print(f"Password: {password}")
        print("=" * 50)
        print("Change the password after the first login!")
        print("=" * 50)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--username", default="admin")
    parser.add_argument("--password", default="admin123")
    parser.add_argument("--email", default="admin@example.com")
    args = parser.parse_args()
    asyncio.run(create_default_admin(args.username, args.password, args.email))


if __name__ == "__main__":
    main()
