"""SQLAlchemy implementation of the account repository."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.db.models import Account


class SqlAccountRepository:
    """Account repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, account_id: str) -> Account | None:
        stmt = select(Account).where(Account.id == account_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Account | None:
        stmt = select(Account).where(Account.username == username)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_accounts(self, role: str | None = None) -> Sequence[Account]:
        stmt = select(Account)
        if role:
            stmt = stmt.where(Account.role == role)
        stmt = stmt.order_by(Account.created_at.desc())
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def create_account(
        self,
        *,
        username: str,
        password_hash: str,
        role: str,
        email: str | None,
        is_active: bool,
    ) -> Account:
        account = Account(
            username=username,
            password_hash=password_hash,
            role=role,
            email=email,
            is_active=is_active,
            created_at=utcnow(),
        )
        self._session.add(account)
        await self._session.flush()
        await self._session.refresh(account)
        return account

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(last_login_at=timestamp)
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)
