"""Domain services for account management."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.core.crypto import hash_password, verify_password
from ledger_server.db.models import Account as AccountModel
from ledger_server.infrastructure.database.repositories.account_repository import SqlAccountRepository

from .exceptions import AccountAlreadyExistsError
from .models import OWNER_ROLE, Account, AccountCreateInput
from .repository import AccountRepository


class AccountService:
    """Encapsulates core account use cases."""

    def __init__(self, repository: AccountRepository) -> None:
        self._repository = repository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "AccountService":
        return cls(SqlAccountRepository(session))

    async def get_by_id(self, account_id: str) -> Account | None:
        return self._to_domain(await self._repository.get_by_id(account_id))

    async def get_by_username(self, username: str) -> Account | None:
        return self._to_domain(await self._repository.get_by_username(username))

    async def list_accounts(self, role: str | None = None) -> Sequence[Account]:
        rows = await self._repository.list_accounts(role)
        return [self._to_domain(row) for row in rows]

    async def authenticate(self, username: str, password: str) -> Account | None:
        account = await self.get_by_username(username)
        if account is None or not account.is_active:
            return None
        if not verify_password(password, account.password_hash):
            return None
        return account

    async def create_account(self, payload: AccountCreateInput) -> Account:
        existing = await self._repository.get_by_username(payload.username)
        if existing is not None:
            raise AccountAlreadyExistsError(f"Username already taken: {payload.username}")

        password_hash = hash_password(payload.password)
        model = await self._repository.create_account(
            username=payload.username,
            password_hash=password_hash,
            role=payload.role,
            email=payload.email,
            is_active=payload.is_active,
        )
        return self._to_domain(model)

    async def set_last_login(self, account_id: str) -> None:
        await self._repository.set_last_login(account_id, utcnow())

    @staticmethod
    def _to_domain(model: AccountModel | None) -> Account | None:
        if model is None:
            return None
        return Account(
            id=str(model.id),
            username=model.username,
            role=model.role or OWNER_ROLE,
            is_active=bool(model.is_active),
            password_hash=model.password_hash,
            email=model.email,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_login_at=model.last_login_at,
        )
