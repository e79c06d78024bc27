"""Repository protocol for accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ledger_server.db.models import Account as AccountModel


class AccountRepository(Protocol):
    """Abstract repository interface for account persistence."""

    async def get_by_id(self, account_id: str) -> AccountModel | None:
        ...

    async def get_by_username(self, username: str) -> AccountModel | None:
        ...

    async def list_accounts(self, role: str | None = None) -> Sequence[AccountModel]:
        ...

    async def create_account(
        self,
        *,
        username: str,
        password_hash: str,
        role: str,
        email: str | None,
        is_active: bool,
    ) -> AccountModel:
        ...

    async def set_last_login(self, account_id: str, timestamp: datetime) -> None:
        ...
