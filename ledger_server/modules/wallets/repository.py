"""Repository protocol for wallet operations."""

from __future__ import annotations

from typing import Protocol, Sequence

from ledger_server.db.models import OwnerWallet as WalletModel, WalletTransaction as WalletTransactionModel


class WalletRepository(Protocol):
    async def get_wallet(self, owner_id: str) -> WalletModel | None:
        ...

    async def create_wallet(self, owner_id: str, owner_email: str | None) -> WalletModel:
        ...

    async def apply_delta(
        self,
        owner_id: str,
        delta: int,
        *,
        charged: int = 0,
        used: int = 0,
        fee: int = 0,
    ) -> bool:
        ...

    async def add_transaction(
        self,
        *,
        owner_id: str,
        type: str,
        amount: int,
        balance_after: int,
        description: str | None,
        reference_id: str | None,
    ) -> WalletTransactionModel:
        ...

    async def list_transactions(
        self, owner_id: str, limit: int, offset: int, type: str | None = None
    ) -> Sequence[WalletTransactionModel]:
        ...

    async def sum_transactions(self, owner_id: str) -> int:
        ...
