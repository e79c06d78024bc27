"""Wallet ledger service.

Every balance change goes through ``_move`` so that the guard and the write are
one conditional UPDATE and exactly one transaction row follows it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.db.models import OwnerWallet as WalletModel, WalletTransaction as WalletTransactionModel
from ledger_server.infrastructure.database.repositories.wallet_repository import SqlWalletRepository
from ledger_server.modules.common.exceptions import InsufficientBalanceError, InvalidAmountError

from .models import ADMIN_DEDUCT, ADMIN_GIVE, Reconciliation, WalletSnapshot, WalletTransactionRecord
from .repository import WalletRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WalletService:
    repository: WalletRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "WalletService":
        return cls(SqlWalletRepository(session))

    async def get_wallet(self, owner_id: str) -> WalletSnapshot | None:
        wallet = await self.repository.get_wallet(owner_id)
        return self._to_domain(wallet) if wallet else None

    async def ensure_wallet(self, owner_id: str, owner_email: str | None = None) -> WalletSnapshot:
        """Return the owner's wallet, creating an empty one on first use."""
        wallet = await self.repository.get_wallet(owner_id)
        if wallet is None:
            wallet = await self.repository.create_wallet(owner_id, owner_email)
            logger.info("Created wallet for owner %s", owner_id)
        return self._to_domain(wallet)

    async def credit(
        self,
        owner_id: str,
        amount: int,
        kind: str,
        description: str | None,
        *,
        charged: int = 0,
        fee: int = 0,
        reference_id: str | None = None,
        owner_email: str | None = None,
    ) -> int:
        """Add ``amount`` points and return the new balance."""
        self._check_amount(amount)
        await self.ensure_wallet(owner_id, owner_email)
        return await self._move(
            owner_id,
            amount,
            kind,
            description,
            reference_id=reference_id,
            charged=charged,
            fee=fee,
        )

    async def debit(
        self,
        owner_id: str,
        amount: int,
        kind: str,
        description: str | None,
        *,
        reference_id: str | None = None,
    ) -> int:
        """Remove ``amount`` points and return the new balance.

        Raises InsufficientBalanceError without writing anything when the
        balance does not cover the amount.
        """
        self._check_amount(amount)
        await self.ensure_wallet(owner_id)
        return await self._move(
            owner_id,
            -amount,
            kind,
            description,
            reference_id=reference_id,
            used=amount,
        )

    async def adjust(self, owner_id: str, amount: int, reason: str | None = None) -> int:
        if amount == 0:
            raise InvalidAmountError("Adjustment amount must not be zero")
        if amount > 0:
            return await self.credit(owner_id, amount, ADMIN_GIVE, reason or "Admin credit")
        return await self.debit(owner_id, -amount, ADMIN_DEDUCT, reason or "Admin deduction")

    async def list_transactions(
        self,
        owner_id: str,
        limit: int = 50,
        offset: int = 0,
        kind: str | None = None,
    ) -> list[WalletTransactionRecord]:
        rows = await self.repository.list_transactions(owner_id, limit, offset, kind)
        return [self._tx_to_domain(row) for row in rows]

    async def reconcile(self, owner_id: str) -> Reconciliation:
        wallet = await self.repository.get_wallet(owner_id)
        balance = wallet.balance if wallet else 0
        ledger_total = await self.repository.sum_transactions(owner_id)
        result = Reconciliation(owner_id=owner_id, balance=balance, ledger_total=ledger_total)
        if not result.is_balanced:
            logger.warning(
                "Wallet %s out of balance: stored %sP, ledger %sP",
                owner_id,
                balance,
                ledger_total,
            )
        return result

    async def _move(
        self,
        owner_id: str,
        delta: int,
        kind: str,
        description: str | None,
        *,
        reference_id: str | None,
        charged: int = 0,
        used: int = 0,
        fee: int = 0,
    ) -> int:
        applied = await self.repository.apply_delta(
            owner_id, delta, charged=charged, used=used, fee=fee
        )
        if not applied:
            wallet = await self.repository.get_wallet(owner_id)
            available = wallet.balance if wallet else 0
            logger.info(
                "Refused %s of %sP for owner %s: balance %sP",
                kind,
                -delta,
                owner_id,
                available,
            )
            raise InsufficientBalanceError(owner_id, -delta, available)

        wallet = await self.repository.get_wallet(owner_id)
        assert wallet is not None
        await self.repository.add_transaction(
            owner_id=owner_id,
            type=kind,
            amount=delta,
            balance_after=wallet.balance,
            description=description,
            reference_id=reference_id,
        )
        logger.info(
            "Wallet %s %s %+dP, balance %sP",
            owner_id,
            kind,
            delta,
            wallet.balance,
        )
        return wallet.balance

    @staticmethod
    def _check_amount(amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidAmountError(f"Amount must be a positive integer, got {amount!r}")

    @staticmethod
    def _to_domain(model: WalletModel) -> WalletSnapshot:
        return WalletSnapshot(
            owner_id=model.owner_id,
            owner_email=model.owner_email,
            balance=model.balance,
            total_charged=model.total_charged,
            total_used=model.total_used,
            total_fee=model.total_fee,
            version=model.version,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _tx_to_domain(model: WalletTransactionModel) -> WalletTransactionRecord:
        return WalletTransactionRecord(
            id=model.id,
            owner_id=model.owner_id,
            type=model.type,
            amount=model.amount,
            balance_after=model.balance_after,
            description=model.description,
            reference_id=model.reference_id,
            created_at=model.created_at,
        )
