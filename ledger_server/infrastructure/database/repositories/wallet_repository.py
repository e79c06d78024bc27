"""SQLAlchemy implementation for the wallet ledger."""

from __future__ import annotations

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.db.models import OwnerWallet, WalletTransaction


class SqlWalletRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_wallet(self, owner_id: str) -> OwnerWallet | None:
        stmt = (
            select(OwnerWallet)
            .where(OwnerWallet.owner_id == owner_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create_wallet(self, owner_id: str, owner_email: str | None) -> OwnerWallet:
        wallet = OwnerWallet(
            owner_id=owner_id,
            owner_email=owner_email,
            balance=0,
            total_charged=0,
            total_used=0,
            total_fee=0,
            version=0,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(wallet)
                await self.session.flush()
        except IntegrityError:
            # another request bootstrapped the same wallet first
            wallet = await self.get_wallet(owner_id)
            if wallet is None:
                raise
        return wallet

    async def apply_delta(
        self,
        owner_id: str,
        delta: int,
        *,
        charged: int = 0,
        used: int = 0,
        fee: int = 0,
    ) -> bool:
        """Conditionally move the balance; returns False when no row matched.

        A negative delta only matches while the balance still covers it, so the
        check and the write are one statement.
        """
        stmt = update(OwnerWallet).where(OwnerWallet.owner_id == owner_id)
        if delta < 0:
            stmt = stmt.where(OwnerWallet.balance >= -delta)
        stmt = stmt.values(
            balance=OwnerWallet.balance + delta,
            total_charged=OwnerWallet.total_charged + charged,
            total_used=OwnerWallet.total_used + used,
            total_fee=OwnerWallet.total_fee + fee,
            version=OwnerWallet.version + 1,
            updated_at=utcnow(),
        ).execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def add_transaction(
        self,
        *,
        owner_id: str,
        type: str,
        amount: int,
        balance_after: int,
        description: str | None,
        reference_id: str | None,
    ) -> WalletTransaction:
        tx = WalletTransaction(
            owner_id=owner_id,
            type=type,
            amount=amount,
            balance_after=balance_after,
            description=description,
            reference_id=reference_id,
            created_at=utcnow(),
        )
        self.session.add(tx)
        await self.session.flush()
        return tx

    async def list_transactions(
        self,
        owner_id: str,
        limit: int,
        offset: int,
        type: str | None = None,
    ) -> list[WalletTransaction]:
        stmt = select(WalletTransaction).where(WalletTransaction.owner_id == owner_id)
        if type:
            stmt = stmt.where(WalletTransaction.type == type)
        stmt = stmt.order_by(desc(WalletTransaction.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def sum_transactions(self, owner_id: str) -> int:
        stmt = select(func.coalesce(func.sum(WalletTransaction.amount), 0)).where(
            WalletTransaction.owner_id == owner_id
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
