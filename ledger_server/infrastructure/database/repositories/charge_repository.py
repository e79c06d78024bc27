"""SQLAlchemy implementation for charge requests."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.db.models import OwnerCharge


class SqlChargeRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        owner_id: str,
        owner_email: str | None,
        points: int,
        fee: int,
        total_payment: int,
        payment_method: str,
    ) -> OwnerCharge:
        charge = OwnerCharge(
            owner_id=owner_id,
            owner_email=owner_email,
            points=points,
            fee=fee,
            total_payment=total_payment,
            payment_method=payment_method,
            status="pending",
            created_at=utcnow(),
        )
        self.session.add(charge)
        await self.session.flush()
        return charge

    async def get(self, charge_id: str) -> OwnerCharge | None:
        stmt = (
            select(OwnerCharge)
            .where(OwnerCharge.id == charge_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def transition(
        self,
        charge_id: str,
        *,
        status: str,
        processed_by: str | None,
        approved_at: datetime | None = None,
        rejected_at: datetime | None = None,
        reject_reason: str | None = None,
        require_owner: bool = False,
    ) -> bool:
        """Move a pending charge to ``status``; False when it was not pending."""
        stmt = update(OwnerCharge).where(
            OwnerCharge.id == charge_id,
            OwnerCharge.status == "pending",
        )
        if require_owner:
            stmt = stmt.where(OwnerCharge.owner_id.is_not(None))
        values: dict = {"status": status, "processed_by": processed_by}
        if approved_at is not None:
            values["approved_at"] = approved_at
        if rejected_at is not None:
            values["rejected_at"] = rejected_at
            values["reject_reason"] = reject_reason
        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_for_owner(self, owner_id: str, limit: int, offset: int) -> Sequence[OwnerCharge]:
        stmt = (
            select(OwnerCharge)
            .where(OwnerCharge.owner_id == owner_id)
            .order_by(desc(OwnerCharge.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_all(self, status: str | None, limit: int, offset: int) -> Sequence[OwnerCharge]:
        stmt = select(OwnerCharge)
        if status and status != "all":
            stmt = stmt.where(OwnerCharge.status == status)
        stmt = stmt.order_by(desc(OwnerCharge.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def count(self, status: str | None = None) -> int:
        stmt = select(func.count()).select_from(OwnerCharge)
        if status:
            stmt = stmt.where(OwnerCharge.status == status)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
