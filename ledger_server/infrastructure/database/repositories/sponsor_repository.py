"""SQLAlchemy implementation for sponsor level payments."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.db.models import SponsorLevelPayment


class SqlSponsorPaymentRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(
        self,
        *,
        store_id: str,
        store_name: str | None,
        owner_id: str,
        owner_email: str | None,
        previous_level: int,
        new_level: int,
        plan_label: str,
        price: int,
        weight: int,
        paid_at: datetime,
        expires_at: datetime,
    ) -> SponsorLevelPayment:
        payment = SponsorLevelPayment(
            store_id=store_id,
            store_name=store_name,
            owner_id=owner_id,
            owner_email=owner_email,
            previous_level=previous_level,
            new_level=new_level,
            plan_label=plan_label,
            price=price,
            weight=weight,
            paid_at=paid_at,
            expires_at=expires_at,
        )
        self.session.add(payment)
        await self.session.flush()
        return payment

    async def list_payments(
        self, *, owner_id: str | None, store_id: str | None, limit: int
    ) -> Sequence[SponsorLevelPayment]:
        stmt = select(SponsorLevelPayment)
        if owner_id:
            stmt = stmt.where(SponsorLevelPayment.owner_id == owner_id)
        if store_id:
            stmt = stmt.where(SponsorLevelPayment.store_id == store_id)
        stmt = stmt.order_by(desc(SponsorLevelPayment.paid_at)).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()
