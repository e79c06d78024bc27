"""SQLAlchemy implementation for bonus payments."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.db.models import BonusPayment


class SqlBonusRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(
        self,
        *,
        store_id: str,
        owner_id: str,
        member_id: str,
        owner_points: int,
        sponsor_points: int,
    ) -> BonusPayment:
        payment = BonusPayment(
            store_id=store_id,
            owner_id=owner_id,
            member_id=member_id,
            owner_points=owner_points,
            sponsor_points=sponsor_points,
            total_points=owner_points + sponsor_points,
            created_at=utcnow(),
        )
        self.session.add(payment)
        await self.session.flush()
        return payment
