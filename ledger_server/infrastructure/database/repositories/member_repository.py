"""SQLAlchemy implementation for members and point history."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.db.models import Member, PointHistory


class SqlMemberRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, *, nickname: str | None, email: str | None, points: int) -> Member:
        member = Member(
            nickname=nickname,
            email=email,
            points=points,
            blocked=False,
            created_at=utcnow(),
        )
        self.session.add(member)
        await self.session.flush()
        return member

    async def get(self, member_id: str) -> Member | None:
        stmt = (
            select(Member)
            .where(Member.id == member_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def apply_delta(self, member_id: str, delta: int) -> bool:
        stmt = update(Member).where(Member.id == member_id)
        if delta < 0:
            stmt = stmt.where(Member.points >= -delta)
        stmt = stmt.values(points=Member.points + delta, updated_at=utcnow()).execution_options(
            synchronize_session=False
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def add_history(
        self,
        *,
        member_id: str,
        type: str,
        amount: int,
        description: str | None,
        order_id: str | None,
    ) -> PointHistory:
        entry = PointHistory(
            member_id=member_id,
            type=type,
            amount=amount,
            description=description,
            order_id=order_id,
            created_at=utcnow(),
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_history(self, member_id: str, limit: int, offset: int) -> Sequence[PointHistory]:
        stmt = (
            select(PointHistory)
            .where(PointHistory.member_id == member_id)
            .order_by(desc(PointHistory.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
