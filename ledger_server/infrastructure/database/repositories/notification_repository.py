"""SQLAlchemy implementation for notifications."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.db.models import Notification


class SqlNotificationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, *, recipient_id: str, title: str, message: str) -> Notification:
        notification = Notification(
            recipient_id=recipient_id,
            title=title,
            message=message,
            read=False,
            created_at=utcnow(),
        )
        self.session.add(notification)
        await self.session.flush()
        return notification

    async def list_for_recipient(
        self, recipient_id: str, *, unread_only: bool, limit: int
    ) -> Sequence[Notification]:
        stmt = select(Notification).where(Notification.recipient_id == recipient_id)
        if unread_only:
            stmt = stmt.where(Notification.read.is_(False))
        stmt = stmt.order_by(desc(Notification.created_at)).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def mark_read(self, notification_id: str, recipient_id: str) -> bool:
        stmt = (
            update(Notification)
            .where(Notification.id == notification_id, Notification.recipient_id == recipient_id)
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
