"""Notification sink.

Notifications ride along with ledger mutations but must never decide their
outcome: each write happens in its own SAVEPOINT and a failure is only logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.db.models import Notification as NotificationModel
from ledger_server.infrastructure.database.repositories.notification_repository import (
    SqlNotificationRepository,
)

from .models import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NotificationService:
    repository: NotificationRepository
    session: AsyncSession

    @classmethod
    def with_session(cls, session: AsyncSession) -> "NotificationService":
        return cls(SqlNotificationRepository(session), session)

    async def notify(self, recipient_id: str, title: str, message: str) -> Notification | None:
        try:
            async with self.session.begin_nested():
                model = await self.repository.add(
                    recipient_id=recipient_id,
                    title=title,
                    message=message,
                )
        except SQLAlchemyError as exc:
            logger.warning("Notification to %s dropped (%s): %s", recipient_id, title, exc)
            return None
        return self._to_domain(model)

    async def list_for_recipient(
        self, recipient_id: str, unread_only: bool = False, limit: int = 50
    ) -> list[Notification]:
        rows = await self.repository.list_for_recipient(
            recipient_id, unread_only=unread_only, limit=limit
        )
        return [self._to_domain(row) for row in rows]

    async def mark_read(self, notification_id: str, recipient_id: str) -> bool:
        return await self.repository.mark_read(notification_id, recipient_id)

    @staticmethod
    def _to_domain(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            title=model.title,
            message=model.message,
            read=bool(model.read),
            created_at=model.created_at,
        )
