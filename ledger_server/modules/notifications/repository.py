"""Repository protocol for notifications."""

from __future__ import annotations

from typing import Protocol, Sequence

from ledger_server.db.models import Notification as NotificationModel


class NotificationRepository(Protocol):
    async def add(self, *, recipient_id: str, title: str, message: str) -> NotificationModel:
        ...

    async def list_for_recipient(
        self, recipient_id: str, *, unread_only: bool, limit: int
    ) -> Sequence[NotificationModel]:
        ...

    async def mark_read(self, notification_id: str, recipient_id: str) -> bool:
        ...
