"""Repository protocol for bonus payments."""

from __future__ import annotations

from typing import Protocol

from ledger_server.db.models import BonusPayment as BonusPaymentModel


class BonusRepository(Protocol):
    async def add(
        self,
        *,
        store_id: str,
        owner_id: str,
        member_id: str,
        owner_points: int,
        sponsor_points: int,
    ) -> BonusPaymentModel:
        ...
