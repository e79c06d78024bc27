"""Repository protocol for charge requests."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ledger_server.db.models import OwnerCharge as ChargeModel


class ChargeRepository(Protocol):
    async def create(
        self,
        *,
        owner_id: str,
        owner_email: str | None,
        points: int,
        fee: int,
        total_payment: int,
        payment_method: str,
    ) -> ChargeModel:
        ...

    async def get(self, charge_id: str) -> ChargeModel | None:
        ...

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
        ...

    async def list_for_owner(self, owner_id: str, limit: int, offset: int) -> Sequence[ChargeModel]:
        ...

    async def list_all(self, status: str | None, limit: int, offset: int) -> Sequence[ChargeModel]:
        ...

    async def count(self, status: str | None = None) -> int:
        ...
