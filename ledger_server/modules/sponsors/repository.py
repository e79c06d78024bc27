"""Repository protocol for sponsor level payments."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ledger_server.db.models import SponsorLevelPayment as PaymentModel


class SponsorPaymentRepository(Protocol):
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
    ) -> PaymentModel:
        ...

    async def list_payments(
        self, *, owner_id: str | None, store_id: str | None, limit: int
    ) -> Sequence[PaymentModel]:
        ...
