"""Sponsor level purchase.

Buying a level debits the owner's wallet by the plan price and opens a fresh
sponsorship window; an upgrade before expiry simply restarts the window.
The debit, the store update and the audit row share one transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.core.config import LedgerSettings, get_settings
from ledger_server.db.models import SponsorLevelPayment as PaymentModel
from ledger_server.infrastructure.database.repositories.sponsor_repository import (
    SqlSponsorPaymentRepository,
)
from ledger_server.modules.common.exceptions import MissingOwnerReferenceError
from ledger_server.modules.notifications import NotificationService
from ledger_server.modules.stores import StoreOwnershipError, StoreService
from ledger_server.modules.wallets import SPONSOR_LEVEL, WalletService

from .models import SponsorActivation, SponsorPayment
from .plans import PRIORITY_PLANS, SponsorPlan, get_plan
from .repository import SponsorPaymentRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SponsorService:
    repository: SponsorPaymentRepository
    stores: StoreService
    wallets: WalletService
    notifications: NotificationService
    settings: LedgerSettings

    @classmethod
    def with_session(cls, session: AsyncSession, settings: LedgerSettings | None = None) -> "SponsorService":
        return cls(
            SqlSponsorPaymentRepository(session),
            StoreService.with_session(session),
            WalletService.with_session(session),
            NotificationService.with_session(session),
            settings or get_settings().ledger,
        )

    @staticmethod
    def plans() -> tuple[SponsorPlan, ...]:
        return PRIORITY_PLANS

    async def purchase_level(
        self,
        store_id: str,
        level: int,
        *,
        actor_id: str | None = None,
        now: datetime | None = None,
    ) -> SponsorActivation:
        plan = get_plan(level)
        store = await self.stores.get_store(store_id)
        if actor_id is not None and store.owner_id != actor_id:
            raise StoreOwnershipError(f"Store {store_id} does not belong to {actor_id}")
        if not store.owner_id:
            raise MissingOwnerReferenceError(f"Store {store_id} has no owner id")

        paid_at = now or utcnow()
        expires_at = paid_at + timedelta(days=self.settings.sponsor_duration_days)

        balance = await self.wallets.debit(
            store.owner_id,
            plan.price,
            SPONSOR_LEVEL,
            f"{store.name} sponsor level {plan.label}",
            reference_id=store.id,
        )
        updated = await self.stores.activate_sponsor(
            store.id,
            level=plan.level,
            weight=plan.weight,
            activated_at=paid_at,
            expires_at=expires_at,
        )
        model = await self.repository.add(
            store_id=store.id,
            store_name=store.name,
            owner_id=store.owner_id,
            owner_email=store.owner_email,
            previous_level=store.priority_level,
            new_level=plan.level,
            plan_label=plan.label,
            price=plan.price,
            weight=plan.weight,
            paid_at=paid_at,
            expires_at=expires_at,
        )
        payment = self._to_domain(model)
        logger.info(
            "Store %s bought level %s (%s) for %sP, owner %s balance %sP",
            store.id,
            plan.level,
            plan.label,
            plan.price,
            store.owner_id,
            balance,
        )
        await self.notifications.notify(
            store.owner_id,
            "Sponsor level activated",
            f"{store.name} is now {plan.label} until {expires_at:%Y-%m-%d}.",
        )
        return SponsorActivation(store=updated, payment=payment, balance_after=balance)

    async def list_payments(
        self, owner_id: str | None = None, store_id: str | None = None, limit: int = 100
    ) -> list[SponsorPayment]:
        rows = await self.repository.list_payments(owner_id=owner_id, store_id=store_id, limit=limit)
        return [self._to_domain(row) for row in rows]

    @staticmethod
    def _to_domain(model: PaymentModel) -> SponsorPayment:
        return SponsorPayment(
            id=model.id,
            store_id=model.store_id,
            store_name=model.store_name,
            owner_id=model.owner_id,
            owner_email=model.owner_email,
            previous_level=model.previous_level,
            new_level=model.new_level,
            plan_label=model.plan_label,
            price=model.price,
            weight=model.weight,
            paid_at=model.paid_at,
            expires_at=model.expires_at,
        )
