"""Visit bonuses funded from the store owner's wallet."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.infrastructure.database.repositories.bonus_repository import SqlBonusRepository
from ledger_server.modules.common.exceptions import MissingOwnerReferenceError
from ledger_server.modules.members import VISIT_BONUS as MEMBER_VISIT_BONUS, MemberService
from ledger_server.modules.notifications import NotificationService
from ledger_server.modules.stores import StoreService
from ledger_server.modules.wallets import VISIT_BONUS, WalletService

from .models import VisitBonus
from .repository import BonusRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BonusService:
    repository: BonusRepository
    stores: StoreService
    wallets: WalletService
    members: MemberService
    notifications: NotificationService

    @classmethod
    def with_session(cls, session: AsyncSession) -> "BonusService":
        return cls(
            SqlBonusRepository(session),
            StoreService.with_session(session),
            WalletService.with_session(session),
            MemberService.with_session(session),
            NotificationService.with_session(session),
        )

    async def grant_visit_bonus(
        self, store_id: str, member_id: str, *, now: datetime | None = None
    ) -> VisitBonus:
        """Pay the store's configured bonus to a verified visitor.

        The sponsor part only applies while the store's sponsorship is active.
        Nothing is written when no bonus is configured.
        """
        now = now or utcnow()
        store = await self.stores.get_store(store_id)
        member = await self.members.get_member(member_id)

        owner_points = store.bonus_points_per_visit if store.bonus_points_active else 0
        sponsor_points = (
            store.sponsor_bonus_points
            if store.sponsor_bonus_active and store.sponsor_active(now)
            else 0
        )
        bonus = VisitBonus(
            store_id=store.id,
            member_id=member.id,
            owner_points=owner_points,
            sponsor_points=sponsor_points,
        )
        total = bonus.total_points
        if total <= 0:
            return bonus
        if not store.owner_id:
            raise MissingOwnerReferenceError(f"Store {store_id} has no owner id")

        bonus.owner_balance_after = await self.wallets.debit(
            store.owner_id,
            total,
            VISIT_BONUS,
            f"Visit bonus to {member.nickname or member.id}",
            reference_id=member.id,
        )
        bonus.member_points_after = await self.members.credit_points(
            member.id,
            total,
            MEMBER_VISIT_BONUS,
            f"{store.name} visit bonus",
        )
        await self.stores.record_bonus_given(store.id, total)
        payment = await self.repository.add(
            store_id=store.id,
            owner_id=store.owner_id,
            member_id=member.id,
            owner_points=owner_points,
            sponsor_points=sponsor_points,
        )
        bonus.payment_id = payment.id
        bonus.created_at = payment.created_at
        logger.info(
            "Visit bonus %sP from store %s to member %s (owner %sP, sponsor %sP)",
            total,
            store.id,
            member.id,
            owner_points,
            sponsor_points,
        )
        await self.notifications.notify(
            member.id,
            "Visit bonus",
            f"You received {total:,}P for visiting {store.name}.",
        )
        return bonus
