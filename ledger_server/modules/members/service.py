"""Member point balances and their history."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.db.models import Member as MemberModel, PointHistory as PointHistoryModel
from ledger_server.infrastructure.database.repositories.member_repository import SqlMemberRepository
from ledger_server.modules.common.exceptions import InsufficientBalanceError, InvalidAmountError
from ledger_server.modules.notifications import NotificationService

from .exceptions import MemberNotFoundError
from .models import ADMIN_DEDUCT, ADMIN_GIVE, Member, PointEntry
from .repository import MemberRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MemberService:
    repository: MemberRepository
    notifications: NotificationService

    @classmethod
    def with_session(cls, session: AsyncSession) -> "MemberService":
        return cls(SqlMemberRepository(session), NotificationService.with_session(session))

    async def get_member(self, member_id: str) -> Member:
        member = await self.repository.get(member_id)
        if member is None:
            raise MemberNotFoundError(f"Member not found: {member_id}")
        return self._to_domain(member)

    async def create_member(self, nickname: str | None, email: str | None, points: int = 0) -> Member:
        if points < 0:
            raise InvalidAmountError("Initial points must not be negative")
        member = await self.repository.create(nickname=nickname, email=email, points=points)
        return self._to_domain(member)

    async def credit_points(
        self,
        member_id: str,
        amount: int,
        kind: str,
        description: str | None,
        *,
        order_id: str | None = None,
    ) -> int:
        self._check_amount(amount)
        return await self._move(member_id, amount, kind, description, order_id)

    async def debit_points(
        self,
        member_id: str,
        amount: int,
        kind: str,
        description: str | None,
        *,
        order_id: str | None = None,
    ) -> int:
        self._check_amount(amount)
        return await self._move(member_id, -amount, kind, description, order_id)

    async def adjust_points(self, member_id: str, amount: int, reason: str | None = None) -> int:
        if amount == 0:
            raise InvalidAmountError("Adjustment amount must not be zero")
        if amount > 0:
            balance = await self.credit_points(member_id, amount, ADMIN_GIVE, reason or "Admin credit")
            title, message = "Points received", f"An administrator gave you {amount:,}P."
        else:
            balance = await self.debit_points(member_id, -amount, ADMIN_DEDUCT, reason or "Admin deduction")
            title, message = "Points deducted", f"An administrator deducted {-amount:,}P."
        if reason:
            message = f"{message} Reason: {reason}"
        await self.notifications.notify(member_id, title, message)
        return balance

    async def list_history(self, member_id: str, limit: int = 50, offset: int = 0) -> list[PointEntry]:
        rows = await self.repository.list_history(member_id, limit, offset)
        return [self._entry_to_domain(row) for row in rows]

    async def _move(
        self,
        member_id: str,
        delta: int,
        kind: str,
        description: str | None,
        order_id: str | None,
    ) -> int:
        applied = await self.repository.apply_delta(member_id, delta)
        member = await self.repository.get(member_id)
        if member is None:
            raise MemberNotFoundError(f"Member not found: {member_id}")
        if not applied:
            logger.info(
                "Refused %s of %sP for member %s: balance %sP",
                kind,
                -delta,
                member_id,
                member.points,
            )
            raise InsufficientBalanceError(member_id, -delta, member.points)

        await self.repository.add_history(
            member_id=member_id,
            type=kind,
            amount=delta,
            description=description,
            order_id=order_id,
        )
        logger.info("Member %s %s %+dP, balance %sP", member_id, kind, delta, member.points)
        return member.points

    @staticmethod
    def _check_amount(amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidAmountError(f"Amount must be a positive integer, got {amount!r}")

    @staticmethod
    def _to_domain(model: MemberModel) -> Member:
        return Member(
            id=model.id,
            nickname=model.nickname,
            email=model.email,
            points=model.points,
            blocked=bool(model.blocked),
            created_at=model.created_at,
        )

    @staticmethod
    def _entry_to_domain(model: PointHistoryModel) -> PointEntry:
        return PointEntry(
            id=model.id,
            member_id=model.member_id,
            type=model.type,
            amount=model.amount,
            description=model.description,
            order_id=model.order_id,
            created_at=model.created_at,
        )
