"""Charge approval workflow.

A charge moves pending -> completed or pending -> rejected exactly once. The
status change is a compare-and-swap on ``status = 'pending'``; the approval
credit is written in the same transaction, so either both land or neither.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.core.config import LedgerSettings, get_settings
from ledger_server.db.models import OwnerCharge as ChargeModel
from ledger_server.infrastructure.database.repositories.charge_repository import SqlChargeRepository
from ledger_server.modules.common.exceptions import (
    AlreadyProcessedError,
    InvalidAmountError,
    MissingOwnerReferenceError,
)
from ledger_server.modules.notifications import NotificationService
from ledger_server.modules.wallets import CHARGE_APPROVED, WalletService

from .exceptions import ChargeNotFoundError
from .models import (
    CHARGE_OPTIONS,
    COMPLETED,
    PENDING,
    REJECTED,
    ChargeApproval,
    ChargeConfig,
    ChargeRequest,
    compute_fee,
)
from .repository import ChargeRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ChargeService:
    repository: ChargeRepository
    wallets: WalletService
    notifications: NotificationService
    settings: LedgerSettings

    @classmethod
    def with_session(cls, session: AsyncSession, settings: LedgerSettings | None = None) -> "ChargeService":
        return cls(
            SqlChargeRepository(session),
            WalletService.with_session(session),
            NotificationService.with_session(session),
            settings or get_settings().ledger,
        )

    def config(self) -> ChargeConfig:
        return ChargeConfig(
            fee_rate=self.settings.fee_rate,
            min_points=self.settings.min_charge_points,
            options=CHARGE_OPTIONS,
            bank_name=self.settings.bank_name,
            bank_account=self.settings.bank_account,
            bank_holder=self.settings.bank_holder,
        )

    async def create_request(self, owner_id: str, owner_email: str | None, points: int) -> ChargeRequest:
        if isinstance(points, bool) or not isinstance(points, int) or points < self.settings.min_charge_points:
            raise InvalidAmountError(
                f"Minimum charge is {self.settings.min_charge_points}P, got {points!r}"
            )
        fee = compute_fee(points, self.settings.fee_rate)
        charge = await self.repository.create(
            owner_id=owner_id,
            owner_email=owner_email,
            points=points,
            fee=fee,
            total_payment=points + fee,
            payment_method="manual",
        )
        logger.info("Charge %s requested by %s: %sP + fee %sP", charge.id, owner_id, points, fee)
        return self._to_domain(charge)

    async def get(self, charge_id: str) -> ChargeRequest:
        charge = await self.repository.get(charge_id)
        if charge is None:
            raise ChargeNotFoundError(f"Charge request not found: {charge_id}")
        return self._to_domain(charge)

    async def approve(self, charge_id: str, *, admin_id: str | None = None) -> ChargeApproval:
        applied = await self.repository.transition(
            charge_id,
            status=COMPLETED,
            processed_by=admin_id,
            approved_at=utcnow(),
            require_owner=True,
        )
        if not applied:
            await self._refuse(charge_id)

        charge = await self.repository.get(charge_id)
        assert charge is not None and charge.owner_id is not None
        balance = await self.wallets.credit(
            charge.owner_id,
            charge.points,
            CHARGE_APPROVED,
            f"Charge approved ({charge.points:,}P)",
            charged=charge.total_payment,
            fee=charge.fee,
            reference_id=charge.id,
            owner_email=charge.owner_email,
        )
        approved = self._to_domain(charge)
        logger.info(
            "Charge %s approved by %s, owner %s credited %sP",
            approved.id,
            admin_id,
            approved.owner_id,
            approved.points,
        )
        await self.notifications.notify(
            approved.owner_id,
            "Charge approved",
            f"{approved.points:,}P has been added to your wallet.",
        )
        return ChargeApproval(charge=approved, balance_after=balance)

    async def reject(
        self, charge_id: str, *, admin_id: str | None = None, reason: str | None = None
    ) -> ChargeRequest:
        applied = await self.repository.transition(
            charge_id,
            status=REJECTED,
            processed_by=admin_id,
            rejected_at=utcnow(),
            reject_reason=reason,
        )
        if not applied:
            await self._refuse(charge_id, require_owner=False)

        model = await self.repository.get(charge_id)
        assert model is not None
        charge = self._to_domain(model)
        logger.info("Charge %s rejected by %s", charge.id, admin_id)
        if charge.owner_id:
            message = f"Your charge request of {charge.points:,}P was rejected."
            if reason:
                message = f"{message} Reason: {reason}"
            await self.notifications.notify(charge.owner_id, "Charge rejected", message)
        return charge

    async def list_for_owner(self, owner_id: str, limit: int = 50, offset: int = 0) -> list[ChargeRequest]:
        rows = await self.repository.list_for_owner(owner_id, limit, offset)
        return [self._to_domain(row) for row in rows]

    async def list_admin(self, status: str | None = None, limit: int = 50, offset: int = 0) -> list[ChargeRequest]:
        rows = await self.repository.list_all(status, limit, offset)
        return [self._to_domain(row) for row in rows]

    async def pending_count(self) -> int:
        return await self.repository.count(PENDING)

    async def _refuse(self, charge_id: str, require_owner: bool = True) -> None:
        """Explain why the compare-and-swap matched nothing. Always raises."""
        charge = await self.repository.get(charge_id)
        if charge is None:
            raise ChargeNotFoundError(f"Charge request not found: {charge_id}")
        if charge.status != PENDING:
            logger.info("Charge %s already %s, refusing", charge_id, charge.status)
            raise AlreadyProcessedError(f"Charge request {charge_id} is already {charge.status}")
        if require_owner and not charge.owner_id:
            logger.info("Charge %s has no owner reference, refusing", charge_id)
            raise MissingOwnerReferenceError(f"Charge request {charge_id} has no owner id")
        # pending and owned, yet the update missed: lost a race that was rolled back
        raise AlreadyProcessedError(f"Charge request {charge_id} changed concurrently")

    @staticmethod
    def _to_domain(model: ChargeModel) -> ChargeRequest:
        return ChargeRequest(
            id=model.id,
            owner_id=model.owner_id,
            owner_email=model.owner_email,
            points=model.points,
            fee=model.fee,
            total_payment=model.total_payment,
            payment_method=model.payment_method,
            status=model.status,
            processed_by=model.processed_by,
            reject_reason=model.reject_reason,
            created_at=model.created_at,
            approved_at=model.approved_at,
            rejected_at=model.rejected_at,
        )
