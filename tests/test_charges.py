import asyncio

import pytest
from sqlalchemy import func, select

from ledger_server.core.config import LedgerSettings
from ledger_server.db.models import OwnerCharge, WalletTransaction
from ledger_server.modules.charges import (
    COMPLETED,
    PENDING,
    REJECTED,
    ChargeNotFoundError,
    ChargeService,
    compute_fee,
)
from ledger_server.modules.common import (
    AlreadyProcessedError,
    InvalidAmountError,
    MissingOwnerReferenceError,
)
from ledger_server.modules.notifications import NotificationService
from ledger_server.modules.wallets import CHARGE_APPROVED, WalletService


@pytest.mark.parametrize(
    "points, rate, expected",
    [
        (10000, 0.20, 2000),
        (30000, 0.20, 6000),
        (1002, 0.25, 251),  # 250.5 rounds half up
        (1001, 0.25, 250),  # 250.25
        (1000, 0.0, 0),
    ],
)
def test_compute_fee_rounds_half_up(points, rate, expected):
    assert compute_fee(points, rate) == expected


async def test_create_request_computes_fee_and_total(session, owner):
    service = ChargeService.with_session(session)

    charge = await service.create_request(owner.id, owner.email, 10000)

    assert charge.status == PENDING
    assert charge.fee == 2000
    assert charge.total_payment == 12000
    assert charge.payment_method == "manual"
    assert await service.pending_count() == 1


@pytest.mark.parametrize("points", [999, 0, -1000])
async def test_create_request_enforces_minimum(session, owner, points):
    service = ChargeService.with_session(session, LedgerSettings(min_charge_points=1000))

    with pytest.raises(InvalidAmountError):
        await service.create_request(owner.id, owner.email, points)


async def test_approve_credits_wallet_once(session, owner):
    service = ChargeService.with_session(session)
    charge = await service.create_request(owner.id, owner.email, 10000)
    await session.commit()

    approval = await service.approve(charge.id, admin_id="admin-1")
    await session.commit()

    assert approval.balance_after == 10000
    assert approval.charge.status == COMPLETED
    assert approval.charge.processed_by == "admin-1"
    assert approval.charge.approved_at is not None

    wallet = await WalletService.with_session(session).get_wallet(owner.id)
    assert wallet.balance == 10000
    assert wallet.total_charged == 12000
    assert wallet.total_fee == 2000

    rows = await WalletService.with_session(session).list_transactions(owner.id)
    assert len(rows) == 1
    assert rows[0].type == CHARGE_APPROVED
    assert rows[0].reference_id == charge.id
    assert rows[0].balance_after == 10000

    notes = await NotificationService.with_session(session).list_for_recipient(owner.id)
    assert [note.title for note in notes] == ["Charge approved"]


async def test_second_approve_is_refused(session, owner):
    service = ChargeService.with_session(session)
    charge = await service.create_request(owner.id, owner.email, 10000)
    await service.approve(charge.id)
    await session.commit()

    with pytest.raises(AlreadyProcessedError):
        await service.approve(charge.id)
    await session.rollback()

    wallet = await WalletService.with_session(session).get_wallet(owner.id)
    assert wallet.balance == 10000


async def test_concurrent_approvals_credit_once(session_factory, owner):
    async with session_factory() as setup:
        charge = await ChargeService.with_session(setup).create_request(owner.id, owner.email, 30000)
        await setup.commit()

    async def approve(admin_id):
        async with session_factory() as session:
            try:
                approval = await ChargeService.with_session(session).approve(charge.id, admin_id=admin_id)
                await session.commit()
                return approval
            except Exception:
                await session.rollback()
                raise

    results = await asyncio.gather(approve("admin-1"), approve("admin-2"), return_exceptions=True)

    approvals = [result for result in results if not isinstance(result, BaseException)]
    failures = [result for result in results if isinstance(result, BaseException)]
    assert len(approvals) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], AlreadyProcessedError)

    async with session_factory() as check:
        wallet = await WalletService.with_session(check).get_wallet(owner.id)
        assert wallet.balance == 30000
        count = await check.execute(
            select(func.count()).select_from(WalletTransaction).where(WalletTransaction.owner_id == owner.id)
        )
        assert count.scalar_one() == 1


async def test_approve_without_owner_reference(session):
    orphan = OwnerCharge(points=10000, fee=2000, total_payment=12000, status=PENDING)
    session.add(orphan)
    await session.commit()
    orphan_id = orphan.id
    service = ChargeService.with_session(session)

    with pytest.raises(MissingOwnerReferenceError):
        await service.approve(orphan_id)
    await session.rollback()

    charge = await service.get(orphan_id)
    assert charge.status == PENDING


async def test_approve_unknown_charge(session):
    with pytest.raises(ChargeNotFoundError):
        await ChargeService.with_session(session).approve("does-not-exist")


async def test_reject_then_approve_is_refused(session, owner):
    service = ChargeService.with_session(session)
    charge = await service.create_request(owner.id, owner.email, 50000)

    rejected = await service.reject(charge.id, admin_id="admin-1", reason="No deposit found")
    await session.commit()

    assert rejected.status == REJECTED
    assert rejected.reject_reason == "No deposit found"
    with pytest.raises(AlreadyProcessedError):
        await service.approve(charge.id)
    with pytest.raises(AlreadyProcessedError):
        await service.reject(charge.id)
    await session.rollback()

    assert await WalletService.with_session(session).get_wallet(owner.id) is None
    notes = await NotificationService.with_session(session).list_for_recipient(owner.id)
    assert "No deposit found" in notes[0].message


async def test_listing_charges(session, owner):
    service = ChargeService.with_session(session)
    first = await service.create_request(owner.id, owner.email, 10000)
    await service.create_request(owner.id, owner.email, 20000)
    await service.approve(first.id)

    assert len(await service.list_for_owner(owner.id)) == 2
    assert [charge.id for charge in await service.list_admin(COMPLETED)] == [first.id]
    assert len(await service.list_admin(PENDING)) == 1
    assert await service.pending_count() == 1


def test_config_exposes_options():
    settings = LedgerSettings(fee_rate=0.1, min_charge_points=5000, bank_name="Rewards Bank")
    service = ChargeService(None, None, None, settings)

    config = service.config()

    assert config.fee_rate == 0.1
    assert config.min_points == 5000
    assert 10000 in config.options
    assert config.bank_name == "Rewards Bank"
