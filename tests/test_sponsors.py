from datetime import datetime, timedelta, timezone

import pytest

from ledger_server.core.clock import ensure_utc
from ledger_server.core.config import LedgerSettings
from ledger_server.modules.common import InsufficientBalanceError, MissingOwnerReferenceError
from ledger_server.modules.sponsors import PRIORITY_PLANS, SponsorService, UnknownPlanError, get_plan
from ledger_server.modules.stores import (
    StoreCreateInput,
    StoreNotFoundError,
    StoreOwnershipError,
    StoreService,
    is_sponsor_active,
)
from ledger_server.modules.wallets import SPONSOR_LEVEL, WalletService

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


async def _store_with_balance(session, owner, balance, place_id="place-1"):
    store = await StoreService.with_session(session).register_store(
        owner.id, owner.email, StoreCreateInput(name="Noodle Bar", place_id=place_id)
    )
    if balance:
        await WalletService.with_session(session).adjust(owner.id, balance, "seed")
    await session.commit()
    return store


def test_plans_table():
    assert [(plan.level, plan.label, plan.price, plan.weight) for plan in PRIORITY_PLANS] == [
        (1, "Basic", 10000, 1),
        (2, "Premium", 30000, 2),
        (3, "VIP", 50000, 3),
    ]
    with pytest.raises(UnknownPlanError):
        get_plan(4)


@pytest.mark.parametrize(
    "activated_at, level, expires_at, expected",
    [
        (NOW - timedelta(days=1), 2, NOW + timedelta(days=29), True),
        (NOW - timedelta(days=31), 2, NOW - timedelta(days=1), False),
        (NOW - timedelta(days=30), 2, NOW, False),
        (None, 2, NOW + timedelta(days=1), False),
        (NOW, 0, NOW + timedelta(days=1), False),
        (NOW, 1, None, False),
        # naive values as read back from SQLite are treated as UTC
        (datetime(2026, 10, 18), 1, datetime(2026, 11, 17), True),
    ],
)
def test_is_sponsor_active(activated_at, level, expires_at, expected):
    assert is_sponsor_active(activated_at, level, expires_at, now=NOW) is expected


async def test_purchase_refused_when_balance_short(session, owner):
    store = await _store_with_balance(session, owner, 20000)
    service = SponsorService.with_session(session)

    with pytest.raises(InsufficientBalanceError):
        await service.purchase_level(store.id, 2, actor_id=owner.id, now=NOW)
    await session.rollback()

    unchanged = await StoreService.with_session(session).get_store(store.id)
    assert unchanged.priority_level == 0
    assert not unchanged.is_sponsored
    assert (await WalletService.with_session(session).get_wallet(owner.id)).balance == 20000
    assert await service.list_payments(store_id=store.id) == []


async def test_purchase_debits_and_activates(session, owner):
    store = await _store_with_balance(session, owner, 60000)
    service = SponsorService.with_session(session)

    activation = await service.purchase_level(store.id, 3, actor_id=owner.id, now=NOW)
    await session.commit()

    assert activation.balance_after == 10000
    assert activation.store.is_sponsored
    assert activation.store.priority_level == 3
    assert activation.store.priority_weight == 3
    assert ensure_utc(activation.store.sponsor_activated_at) == NOW
    assert ensure_utc(activation.store.sponsor_expires_at) == NOW + timedelta(days=30)
    assert activation.store.sponsor_active(NOW + timedelta(days=29))
    assert not activation.store.sponsor_active(NOW + timedelta(days=30, seconds=1))

    payment = activation.payment
    assert (payment.previous_level, payment.new_level, payment.price, payment.plan_label) == (0, 3, 50000, "VIP")

    rows = await WalletService.with_session(session).list_transactions(owner.id, kind=SPONSOR_LEVEL)
    assert len(rows) == 1
    assert rows[0].amount == -50000
    assert rows[0].reference_id == store.id


async def test_upgrade_restarts_window(session, owner):
    store = await _store_with_balance(session, owner, 40000)
    service = SponsorService.with_session(session, LedgerSettings(sponsor_duration_days=30))
    await service.purchase_level(store.id, 1, actor_id=owner.id, now=NOW)

    later = NOW + timedelta(days=10)
    upgrade = await service.purchase_level(store.id, 2, actor_id=owner.id, now=later)
    await session.commit()

    assert upgrade.balance_after == 0
    assert upgrade.payment.previous_level == 1
    assert ensure_utc(upgrade.store.sponsor_expires_at) == later + timedelta(days=30)
    payments = await service.list_payments(owner_id=owner.id)
    assert sorted(payment.new_level for payment in payments) == [1, 2]


async def test_purchase_requires_ownership(session, owner):
    store = await _store_with_balance(session, owner, 60000)

    with pytest.raises(StoreOwnershipError):
        await SponsorService.with_session(session).purchase_level(store.id, 1, actor_id="someone-else")


async def test_purchase_for_unknown_store_or_orphan_store(session, owner):
    service = SponsorService.with_session(session)
    with pytest.raises(StoreNotFoundError):
        await service.purchase_level("missing", 1)

    orphan = await StoreService.with_session(session).register_store(
        None, None, StoreCreateInput(name="Orphan")
    )
    with pytest.raises(StoreOwnershipError):
        await service.purchase_level(orphan.id, 1, actor_id=owner.id)
    with pytest.raises(MissingOwnerReferenceError):
        await service.purchase_level(orphan.id, 1)


async def test_deactivate_sponsor(session, owner):
    store = await _store_with_balance(session, owner, 10000)
    await SponsorService.with_session(session).purchase_level(store.id, 1, now=NOW)
    stores = StoreService.with_session(session)

    assert [item.id for item in await stores.list_sponsored()] == [store.id]
    deactivated = await stores.deactivate_sponsor(store.id)

    assert not deactivated.is_sponsored
    assert deactivated.priority_level == 0
    assert not deactivated.sponsor_active(NOW)
    assert await stores.list_sponsored() == []
