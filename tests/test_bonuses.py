from datetime import datetime, timedelta, timezone

import pytest

from ledger_server.modules.bonuses import BonusService
from ledger_server.modules.common import InsufficientBalanceError
from ledger_server.modules.members import MemberService
from ledger_server.modules.sponsors import SponsorService
from ledger_server.modules.stores import InvalidBonusSettingError, StoreCreateInput, StoreService
from ledger_server.modules.wallets import VISIT_BONUS, WalletService

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
async def sponsored_store(session, owner):
    stores = StoreService.with_session(session)
    store = await stores.register_store(owner.id, owner.email, StoreCreateInput(name="Dumpling House"))
    await WalletService.with_session(session).adjust(owner.id, 11000, "seed")
    await SponsorService.with_session(session).purchase_level(store.id, 1, actor_id=owner.id, now=NOW)
    await stores.update_bonus_settings(store.id, owner.id, 100, True)
    await stores.update_sponsor_bonus(store.id, owner.id, 200, True)
    await session.commit()
    return store


async def test_visit_bonus_pays_owner_and_sponsor_parts(session, owner, sponsored_store):
    member = await MemberService.with_session(session).create_member("visitor", None)

    bonus = await BonusService.with_session(session).grant_visit_bonus(
        sponsored_store.id, member.id, now=NOW + timedelta(days=1)
    )
    await session.commit()

    assert bonus.granted
    assert (bonus.owner_points, bonus.sponsor_points, bonus.total_points) == (100, 200, 300)
    assert bonus.owner_balance_after == 700
    assert bonus.member_points_after == 300
    store = await StoreService.with_session(session).get_store(sponsored_store.id)
    assert store.total_bonus_given == 300
    rows = await WalletService.with_session(session).list_transactions(owner.id, kind=VISIT_BONUS)
    assert [row.amount for row in rows] == [-300]


async def test_expired_sponsorship_drops_sponsor_part(session, sponsored_store):
    member = await MemberService.with_session(session).create_member("visitor", None)

    bonus = await BonusService.with_session(session).grant_visit_bonus(
        sponsored_store.id, member.id, now=NOW + timedelta(days=31)
    )

    assert (bonus.owner_points, bonus.sponsor_points) == (100, 0)
    assert bonus.owner_balance_after == 900


async def test_no_configured_bonus_writes_nothing(session, owner):
    store = await StoreService.with_session(session).register_store(
        owner.id, owner.email, StoreCreateInput(name="Plain Diner")
    )
    member = await MemberService.with_session(session).create_member("visitor", None)

    bonus = await BonusService.with_session(session).grant_visit_bonus(store.id, member.id)

    assert not bonus.granted
    assert bonus.total_points == 0
    assert await WalletService.with_session(session).get_wallet(owner.id) is None


async def test_bonus_refused_when_owner_wallet_short(session, owner, sponsored_store):
    await WalletService.with_session(session).adjust(owner.id, -1000)
    member = await MemberService.with_session(session).create_member("visitor", None)
    await session.commit()

    with pytest.raises(InsufficientBalanceError):
        await BonusService.with_session(session).grant_visit_bonus(
            sponsored_store.id, member.id, now=NOW + timedelta(days=1)
        )
    await session.rollback()

    assert (await MemberService.with_session(session).get_member(member.id)).points == 0


async def test_negative_bonus_setting_rejected(session, owner, sponsored_store):
    with pytest.raises(InvalidBonusSettingError):
        await StoreService.with_session(session).update_bonus_settings(sponsored_store.id, owner.id, -1, True)
