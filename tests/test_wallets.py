import pytest
from sqlalchemy import func, select

from ledger_server.db.models import WalletTransaction
from ledger_server.modules.common import InsufficientBalanceError, InvalidAmountError
from ledger_server.modules.wallets import (
    ADMIN_DEDUCT,
    ADMIN_GIVE,
    SPONSOR_LEVEL,
    VISIT_BONUS,
    WalletService,
)


async def _count_transactions(session, owner_id: str) -> int:
    result = await session.execute(
        select(func.count()).select_from(WalletTransaction).where(WalletTransaction.owner_id == owner_id)
    )
    return result.scalar_one()


async def test_ensure_wallet_creates_empty_wallet_once(session):
    service = WalletService.with_session(session)

    first = await service.ensure_wallet("owner-a", "a@example.com")
    second = await service.ensure_wallet("owner-a")
    await session.commit()

    assert first.balance == 0
    assert first.owner_email == "a@example.com"
    assert second.owner_id == first.owner_id
    assert await service.get_wallet("missing") is None


async def test_debit_refused_without_any_write(session):
    service = WalletService.with_session(session)
    await service.credit("owner-a", 20000, ADMIN_GIVE, "seed")
    await session.commit()

    with pytest.raises(InsufficientBalanceError) as excinfo:
        await service.debit("owner-a", 30000, SPONSOR_LEVEL, "Premium")
    await session.commit()

    assert excinfo.value.required == 30000
    assert excinfo.value.available == 20000
    wallet = await service.get_wallet("owner-a")
    assert wallet.balance == 20000
    assert wallet.total_used == 0
    assert await _count_transactions(session, "owner-a") == 1


async def test_debit_on_fresh_wallet_is_refused(session):
    service = WalletService.with_session(session)

    with pytest.raises(InsufficientBalanceError):
        await service.debit("newcomer", 1, VISIT_BONUS, "bonus")

    wallet = await service.get_wallet("newcomer")
    assert wallet.balance == 0


async def test_credit_then_debit_restores_balance(session):
    service = WalletService.with_session(session)
    await service.credit("owner-a", 5000, ADMIN_GIVE, "seed")

    after_credit = await service.credit("owner-a", 1234, ADMIN_GIVE, "gift")
    after_debit = await service.debit("owner-a", 1234, ADMIN_DEDUCT, "take back")
    await session.commit()

    assert after_credit == 6234
    assert after_debit == 5000
    rows = await service.list_transactions("owner-a")
    assert sorted(row.amount for row in rows) == [-1234, 1234, 5000]
    assert sum(row.amount for row in rows) == after_debit


async def test_credit_tracks_charged_and_fee_totals(session):
    service = WalletService.with_session(session)

    await service.credit("owner-a", 10000, "charge_approved", "charge", charged=12000, fee=2000)
    await service.debit("owner-a", 3000, SPONSOR_LEVEL, "level")

    wallet = await service.get_wallet("owner-a")
    assert wallet.balance == 7000
    assert wallet.total_charged == 12000
    assert wallet.total_fee == 2000
    assert wallet.total_used == 3000
    assert wallet.version == 2


@pytest.mark.parametrize("amount", [0, -5, 1.5, True])
async def test_rejects_non_positive_or_non_integer_amounts(session, amount):
    service = WalletService.with_session(session)

    with pytest.raises(InvalidAmountError):
        await service.credit("owner-a", amount, ADMIN_GIVE, "bad")
    with pytest.raises(InvalidAmountError):
        await service.debit("owner-a", amount, ADMIN_DEDUCT, "bad")


async def test_adjust_gives_and_deducts(session):
    service = WalletService.with_session(session)

    assert await service.adjust("owner-a", 700, "promo") == 700
    assert await service.adjust("owner-a", -200) == 500
    with pytest.raises(InvalidAmountError):
        await service.adjust("owner-a", 0)
    with pytest.raises(InsufficientBalanceError):
        await service.adjust("owner-a", -501)

    rows = await service.list_transactions("owner-a")
    assert {row.type for row in rows} == {ADMIN_GIVE, ADMIN_DEDUCT}
    deducts = await service.list_transactions("owner-a", kind=ADMIN_DEDUCT)
    assert [row.description for row in deducts] == ["Admin deduction"]


async def test_reconcile_matches_balance_with_ledger(session):
    service = WalletService.with_session(session)
    await service.credit("owner-a", 9000, ADMIN_GIVE, "seed")
    await service.debit("owner-a", 4000, VISIT_BONUS, "bonus")

    result = await service.reconcile("owner-a")

    assert result.balance == 5000
    assert result.ledger_total == 5000
    assert result.is_balanced


async def test_reconcile_flags_drift(session):
    service = WalletService.with_session(session)
    await service.credit("owner-a", 9000, ADMIN_GIVE, "seed")
    # a write that bypassed the ledger
    wallet = await service.repository.get_wallet("owner-a")
    wallet.balance = 9500
    await session.flush()

    result = await service.reconcile("owner-a")

    assert result.difference == 500
    assert not result.is_balanced
