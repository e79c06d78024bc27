import pytest

from ledger_server.db.models import Order as OrderModel
from ledger_server.modules.common import AlreadyProcessedError, InsufficientBalanceError
from ledger_server.modules.members import REFUND, USE, MemberService
from ledger_server.modules.orders import (
    CANCELLED,
    COMPLETED,
    PENDING,
    PROCESSING,
    InvalidStatusTransitionError,
    OrderNotFoundError,
    OrderService,
    OutOfStockError,
    can_transition,
)


async def _member_with_order(session, points=1000, cost=500, stock=3, product_id=None):
    members = MemberService.with_session(session)
    orders = OrderService.with_session(session)
    member = await members.create_member("jiwoo", "jiwoo@example.com", points)
    product = await orders.create_product("Free coffee", cost, stock, product_id=product_id)
    order = await orders.place_order(member.id, product.id)
    await session.commit()
    return member, product, order


@pytest.mark.parametrize(
    "current, target, allowed",
    [
        (PENDING, PROCESSING, True),
        (PENDING, CANCELLED, True),
        (PROCESSING, COMPLETED, True),
        (CANCELLED, PENDING, True),
        (CANCELLED, CANCELLED, False),
        (COMPLETED, CANCELLED, False),
        (CANCELLED, PROCESSING, False),
    ],
)
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed


async def test_place_order_takes_points_and_stock(session):
    member, product, order = await _member_with_order(session)

    assert order.status == PENDING
    assert order.point_cost == 500
    assert (await MemberService.with_session(session).get_member(member.id)).points == 500
    assert (await OrderService.with_session(session).get_product(product.id)).stock == 2


async def test_place_order_out_of_stock_or_short_points(session):
    members = MemberService.with_session(session)
    orders = OrderService.with_session(session)
    member = await members.create_member("minho", None, 100)
    sold_out = await orders.create_product("Sold out", 10, 0)
    pricey = await orders.create_product("Steak", 5000, 5)
    await session.commit()

    with pytest.raises(OutOfStockError):
        await orders.place_order(member.id, sold_out.id)
    await session.rollback()
    with pytest.raises(InsufficientBalanceError):
        await orders.place_order(member.id, pricey.id)
    await session.rollback()

    assert (await orders.get_product(pricey.id)).stock == 5
    assert await orders.list_orders() == []


async def test_cancel_refunds_and_restocks(session):
    member, product, order = await _member_with_order(session)
    service = OrderService.with_session(session)

    change = await service.change_status(order.id, CANCELLED, "customer asked")
    await session.commit()

    assert change.previous_status == PENDING
    assert change.order.status == CANCELLED
    assert change.order.note == "customer asked"
    assert change.refunded == 500
    assert change.restocked
    assert not change.has_warnings
    members = MemberService.with_session(session)
    assert (await members.get_member(member.id)).points == 1000
    assert (await service.get_product(product.id)).stock == 3
    history = await members.list_history(member.id)
    assert sorted((entry.type, entry.amount) for entry in history) == [(REFUND, 500), (USE, -500)]


async def test_cancel_twice_is_refused(session):
    member, _, order = await _member_with_order(session)
    service = OrderService.with_session(session)
    await service.change_status(order.id, CANCELLED)
    await session.commit()

    with pytest.raises(InvalidStatusTransitionError):
        await service.change_status(order.id, CANCELLED)

    assert (await MemberService.with_session(session).get_member(member.id)).points == 1000


async def test_synthetic_products_are_not_restocked(session):
    _, _, order = await _member_with_order(session, product_id="default_welcome_drink", stock=0)
    service = OrderService.with_session(session)

    change = await service.change_status(order.id, CANCELLED)

    assert change.refunded == 500
    assert not change.restocked
    assert (await service.get_product("default_welcome_drink")).stock == 0


async def test_restore_redebits_points(session):
    member, _, order = await _member_with_order(session)
    service = OrderService.with_session(session)
    await service.change_status(order.id, CANCELLED)

    change = await service.change_status(order.id, PENDING)
    await session.commit()

    assert change.order.status == PENDING
    assert change.redebited == 500
    assert not change.has_warnings
    assert (await MemberService.with_session(session).get_member(member.id)).points == 500


async def test_restore_without_points_keeps_status_and_warns(session):
    member, _, order = await _member_with_order(session)
    service = OrderService.with_session(session)
    members = MemberService.with_session(session)
    await service.change_status(order.id, CANCELLED)
    await members.adjust_points(member.id, -800, "spent elsewhere")
    await session.commit()

    change = await service.change_status(order.id, PENDING)
    await session.commit()

    assert change.order.status == PENDING
    assert change.redebited == 0
    assert [warning.action for warning in change.warnings] == ["restore_debit"]
    assert change.warnings[0].account_id == member.id
    assert (await service.get_order(order.id)).status == PENDING
    assert (await members.get_member(member.id)).points == 200


async def test_refund_to_missing_member_is_reported(session):
    session.add(
        OrderModel(
            id="order-ghost",
            user_id="ghost-member",
            product_id="default_coffee",
            product_name="Coffee",
            point_cost=300,
            status=PENDING,
        )
    )
    await session.commit()
    service = OrderService.with_session(session)

    change = await service.change_status("order-ghost", CANCELLED)
    await session.commit()

    assert change.order.status == CANCELLED
    assert change.refunded == 0
    assert len(change.warnings) == 1
    warning = change.warnings[0]
    assert (warning.action, warning.account_id, warning.amount) == ("refund", "ghost-member", 300)
    assert "manual correction" in warning.describe()
    assert (await service.get_order("order-ghost")).status == CANCELLED


async def test_full_lifecycle_and_counts(session):
    _, _, order = await _member_with_order(session)
    service = OrderService.with_session(session)

    await service.change_status(order.id, PROCESSING)
    change = await service.change_status(order.id, COMPLETED)

    assert change.refunded == 0 and change.redebited == 0
    counts = await service.status_counts()
    assert counts == {PENDING: 0, PROCESSING: 0, COMPLETED: 1, CANCELLED: 0}
    assert [item.id for item in await service.list_orders(COMPLETED)] == [order.id]


async def test_lost_race_on_status_is_refused(session, monkeypatch):
    _, _, order = await _member_with_order(session)
    service = OrderService.with_session(session)

    async def lose_race(*args, **kwargs):
        return False

    monkeypatch.setattr(service.repository, "transition", lose_race)
    with pytest.raises(AlreadyProcessedError):
        await service.change_status(order.id, CANCELLED)


async def test_unknown_order(session):
    with pytest.raises(OrderNotFoundError):
        await OrderService.with_session(session).change_status("missing", CANCELLED)


async def test_cancel_without_refund_keeps_stock(session):
    members = MemberService.with_session(session)
    orders = OrderService.with_session(session)
    member = await members.create_member("dahye", None, 0)
    freebie = await orders.create_product("Sticker", 0, 2)
    order = await orders.place_order(member.id, freebie.id)

    change = await orders.change_status(order.id, CANCELLED)

    assert change.refunded == 0
    assert not change.restocked
    assert not change.has_warnings
    assert (await orders.get_product(freebie.id)).stock == 1


async def test_failed_refund_keeps_stock(session):
    orders = OrderService.with_session(session)
    product = await orders.create_product("Tumbler", 400, 5)
    session.add(
        OrderModel(
            id="order-lost-member",
            user_id="ghost-member",
            product_id=product.id,
            product_name=product.name,
            point_cost=400,
            status=PENDING,
        )
    )
    await session.commit()

    change = await orders.change_status("order-lost-member", CANCELLED)

    assert [warning.action for warning in change.warnings] == ["refund"]
    assert not change.restocked
    assert (await orders.get_product(product.id)).stock == 5
