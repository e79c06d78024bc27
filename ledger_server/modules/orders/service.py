"""Order status changes and their point compensations.

The status write is the primary effect and always commits once its
compare-and-swap wins. Refunds, restocks and restore debits follow, each in
its own SAVEPOINT; a failed one is reported as a ``PartialFailure`` for
manual reconciliation instead of undoing the status change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.db.models import Order as OrderModel, Product as ProductModel
from ledger_server.infrastructure.database.repositories.order_repository import SqlOrderRepository
from ledger_server.modules.common.exceptions import AlreadyProcessedError, InvalidAmountError, LedgerError
from ledger_server.modules.common.models import PartialFailure
from ledger_server.modules.members import REFUND, USE, MemberService
from ledger_server.modules.notifications import NotificationService

from .exceptions import (
    InvalidStatusTransitionError,
    OrderNotFoundError,
    OutOfStockError,
    ProductNotFoundError,
)
from .models import (
    CANCELLED,
    ORDER_STATUSES,
    PENDING,
    Order,
    OrderStatusChange,
    Product,
    can_transition,
    is_stocked_product,
)
from .repository import OrderRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OrderService:
    repository: OrderRepository
    members: MemberService
    notifications: NotificationService
    session: AsyncSession

    @classmethod
    def with_session(cls, session: AsyncSession) -> "OrderService":
        return cls(
            SqlOrderRepository(session),
            MemberService.with_session(session),
            NotificationService.with_session(session),
            session,
        )

    async def get_order(self, order_id: str) -> Order:
        order = await self.repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order not found: {order_id}")
        return self._to_domain(order)

    async def list_orders(self, status: str | None = None, limit: int = 50, offset: int = 0) -> list[Order]:
        rows = await self.repository.list_orders(status, limit, offset)
        return [self._to_domain(row) for row in rows]

    async def status_counts(self) -> dict[str, int]:
        counts = dict.fromkeys(ORDER_STATUSES, 0)
        counts.update(await self.repository.status_counts())
        return counts

    async def create_product(
        self, name: str, point_cost: int, stock: int = 0, product_id: str | None = None
    ) -> Product:
        if point_cost < 0 or stock < 0:
            raise InvalidAmountError("Point cost and stock must not be negative")
        product = await self.repository.create_product(
            name=name, point_cost=point_cost, stock=stock, product_id=product_id
        )
        return self._product_to_domain(product)

    async def get_product(self, product_id: str) -> Product:
        product = await self.repository.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product not found: {product_id}")
        return self._product_to_domain(product)

    async def place_order(self, member_id: str, product_id: str) -> Order:
        """Exchange a member's points for a product; all or nothing."""
        product = await self.get_product(product_id)
        member = await self.members.get_member(member_id)

        if is_stocked_product(product.id):
            taken = await self.repository.change_stock(product.id, -1)
            if not taken:
                raise OutOfStockError(f"Product {product.id} is out of stock")

        order = await self.repository.create(
            user_id=member.id,
            user_nickname=member.nickname,
            product_id=product.id,
            product_name=product.name,
            point_cost=product.point_cost,
        )
        if product.point_cost > 0:
            await self.members.debit_points(
                member.id,
                product.point_cost,
                USE,
                f"Order: {product.name}",
                order_id=order.id,
            )
        logger.info("Order %s placed by member %s for %sP", order.id, member.id, product.point_cost)
        return self._to_domain(order)

    async def change_status(
        self, order_id: str, new_status: str, note: str | None = None
    ) -> OrderStatusChange:
        order = await self.repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(f"Order not found: {order_id}")
        previous = order.status
        if not can_transition(previous, new_status):
            logger.info("Order %s: refused transition %s -> %s", order_id, previous, new_status)
            raise InvalidStatusTransitionError(
                f"Order {order_id} cannot move from {previous} to {new_status}"
            )

        applied = await self.repository.transition(order_id, previous, new_status, note)
        if not applied:
            raise AlreadyProcessedError(f"Order {order_id} changed concurrently, reload and retry")
        logger.info("Order %s status %s -> %s", order_id, previous, new_status)

        order = await self.repository.get(order_id)
        assert order is not None
        change = OrderStatusChange(order=self._to_domain(order), previous_status=previous)
        if new_status == CANCELLED:
            await self._refund(change)
            # stock only comes back together with the points
            if change.refunded:
                await self._restock(change)
        elif previous == CANCELLED and new_status == PENDING:
            await self._redebit(change)

        return change

    async def _refund(self, change: OrderStatusChange) -> None:
        order = change.order
        if order.point_cost <= 0 or not order.user_id:
            return
        try:
            async with self.session.begin_nested():
                await self.members.credit_points(
                    order.user_id,
                    order.point_cost,
                    REFUND,
                    f"Order cancelled: {order.product_name or order.id}",
                    order_id=order.id,
                )
        except (LedgerError, SQLAlchemyError) as exc:
            self._flag(change, PartialFailure("refund", order.user_id, order.point_cost, str(exc)))
            return
        change.refunded = order.point_cost
        await self.notifications.notify(
            order.user_id,
            "Order cancelled",
            f"Your order for {order.product_name or 'a reward'} was cancelled and {order.point_cost:,}P refunded.",
        )

    async def _restock(self, change: OrderStatusChange) -> None:
        order = change.order
        if not is_stocked_product(order.product_id):
            return
        try:
            async with self.session.begin_nested():
                restocked = await self.repository.change_stock(order.product_id, 1)
                if not restocked:
                    raise ProductNotFoundError(f"Product not found: {order.product_id}")
        except (LedgerError, SQLAlchemyError) as exc:
            self._flag(change, PartialFailure("restock", order.product_id, 1, str(exc)))
            return
        change.restocked = True

    async def _redebit(self, change: OrderStatusChange) -> None:
        order = change.order
        # The restore still stands when the member cannot cover the cost again;
        # the skipped debit is surfaced for a product decision.
        if order.point_cost <= 0 or not order.user_id:
            return
        try:
            async with self.session.begin_nested():
                await self.members.debit_points(
                    order.user_id,
                    order.point_cost,
                    USE,
                    f"Order restored: {order.product_name or order.id}",
                    order_id=order.id,
                )
        except (LedgerError, SQLAlchemyError) as exc:
            self._flag(change, PartialFailure("restore_debit", order.user_id, order.point_cost, str(exc)))
            return
        change.redebited = order.point_cost

    @staticmethod
    def _flag(change: OrderStatusChange, failure: PartialFailure) -> None:
        logger.warning("Order %s is %s but %s", change.order.id, change.order.status, failure.describe())
        change.warnings.append(failure)

    @staticmethod
    def _to_domain(model: OrderModel) -> Order:
        return Order(
            id=model.id,
            user_id=model.user_id,
            user_nickname=model.user_nickname,
            product_id=model.product_id,
            product_name=model.product_name,
            point_cost=model.point_cost or 0,
            status=model.status,
            note=model.note,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _product_to_domain(model: ProductModel) -> Product:
        return Product(
            id=model.id,
            name=model.name,
            point_cost=model.point_cost,
            stock=model.stock,
            created_at=model.created_at,
        )
