"""SQLAlchemy implementation for orders and products."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.db.models import Order, Product


class SqlOrderRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, order_id: str) -> Order | None:
        stmt = select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create(
        self,
        *,
        user_id: str,
        user_nickname: str | None,
        product_id: str,
        product_name: str,
        point_cost: int,
    ) -> Order:
        order = Order(
            user_id=user_id,
            user_nickname=user_nickname,
            product_id=product_id,
            product_name=product_name,
            point_cost=point_cost,
            status="pending",
            created_at=utcnow(),
        )
        self.session.add(order)
        await self.session.flush()
        return order

    async def transition(self, order_id: str, current: str, target: str, note: str | None) -> bool:
        values: dict = {"status": target, "updated_at": utcnow()}
        if note is not None:
            values["note"] = note
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.status == current)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def list_orders(self, status: str | None, limit: int, offset: int) -> Sequence[Order]:
        stmt = select(Order)
        if status and status != "all":
            stmt = stmt.where(Order.status == status)
        stmt = stmt.order_by(desc(Order.created_at)).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def status_counts(self) -> dict[str, int]:
        stmt = select(Order.status, func.count()).group_by(Order.status)
        result = await self.session.execute(stmt)
        return {status: int(count) for status, count in result.all()}

    async def get_product(self, product_id: str) -> Product | None:
        stmt = select(Product).where(Product.id == product_id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def create_product(
        self, *, name: str, point_cost: int, stock: int, product_id: str | None = None
    ) -> Product:
        product = Product(name=name, point_cost=point_cost, stock=stock, created_at=utcnow())
        if product_id:
            product.id = product_id
        self.session.add(product)
        await self.session.flush()
        return product

    async def change_stock(self, product_id: str, delta: int) -> bool:
        """Move stock by ``delta``; a decrement only matches while stock remains."""
        stmt = update(Product).where(Product.id == product_id)
        if delta < 0:
            stmt = stmt.where(Product.stock >= -delta)
        stmt = stmt.values(stock=Product.stock + delta).execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        return result.rowcount == 1
