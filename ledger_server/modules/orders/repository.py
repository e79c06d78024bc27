"""Repository protocol for orders and products."""

from __future__ import annotations

from typing import Protocol, Sequence

from ledger_server.db.models import Order as OrderModel, Product as ProductModel


class OrderRepository(Protocol):
    async def get(self, order_id: str) -> OrderModel | None:
        ...

    async def create(
        self,
        *,
        user_id: str,
        user_nickname: str | None,
        product_id: str,
        product_name: str,
        point_cost: int,
    ) -> OrderModel:
        ...

    async def transition(self, order_id: str, current: str, target: str, note: str | None) -> bool:
        ...

    async def list_orders(self, status: str | None, limit: int, offset: int) -> Sequence[OrderModel]:
        ...

    async def status_counts(self) -> dict[str, int]:
        ...

    async def get_product(self, product_id: str) -> ProductModel | None:
        ...

    async def create_product(
        self, *, name: str, point_cost: int, stock: int, product_id: str | None = None
    ) -> ProductModel:
        ...

    async def change_stock(self, product_id: str, delta: int) -> bool:
        ...
