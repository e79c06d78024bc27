"""Repository protocol for owner stores."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from ledger_server.db.models import OwnerStore as StoreModel


class StoreRepository(Protocol):
    async def create(self, *, owner_id: str, owner_email: str | None, **fields: Any) -> StoreModel:
        ...

    async def get(self, store_id: str) -> StoreModel | None:
        ...

    async def get_by_place_id(self, place_id: str) -> StoreModel | None:
        ...

    async def list_for_owner(self, owner_id: str) -> Sequence[StoreModel]:
        ...

    async def list_sponsored(self) -> Sequence[StoreModel]:
        ...

    async def update_fields(self, store_id: str, **values: Any) -> bool:
        ...

    async def add_bonus_given(self, store_id: str, amount: int) -> None:
        ...
