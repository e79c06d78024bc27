"""SQLAlchemy implementation for owner stores."""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.core.clock import utcnow
from ledger_server.db.models import OwnerStore


class SqlStoreRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, *, owner_id: str, owner_email: str | None, **fields: Any) -> OwnerStore:
        store = OwnerStore(owner_id=owner_id, owner_email=owner_email, created_at=utcnow(), **fields)
        self.session.add(store)
        await self.session.flush()
        await self.session.refresh(store)
        return store

    async def get(self, store_id: str) -> OwnerStore | None:
        stmt = (
            select(OwnerStore)
            .where(OwnerStore.id == store_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_place_id(self, place_id: str) -> OwnerStore | None:
        stmt = select(OwnerStore).where(OwnerStore.place_id == place_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_for_owner(self, owner_id: str) -> Sequence[OwnerStore]:
        stmt = (
            select(OwnerStore)
            .where(OwnerStore.owner_id == owner_id)
            .order_by(desc(OwnerStore.created_at))
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_sponsored(self) -> Sequence[OwnerStore]:
        stmt = (
            select(OwnerStore)
            .where(OwnerStore.is_sponsored.is_(True))
            .order_by(desc(OwnerStore.priority_weight), desc(OwnerStore.sponsor_expires_at))
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def update_fields(self, store_id: str, **values: Any) -> bool:
        stmt = (
            update(OwnerStore)
            .where(OwnerStore.id == store_id)
            .values(updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def add_bonus_given(self, store_id: str, amount: int) -> None:
        stmt = (
            update(OwnerStore)
            .where(OwnerStore.id == store_id)
            .values(total_bonus_given=OwnerStore.total_bonus_given + amount)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
