"""Store registration, bonus settings and sponsor switch-off."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_server.db.models import OwnerStore as StoreModel
from ledger_server.infrastructure.database.repositories.store_repository import SqlStoreRepository

from .exceptions import (
    InvalidBonusSettingError,
    StoreAlreadyRegisteredError,
    StoreNotFoundError,
    StoreOwnershipError,
)
from .models import Store, StoreCreateInput
from .repository import StoreRepository

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class StoreService:
    repository: StoreRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "StoreService":
        return cls(SqlStoreRepository(session))

    async def register_store(
        self, owner_id: str, owner_email: str | None, payload: StoreCreateInput
    ) -> Store:
        if payload.place_id:
            existing = await self.repository.get_by_place_id(payload.place_id)
            if existing is not None:
                raise StoreAlreadyRegisteredError(f"Place {payload.place_id} is already registered")
        store = await self.repository.create(
            owner_id=owner_id,
            owner_email=owner_email,
            name=payload.name,
            place_id=payload.place_id,
            address=payload.address,
            category=payload.category,
            phone=payload.phone,
        )
        logger.info("Store %s (%s) registered by %s", store.id, store.name, owner_id)
        return self._to_domain(store)

    async def get_store(self, store_id: str) -> Store:
        store = await self.repository.get(store_id)
        if store is None:
            raise StoreNotFoundError(f"Store not found: {store_id}")
        return self._to_domain(store)

    async def get_owned_store(self, store_id: str, owner_id: str) -> Store:
        store = await self.get_store(store_id)
        if store.owner_id != owner_id:
            raise StoreOwnershipError(f"Store {store_id} does not belong to {owner_id}")
        return store

    async def list_for_owner(self, owner_id: str) -> list[Store]:
        rows = await self.repository.list_for_owner(owner_id)
        return [self._to_domain(row) for row in rows]

    async def list_sponsored(self) -> list[Store]:
        rows = await self.repository.list_sponsored()
        return [self._to_domain(row) for row in rows]

    async def update_bonus_settings(
        self, store_id: str, owner_id: str, points_per_visit: int, active: bool
    ) -> Store:
        self._check_points(points_per_visit)
        await self.get_owned_store(store_id, owner_id)
        await self.repository.update_fields(
            store_id,
            bonus_points_per_visit=points_per_visit,
            bonus_points_active=active,
        )
        return await self.get_store(store_id)

    async def update_sponsor_bonus(
        self, store_id: str, owner_id: str, points: int, active: bool
    ) -> Store:
        self._check_points(points)
        await self.get_owned_store(store_id, owner_id)
        await self.repository.update_fields(
            store_id,
            sponsor_bonus_points=points,
            sponsor_bonus_active=active,
        )
        return await self.get_store(store_id)

    async def activate_sponsor(
        self,
        store_id: str,
        *,
        level: int,
        weight: int,
        activated_at: datetime,
        expires_at: datetime,
    ) -> Store:
        updated = await self.repository.update_fields(
            store_id,
            is_sponsored=True,
            priority_level=level,
            priority_weight=weight,
            sponsor_activated_at=activated_at,
            sponsor_expires_at=expires_at,
        )
        if not updated:
            raise StoreNotFoundError(f"Store not found: {store_id}")
        return await self.get_store(store_id)

    async def record_bonus_given(self, store_id: str, amount: int) -> None:
        await self.repository.add_bonus_given(store_id, amount)

    async def deactivate_sponsor(self, store_id: str) -> Store:
        updated = await self.repository.update_fields(
            store_id,
            is_sponsored=False,
            priority_level=0,
            priority_weight=0,
        )
        if not updated:
            raise StoreNotFoundError(f"Store not found: {store_id}")
        logger.info("Sponsorship of store %s deactivated", store_id)
        return await self.get_store(store_id)

    @staticmethod
    def _check_points(points: int) -> None:
        if isinstance(points, bool) or not isinstance(points, int) or points < 0:
            raise InvalidBonusSettingError(f"Bonus points must be a non-negative integer, got {points!r}")

    @staticmethod
    def _to_domain(model: StoreModel) -> Store:
        return Store(
            id=model.id,
            owner_id=model.owner_id,
            owner_email=model.owner_email,
            name=model.name,
            place_id=model.place_id,
            address=model.address,
            category=model.category,
            phone=model.phone,
            is_sponsored=bool(model.is_sponsored),
            priority_level=model.priority_level or 0,
            priority_weight=model.priority_weight or 0,
            sponsor_activated_at=model.sponsor_activated_at,
            sponsor_expires_at=model.sponsor_expires_at,
            sponsor_bonus_points=model.sponsor_bonus_points or 0,
            sponsor_bonus_active=bool(model.sponsor_bonus_active),
            bonus_points_per_visit=model.bonus_points_per_visit or 0,
            bonus_points_active=bool(model.bonus_points_active),
            total_bonus_given=model.total_bonus_given or 0,
            created_at=model.created_at,
        )
