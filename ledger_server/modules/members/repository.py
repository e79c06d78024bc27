"""Repository protocol for members and their point history."""

from __future__ import annotations

from typing import Protocol, Sequence

from ledger_server.db.models import Member as MemberModel, PointHistory as PointHistoryModel


class MemberRepository(Protocol):
    async def create(self, *, nickname: str | None, email: str | None, points: int) -> MemberModel:
        ...

    async def get(self, member_id: str) -> MemberModel | None:
        ...

    async def apply_delta(self, member_id: str, delta: int) -> bool:
        ...

    async def add_history(
        self,
        *,
        member_id: str,
        type: str,
        amount: int,
        description: str | None,
        order_id: str | None,
    ) -> PointHistoryModel:
        ...

    async def list_history(self, member_id: str, limit: int, offset: int) -> Sequence[PointHistoryModel]:
        ...
