"""Domain models for visit bonuses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class VisitBonus:
    store_id: str
    member_id: str
    owner_points: int
    sponsor_points: int
    payment_id: Optional[str] = None
    owner_balance_after: Optional[int] = None
    member_points_after: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def total_points(self) -> int:
        return self.owner_points + self.sponsor_points

    @property
    def granted(self) -> bool:
        return self.payment_id is not None
