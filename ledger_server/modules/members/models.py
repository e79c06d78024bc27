"""Domain models for member point balances."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

REFUND = "refund"
USE = "use"
ADMIN_GIVE = "admin_give"
ADMIN_DEDUCT = "admin_deduct"
VISIT_BONUS = "visit_bonus"


@dataclass(slots=True)
class Member:
    id: str
    nickname: Optional[str]
    email: Optional[str]
    points: int
    blocked: bool = False
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class PointEntry:
    id: str
    member_id: str
    type: str
    amount: int
    description: Optional[str]
    order_id: Optional[str]
    created_at: Optional[datetime]
