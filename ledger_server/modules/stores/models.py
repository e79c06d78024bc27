"""Domain models for owner stores."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ledger_server.core.clock import ensure_utc, utcnow


def is_sponsor_active(
    activated_at: Optional[datetime],
    level: int,
    expires_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> bool:
    """A sponsorship counts only while it was activated, has a tier and has not expired."""
    if activated_at is None or not level or level <= 0 or expires_at is None:
        return False
    return ensure_utc(expires_at) > ensure_utc(now or utcnow())


@dataclass(slots=True)
class Store:
    id: str
    owner_id: Optional[str]
    owner_email: Optional[str]
    name: str
    place_id: Optional[str]
    address: Optional[str] = None
    category: Optional[str] = None
    phone: Optional[str] = None
    is_sponsored: bool = False
    priority_level: int = 0
    priority_weight: int = 0
    sponsor_activated_at: Optional[datetime] = None
    sponsor_expires_at: Optional[datetime] = None
    sponsor_bonus_points: int = 0
    sponsor_bonus_active: bool = False
    bonus_points_per_visit: int = 0
    bonus_points_active: bool = False
    total_bonus_given: int = 0
    created_at: Optional[datetime] = None

    def sponsor_active(self, now: Optional[datetime] = None) -> bool:
        return is_sponsor_active(
            self.sponsor_activated_at,
            self.priority_level,
            self.sponsor_expires_at,
            now,
        )


@dataclass(slots=True)
class StoreCreateInput:
    name: str
    place_id: Optional[str] = None
    address: Optional[str] = None
    category: Optional[str] = None
    phone: Optional[str] = None
