"""Domain models for sponsor level purchases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ledger_server.modules.stores.models import Store


@dataclass(slots=True)
class SponsorPayment:
    id: str
    store_id: str
    store_name: Optional[str]
    owner_id: str
    owner_email: Optional[str]
    previous_level: int
    new_level: int
    plan_label: str
    price: int
    weight: int
    paid_at: datetime
    expires_at: datetime


@dataclass(slots=True)
class SponsorActivation:
    store: Store
    payment: SponsorPayment
    balance_after: int
