"""Domain models for wallet operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

CHARGE_APPROVED = "charge_approved"
SPONSOR_LEVEL = "sponsor_level"
ADMIN_GIVE = "admin_give"
ADMIN_DEDUCT = "admin_deduct"
VISIT_BONUS = "visit_bonus"


@dataclass(slots=True)
class WalletSnapshot:
    owner_id: str
    owner_email: Optional[str]
    balance: int
    total_charged: int
    total_used: int
    total_fee: int
    version: int
    updated_at: Optional[datetime]


@dataclass(slots=True)
class WalletTransactionRecord:
    id: str
    owner_id: str
    type: str
    amount: int
    balance_after: int
    description: Optional[str]
    reference_id: Optional[str]
    created_at: datetime


@dataclass(slots=True)
class Reconciliation:
    owner_id: str
    balance: int
    ledger_total: int

    @property
    def difference(self) -> int:
        return self.balance - self.ledger_total

    @property
    def is_balanced(self) -> bool:
        return self.difference == 0
