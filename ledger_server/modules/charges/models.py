"""Domain models for owner charge requests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

PENDING = "pending"
COMPLETED = "completed"
REJECTED = "rejected"
CHARGE_STATUSES = (PENDING, COMPLETED, REJECTED)

# Amounts offered on the owner charge screen.
CHARGE_OPTIONS = (10000, 30000, 50000, 100000, 200000, 500000)


def compute_fee(points: int, fee_rate: float) -> int:
    """Fee charged on top of ``points``, rounded half up to a whole point."""
    fee = Decimal(points) * Decimal(str(fee_rate))
    return int(fee.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(slots=True)
class ChargeRequest:
    id: str
    owner_id: Optional[str]
    owner_email: Optional[str]
    points: int
    fee: int
    total_payment: int
    payment_method: str
    status: str
    processed_by: Optional[str] = None
    reject_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None


@dataclass(slots=True)
class ChargeApproval:
    charge: ChargeRequest
    balance_after: int


@dataclass(slots=True)
class ChargeConfig:
    fee_rate: float
    min_points: int
    options: tuple[int, ...]
    bank_name: Optional[str]
    bank_account: Optional[str]
    bank_holder: Optional[str]
